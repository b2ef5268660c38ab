"""Orchestrator — probes, resolves and trims the job defined by a Manifest."""

from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Callable

from cliptrim import ffutil
from cliptrim.manifest import Manifest
from cliptrim.models import TrimPlan
from cliptrim.resolver import resolve


@dataclass
class EngineResult:
    output_path: Path
    plan: TrimPlan
    duration_original: Decimal = Decimal(0)
    command: list[str] | None = None
    dry_run: bool = False


def plan_trim(manifest: Manifest) -> tuple[TrimPlan, Decimal]:
    """Probe the input and resolve the manifest's range against its duration."""
    ffutil.check_ffmpeg()
    probe_result = ffutil.probe(manifest.input)
    plan = resolve(manifest.start, manifest.finish, probe_result.duration)
    return plan, probe_result.duration


def process(
    manifest: Manifest,
    on_progress: Callable[[str, float], None] | None = None,
    dry_run: bool = False,
) -> EngineResult:
    """Execute the trim.

    Every time-expression error is raised before ffmpeg is started, so a
    bad range never leaves a partial output behind.

    Args:
        manifest: Validated trim manifest.
        on_progress: Optional callback(stage_name, fraction_complete).
        dry_run: Resolve and build the ffmpeg command without running it.
    """

    def _progress(stage: str, frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    if manifest.input.resolve() == manifest.output.resolve():
        raise ValueError(f"Output {manifest.output} would overwrite the input")
    if not dry_run and manifest.output.exists() and not manifest.overwrite:
        raise FileExistsError(f"Output {manifest.output} already exists (use --overwrite)")

    _progress("Probing media duration", 0.0)
    plan, duration = plan_trim(manifest)
    _progress("Resolved trim range", 0.1)

    command = ffutil.build_trim_command(
        manifest.input, manifest.output, plan, copy_streams=manifest.copy_streams
    )
    if dry_run:
        _progress("Done", 1.0)
        return EngineResult(
            output_path=manifest.output,
            plan=plan,
            duration_original=duration,
            command=command,
            dry_run=True,
        )

    start, length = plan.as_args()
    _progress(f"Trimming {length}s from {start}s", 0.15)
    ffutil.trim(manifest.input, manifest.output, plan, copy_streams=manifest.copy_streams)

    _progress("Done", 1.0)
    return EngineResult(
        output_path=manifest.output,
        plan=plan,
        duration_original=duration,
        command=command,
    )
