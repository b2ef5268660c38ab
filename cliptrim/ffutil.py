"""FFmpeg/ffprobe subprocess helpers."""

import json
import shlex
import shutil
import subprocess
from decimal import Decimal, InvalidOperation
from pathlib import Path

from cliptrim.logging_config import logger
from cliptrim.models import ProbeResult, TrimPlan


class FFmpegNotFoundError(RuntimeError):
    pass


class ProbeError(ValueError):
    """Raised when ffprobe output carries no usable duration."""


def check_ffmpeg() -> None:
    """Raise FFmpegNotFoundError if ffmpeg/ffprobe are not on PATH."""
    for cmd in ("ffmpeg", "ffprobe"):
        if shutil.which(cmd) is None:
            raise FFmpegNotFoundError(f"{cmd} not found on PATH")


def _run(cmd: list[str], **kwargs) -> subprocess.CompletedProcess:
    logger.debug("Running: %s", shlex.join(cmd))
    return subprocess.run(cmd, capture_output=True, text=True, check=True, **kwargs)


def probe(input_path: Path) -> ProbeResult:
    """Extract the container duration and stream kinds via ffprobe.

    The duration is read as text and converted to ``Decimal`` directly, so
    ``"60.021000"`` stays exactly that.
    """
    cmd = [
        "ffprobe",
        "-v", "quiet",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        str(input_path),
    ]
    result = _run(cmd)
    data = json.loads(result.stdout)

    fmt = data.get("format", {})
    raw_duration = fmt.get("duration")
    if raw_duration is None:
        raise ProbeError(f"No duration reported for {input_path}")
    try:
        duration = Decimal(raw_duration)
    except InvalidOperation:
        raise ProbeError(f"Unreadable duration {raw_duration!r} for {input_path}") from None

    kinds = {s.get("codec_type") for s in data.get("streams", [])}
    logger.debug("Probed %s: duration=%s streams=%s", input_path, duration, sorted(kinds - {None}))

    return ProbeResult(
        duration=duration,
        format_name=fmt.get("format_name", ""),
        has_video="video" in kinds,
        has_audio="audio" in kinds,
    )


def build_trim_command(
    input_path: Path,
    output_path: Path,
    plan: TrimPlan,
    copy_streams: bool = True,
) -> list[str]:
    """Build the ffmpeg argv that cuts *plan* out of *input_path*.

    ``-ss`` goes before ``-i`` for input seeking; with ``copy_streams`` all
    streams are remuxed untouched, so the cut snaps to the nearest keyframe.
    """
    start, duration = plan.as_args()
    cmd = [
        "ffmpeg", "-hide_banner", "-y",
        "-ss", start,
        "-i", str(input_path),
        "-t", duration,
    ]
    if copy_streams:
        cmd += ["-map", "0", "-c", "copy"]
    cmd.append(str(output_path))
    return cmd


def trim(
    input_path: Path,
    output_path: Path,
    plan: TrimPlan,
    copy_streams: bool = True,
) -> Path:
    """Run ffmpeg to write the trimmed range to *output_path*."""
    _run(build_trim_command(input_path, output_path, plan, copy_streams=copy_streams))
    return output_path
