"""Thin CLI entry point — builds a Manifest and calls the engine."""

import argparse
import json
import logging
import subprocess
import sys
from pathlib import Path

from cliptrim.engine import plan_trim, process
from cliptrim.errors import (
    ConflictingRelativityError,
    MalformedTimeError,
    NegativeDurationError,
    NegativeStartError,
)
from cliptrim.ffutil import FFmpegNotFoundError, ProbeError
from cliptrim.logging_config import setup_logging
from cliptrim.manifest import Manifest, default_output, load_manifest

EXIT_CODES = {
    MalformedTimeError: 3,
    ConflictingRelativityError: 4,
    NegativeDurationError: 5,
    NegativeStartError: 6,
    FFmpegNotFoundError: 7,
    subprocess.CalledProcessError: 8,
    FileExistsError: 9,
    json.JSONDecodeError: 10,
    ProbeError: 11,
    ValueError: 10,
}

TIME_HELP = """\
time expressions:
  S, M:S or H:M:S, seconds may be fractional (90, 1:30, 0:01:30.5)

  --start T      start T into the media (default: 0)
  --start -T     start T before the finish
  --finish T     stop T into the media (default: end of media)
  --finish -T    stop T before the end of the media
  --finish +T    stop T after the start
  --start -T together with --finish +T is rejected.

examples:
  cliptrim trim talk.mp4 -s 1:00 -f +30        30s starting at 1:00
  cliptrim trim talk.mp4 -s -45 -f -10         45s ending 10s before the end
"""

_SIGNED_OPTIONS = ("-s", "--start", "-f", "--finish")


def _join_signed_values(argv: list[str]) -> list[str]:
    """Glue ``-s -1:30`` into ``-s-1:30`` (``--start=-1:30``) so argparse keeps it as a value."""
    out: list[str] = []
    it = iter(argv)
    for arg in it:
        if arg in _SIGNED_OPTIONS:
            value = next(it, None)
            if value is None:
                out.append(arg)
                break
            if value.startswith("-"):
                out.append(f"{arg}={value}" if arg.startswith("--") else f"{arg}{value}")
                continue
            out += [arg, value]
        else:
            out.append(arg)
    return out


def _exit_code(exc: BaseException) -> int:
    for cls in type(exc).__mro__:
        if cls in EXIT_CODES:
            return EXIT_CODES[cls]
    return 1


def _fail(exc: BaseException) -> None:
    if isinstance(exc, subprocess.CalledProcessError):
        stderr = (exc.stderr or "").strip().splitlines()
        tool = Path(exc.cmd[0]).name if exc.cmd else "ffmpeg"
        message = f"{tool} failed: {stderr[-1]}" if stderr else str(exc)
    else:
        message = str(exc)
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(_exit_code(exc))


def _add_range_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("video", nargs="?", type=Path, help="Input media file")
    p.add_argument("--start", "-s", help="Start time expression (see below)")
    p.add_argument("--finish", "-f", help="Finish time expression (see below)")
    p.add_argument("--manifest", "-m", type=Path, help="Path to a JSON manifest file")
    p.add_argument("--verbose", "-v", action="store_true", help="Log ffmpeg/ffprobe commands")


def _build_manifest(args: argparse.Namespace, parser: argparse.ArgumentParser) -> Manifest:
    if args.manifest:
        m = load_manifest(args.manifest)
        # Flags given on the command line win over the manifest.
        if args.start is not None:
            m.start = args.start
        if args.finish is not None:
            m.finish = args.finish
    elif args.video:
        m = Manifest(
            input=args.video,
            output=default_output(args.video),
            start=args.start,
            finish=args.finish,
        )
    else:
        parser.error("provide either a VIDEO argument or --manifest")

    output = getattr(args, "output", None)
    if output:
        m.output = output
    if getattr(args, "reencode", False):
        m.copy_streams = False
    if getattr(args, "overwrite", False):
        m.overwrite = True
    return m


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cliptrim",
        description="ClipTrim — cut a range out of a media file with ffmpeg.",
    )
    sub = parser.add_subparsers(dest="command")

    trim = sub.add_parser(
        "trim",
        help="Trim a media file",
        epilog=TIME_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_range_args(trim)
    trim.add_argument("--output", "-o", type=Path, help="Output file path (default: <name>_trim.<ext>)")
    trim.add_argument("--reencode", action="store_true", help="Re-encode instead of copying streams")
    trim.add_argument("--overwrite", action="store_true", help="Replace an existing output file")
    trim.add_argument("--dry-run", action="store_true", help="Print the ffmpeg command without running it")

    plan = sub.add_parser(
        "plan",
        help="Show the resolved start and duration without trimming",
        epilog=TIME_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_range_args(plan)

    serve = sub.add_parser("serve", help="Launch the web API")
    serve.add_argument("--port", type=int, default=8321, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(_join_signed_values(sys.argv[1:] if argv is None else argv))

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from cliptrim.web import create_app
        app = create_app()
        print(f"ClipTrim web API: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        m = _build_manifest(args, parser)

        if args.command == "plan":
            plan, duration = plan_trim(m)
            start, length = plan.as_args()
            print(f"Media duration: {duration}s")
            print(f"Start:    {start}")
            print(f"Duration: {length}")
            return

        def on_progress(stage: str, frac: float) -> None:
            print(f"  [{frac:3.0%}] {stage}")

        result = process(m, on_progress=None if args.dry_run else on_progress, dry_run=args.dry_run)
    except (ValueError, RuntimeError, OSError, subprocess.CalledProcessError) as e:
        _fail(e)
        return

    if result.dry_run:
        print(" ".join(result.command))
        return

    start, length = result.plan.as_args()
    print()
    print(f"Done! Output: {result.output_path}")
    print(f"  Range: {start}s + {length}s of {result.duration_original}s")
