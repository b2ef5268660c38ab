"""Shared data types used across ClipTrim."""

from dataclasses import dataclass
from decimal import Decimal

from cliptrim.timecode import EXACT, normalize

ABSOLUTE = "absolute"
FROM_END = "from_end"
AFTER_START = "after_start"


@dataclass
class TimeExpression:
    """A start or finish token as typed by the user, split into mode and value."""

    raw: str | None
    mode: str = ABSOLUTE
    value: Decimal | None = None

    @property
    def present(self) -> bool:
        return self.value is not None


@dataclass
class TrimPlan:
    """Absolute start offset and duration handed to ffmpeg."""

    start_sec: Decimal
    duration_sec: Decimal

    @property
    def finish_sec(self) -> Decimal:
        return EXACT.add(self.start_sec, self.duration_sec)

    def as_args(self) -> tuple[str, str]:
        """Return ``(start, duration)`` rendered for ``-ss``/``-t``."""
        return normalize(self.start_sec), normalize(self.duration_sec)


@dataclass
class ProbeResult:
    """Metadata extracted from a media file via ffprobe."""

    duration: Decimal
    format_name: str
    has_video: bool
    has_audio: bool
