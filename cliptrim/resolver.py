"""Resolve start/finish expressions into an absolute trim range."""

from decimal import Decimal

from cliptrim.errors import (
    ConflictingRelativityError,
    MalformedTimeError,
    NegativeDurationError,
    NegativeStartError,
)
from cliptrim.models import ABSOLUTE, AFTER_START, FROM_END, TimeExpression, TrimPlan
from cliptrim.timecode import EXACT, parse_time, split_sign

_FINISH_MODES = {"": ABSOLUTE, "-": FROM_END, "+": AFTER_START}
_START_MODES = {"": ABSOLUTE, "-": FROM_END}


def parse_expression(raw: str | None, *, finish: bool = False) -> TimeExpression:
    """Read the relativity mode off *raw* and parse the remaining time.

    ``None`` and ``""`` both mean the expression was not given.
    """
    if not raw:
        return TimeExpression(raw=None)

    sign, _ = split_sign(raw)
    modes = _FINISH_MODES if finish else _START_MODES
    if sign not in modes:
        raise MalformedTimeError(
            f"Start time {raw!r} cannot be relative with '{sign}'; use an absolute time or '-'"
        )
    return TimeExpression(raw=raw, mode=modes[sign], value=parse_time(raw))


def resolve(
    start_expr: str | None,
    finish_expr: str | None,
    total_duration: Decimal | str | int,
) -> TrimPlan:
    """Compute the ``(start, duration)`` pair for a trim.

    Start modes: absolute, or ``-T`` meaning T before the finish.
    Finish modes: absolute, ``-T`` meaning T before the end of the media, or
    ``+T`` meaning T after the start. The order below matters: a from-end
    finish is settled before a start that counts back from it, and an
    absolute start is settled before a finish that counts on from it.
    """
    total = Decimal(total_duration)
    start = parse_expression(start_expr)
    finish = parse_expression(finish_expr, finish=True)

    start_sec = start.value if start.present else Decimal(0)
    finish_sec = finish.value if finish.present else total

    if finish.mode == FROM_END:
        finish_sec = EXACT.subtract(total, finish_sec)

    if start.mode == FROM_END:
        if finish.mode == AFTER_START:
            raise ConflictingRelativityError(
                f"Start {start.raw!r} counts back from the finish while finish "
                f"{finish.raw!r} counts on from the start"
            )
        start_sec = EXACT.subtract(finish_sec, start_sec)

    if finish.mode == AFTER_START:
        finish_sec = EXACT.add(start_sec, finish_sec)

    if start_sec < 0:
        raise NegativeStartError(
            f"Start resolves to {start_sec}s, before the beginning of the media"
        )

    duration_sec = EXACT.subtract(finish_sec, start_sec)
    if duration_sec < 0:
        raise NegativeDurationError(
            f"Finish ({finish_sec}s) comes before start ({start_sec}s)"
        )

    return TrimPlan(start_sec=start_sec, duration_sec=duration_sec)
