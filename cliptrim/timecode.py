"""Time token parsing and rendering.

Tokens follow ffmpeg's loose duration syntax: ``S``, ``M:S`` or ``H:M:S``,
where only the seconds field may carry a fraction. Values are kept as
:class:`~decimal.Decimal` so the fraction the user typed reaches ffmpeg
digit for digit.
"""

import re
from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    Context,
    Decimal,
    DivisionByZero,
    Inexact,
    InvalidOperation,
    Overflow,
)

from cliptrim.errors import MalformedTimeError

SIGNS = "+-"

# Add/subtract of parsed tokens never needs rounding; trap it if it ever does.
EXACT = Context(
    prec=MAX_PREC,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
    traps=[InvalidOperation, DivisionByZero, Overflow, Inexact],
)

_INT_FIELD = re.compile(r"\d+")
_SECONDS_FIELD = re.compile(r"(\d*)(?:\.(\d*))?")


def split_sign(token: str) -> tuple[str, str]:
    """Split a leading ``+``/``-`` off *token*. Returns ``(sign, rest)``."""
    if token and token[0] in SIGNS:
        return token[0], token[1:]
    return "", token


def parse_time(token: str) -> Decimal:
    """Convert a time token to decimal seconds.

    A single leading sign is ignored here; callers read it beforehand to
    pick a relativity mode. Hours and minutes are folded into the integer
    seconds and the fraction is re-attached untouched, so
    ``parse_time("1:03:00.25")`` is ``Decimal("3780.25")``.

    Raises:
        MalformedTimeError: if the token has no digits, more than three
            fields, an empty or non-numeric field.
    """
    _, body = split_sign(token)
    fields = body.split(":")
    if len(fields) > 3:
        raise MalformedTimeError(f"Too many ':' fields in time {token!r} (max H:M:S)")

    *higher, seconds = fields
    for field in higher:
        if not _INT_FIELD.fullmatch(field):
            raise MalformedTimeError(f"Invalid hour/minute field {field!r} in time {token!r}")

    match = _SECONDS_FIELD.fullmatch(seconds)
    if match is None or not (match.group(1) or match.group(2)):
        raise MalformedTimeError(f"Invalid seconds field {seconds!r} in time {token!r}")
    whole, fraction = match.group(1) or "0", match.group(2) or "0"

    hours, minutes = ([0, 0] + [int(f) for f in higher])[-2:]
    total = int(whole) + 60 * (minutes + 60 * hours)
    return Decimal(f"{total}.{fraction}")


def normalize(value: Decimal | str | int) -> str:
    """Render seconds in positional notation with a digit before any point."""
    text = format(Decimal(value), "f")
    if text.startswith("."):
        text = "0" + text
    elif text.startswith("-."):
        text = "-0" + text[1:]
    return text
