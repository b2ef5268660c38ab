"""Errors raised while turning user time expressions into a trim plan."""


class TrimError(ValueError):
    """Base class for user-input defects that abort a trim."""


class MalformedTimeError(TrimError):
    """Raised when a time token is not S, M:S or H:M:S."""


class ConflictingRelativityError(TrimError):
    """Raised when start counts back from finish while finish counts on from start."""


class NegativeDurationError(TrimError):
    """Raised when the resolved finish comes before the resolved start."""


class NegativeStartError(TrimError):
    """Raised when the resolved start falls before the beginning of the media."""
