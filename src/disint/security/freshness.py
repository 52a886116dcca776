import time
from typing import Optional

from .errors import TimestampError, TimestampFormatError

DEFAULT_TOLERANCE_SECONDS = 5
_MAX_TIMESTAMP = 2**64 - 1


def is_fresh(now: int, claimed: int, tolerance: int = DEFAULT_TOLERANCE_SECONDS) -> bool:
    """Return whether ``claimed`` lies strictly within ``tolerance`` seconds of ``now``.

    The lower bound saturates at zero, so the window is narrower for claimed
    timestamps smaller than the tolerance.
    """
    if now >= claimed + tolerance:
        return False
    if now <= max(claimed - tolerance, 0):
        return False
    return True


def parse_timestamp(timestamp: str) -> int:
    digits = timestamp[1:] if timestamp.startswith("+") else timestamp
    if not digits or not digits.isascii() or not digits.isdigit():
        raise TimestampFormatError()
    value = int(digits)
    if value > _MAX_TIMESTAMP:
        raise TimestampFormatError()
    return value


def current_timestamp() -> int:
    return max(int(time.time()), 0)


def verify_timestamp(
    timestamp: str,
    *,
    tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
    now: Optional[int] = None,
) -> int:
    claimed = parse_timestamp(timestamp)
    now_value = now if now is not None else current_timestamp()
    if not is_fresh(now_value, claimed, tolerance_seconds):
        raise TimestampError()
    return claimed
