"""Parse human durations like 1y2mon3w4d5h6m7s."""

import datetime
import logging
import re

logger = logging.getLogger(__name__)

UNIT_SECONDS = {
    "y": 365 * 24 * 60 * 60,
    "year": 365 * 24 * 60 * 60,
    "years": 365 * 24 * 60 * 60,
    "mon": 30 * 24 * 60 * 60,
    "month": 30 * 24 * 60 * 60,
    "months": 30 * 24 * 60 * 60,
    "w": 7 * 24 * 60 * 60,
    "week": 7 * 24 * 60 * 60,
    "weeks": 7 * 24 * 60 * 60,
    "d": 24 * 60 * 60,
    "day": 24 * 60 * 60,
    "days": 24 * 60 * 60,
    "h": 60 * 60,
    "hour": 60 * 60,
    "hours": 60 * 60,
    "m": 60,
    "min": 60,
    "mins": 60,
    "minute": 60,
    "minutes": 60,
    "s": 1,
    "sec": 1,
    "secs": 1,
    "second": 1,
    "seconds": 1,
}

_TERM = re.compile(r"\s*([0-9]+)\s*([a-z]*)\s*")


def parse_duration_seconds(duration: str) -> int:
    """Add up every term of the duration, raising ValueError on junk."""
    text = duration.strip().lower()
    if not text:
        raise ValueError("empty duration")
    total = 0
    position = 0
    while position < len(text):
        match = _TERM.match(text, position)
        if match is None or match.end() == position:
            raise ValueError(f"unparseable duration {duration!r} at {position}")
        amount, unit = match.groups()
        if not unit:
            unit = "s"
        if unit not in UNIT_SECONDS:
            raise ValueError(f"unknown duration unit {unit!r}")
        total += int(amount) * UNIT_SECONDS[unit]
        position = match.end()
    return total


def parse_duration(duration: str | None) -> datetime.timedelta:
    """Turn a duration string into a timedelta, or zero if it makes no sense."""
    if duration is None:
        return datetime.timedelta(0)
    try:
        return datetime.timedelta(seconds=parse_duration_seconds(duration))
    except (ValueError, OverflowError):
        logger.warning("Could not understand the duration %r, using zero", duration)
        return datetime.timedelta(0)
