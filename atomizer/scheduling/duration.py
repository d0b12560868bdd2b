"""Duration parsing for task time estimates.

Estimates arrive as free-form strings from the generation step ("30min",
"2 hours", "1-2days"). They are normalized to whole minutes, rounding
fractions up. A range resolves to its upper bound.
"""

import math
import re
from decimal import Decimal

from atomizer.core.exceptions import DurationParseError

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR
MINUTES_PER_WEEK = 7 * MINUTES_PER_DAY

UNIT_MINUTES: dict[str, int] = {
    "m": 1,
    "min": 1,
    "mins": 1,
    "minute": 1,
    "minutes": 1,
    "h": MINUTES_PER_HOUR,
    "hr": MINUTES_PER_HOUR,
    "hrs": MINUTES_PER_HOUR,
    "hour": MINUTES_PER_HOUR,
    "hours": MINUTES_PER_HOUR,
    "d": MINUTES_PER_DAY,
    "day": MINUTES_PER_DAY,
    "days": MINUTES_PER_DAY,
    "w": MINUTES_PER_WEEK,
    "week": MINUTES_PER_WEEK,
    "weeks": MINUTES_PER_WEEK,
}

_NUMBER = r"\d+(?:\.\d+)?"
DURATION_PATTERN = re.compile(
    rf"^(?:(?P<low>{_NUMBER})\s*-\s*)?(?P<high>{_NUMBER})\s*(?P<unit>[a-z]*)$"
)


def parse_duration(raw: str | int | float) -> int:
    """
    Convert a duration estimate to minutes.

    Args:
        raw: Estimate string, or a bare number of minutes.

    Returns:
        Duration in whole minutes, rounded up.

    Raises:
        DurationParseError: If the value matches no known grammar.

    Example:
        >>> parse_duration("1hour")
        60
        >>> parse_duration("1-2days")
        2880
        >>> parse_duration("1.5h")
        90
    """
    if isinstance(raw, bool):
        raise DurationParseError(raw)

    if isinstance(raw, (int, float)):
        if not math.isfinite(raw) or raw < 0:
            raise DurationParseError(raw)
        return math.ceil(raw)

    if not isinstance(raw, str):
        raise DurationParseError(raw)

    match = DURATION_PATTERN.match(raw.strip().lower())
    if match is None:
        raise DurationParseError(raw)

    unit = match.group("unit")
    if unit and unit not in UNIT_MINUTES:
        raise DurationParseError(raw)
    factor = UNIT_MINUTES[unit] if unit else 1

    high = Decimal(match.group("high"))
    low = match.group("low")
    if low is not None and Decimal(low) > high:
        raise DurationParseError(raw)

    return math.ceil(high * factor)


def format_minutes(minutes: int) -> str:
    """Render minutes for humans, e.g. ``95`` -> ``"1h 35min"``."""
    if minutes < MINUTES_PER_HOUR:
        return f"{minutes}min"

    hours, rest = divmod(minutes, MINUTES_PER_HOUR)
    if rest:
        return f"{hours}h {rest}min"
    return f"{hours}h"
