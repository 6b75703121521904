"""Timezone helpers built on pytz.

Calendar stepping happens on the wall clock of an instant's own zone, so
these helpers move between aware instants and naive wall-clock values
without losing the zone.
"""

import logging
import re
from datetime import datetime, tzinfo
from typing import Optional

import pytz

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

_OFFSET_PATTERN = re.compile(r"^UTC([+-])(\d{2}):(\d{2})$")


def parse_timezone(timezone_str: str, strict: bool = False) -> Optional[tzinfo]:
    """
    Parse a timezone string which can be either:
    - A standard IANA timezone name (e.g., 'Europe/Moscow')
    - An offset-based string (e.g., 'UTC+03:00')

    Returns a pytz timezone object. Unknown values fall back to UTC,
    or return None when ``strict`` is set.
    """
    try:
        return pytz.timezone(timezone_str)
    except pytz.exceptions.UnknownTimeZoneError:
        pass

    match = _OFFSET_PATTERN.match(timezone_str)
    if match:
        sign, hours, minutes = match.groups()
        total_offset = int(hours) * 60 + int(minutes)
        if sign == "-":
            total_offset = -total_offset
        return pytz.FixedOffset(total_offset)

    if strict:
        return None

    logger.warning("Could not parse timezone '%s', using UTC", timezone_str)
    return pytz.UTC


def ensure_aware(value: datetime, zone: tzinfo) -> datetime:
    """Attach ``zone`` to a naive datetime; aware values pass through."""
    if value.tzinfo is not None and value.utcoffset() is not None:
        return value
    return localize(value.replace(tzinfo=None), zone)


def localize(wall: datetime, zone: Optional[tzinfo]) -> datetime:
    """Turn a naive wall-clock value into an instant in ``zone``.

    pytz zones must go through ``localize`` to pick the right UTC offset
    for the date; other tzinfo implementations are attached directly.
    A ``None`` zone keeps the value naive.
    """
    if zone is None:
        return wall
    localize_fn = getattr(zone, "localize", None)
    if localize_fn is not None:
        return localize_fn(wall)
    return wall.replace(tzinfo=zone)


def normalize(value: datetime) -> datetime:
    """Fix up the UTC offset after timedelta arithmetic on a pytz instant."""
    normalize_fn = getattr(value.tzinfo, "normalize", None)
    if normalize_fn is not None:
        return normalize_fn(value)
    return value


def wall_clock(value: datetime) -> datetime:
    """Naive wall-clock reading of ``value`` in its own zone."""
    return value.replace(tzinfo=None)


def is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


def require_comparable(now: datetime, other: datetime, field: str = "now") -> None:
    """Reject a reference instant that cannot be ordered against ``other``."""
    if is_aware(now) != is_aware(other):
        raise ValidationError(
            "Reference instant and schedule dates must both carry a timezone or both be naive",
            field=field,
        )
