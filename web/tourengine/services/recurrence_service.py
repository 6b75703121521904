"""Occurrence computation for recurring departures."""

from __future__ import annotations

import calendar
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from ..core.base import BaseService
from ..core.timeutils import is_aware, localize, normalize, require_comparable, wall_clock
from ..models import DateRange, RecurrencePattern

logger = logging.getLogger(__name__)

# Fixed-length steps, in days
DAY_STEPS = {
    RecurrencePattern.daily: 1,
    RecurrencePattern.weekly: 7,
    RecurrencePattern.biweekly: 14,
}

# Calendar steps, in months
MONTH_STEPS = {
    RecurrencePattern.monthly: 1,
    RecurrencePattern.quarterly: 3,
    RecurrencePattern.yearly: 12,
}


def add_months(wall: datetime, months: int) -> datetime:
    """Shift a wall-clock value by whole months, clamping to the month's last day.

    Jan 31 + 1 month is Feb 28/29, never Mar 2/3.
    """
    month_index = wall.month - 1 + months
    year = wall.year + month_index // 12
    month = month_index % 12 + 1
    day = min(wall.day, calendar.monthrange(year, month)[1])
    return wall.replace(year=year, month=month, day=day)


class RecurrenceResolver(BaseService):
    """Resolves occurrences of a recurring date range.

    Occurrence ``n`` always starts at ``base.start + n * step``, computed on
    the wall clock of the base start's timezone, and lasts as long as the
    base range. Computing from the base rather than from the previous
    occurrence keeps month-end clamping from drifting (Jan 31, Feb 29,
    Mar 31, ...).
    """

    def occurrence_start(self, start: datetime, pattern: RecurrencePattern, index: int) -> datetime:
        """Start of the ``index``-th occurrence of a series starting at ``start``."""
        wall = wall_clock(start)
        if pattern in DAY_STEPS:
            wall = wall + timedelta(days=DAY_STEPS[pattern] * index)
        else:
            wall = add_months(wall, MONTH_STEPS[pattern] * index)
        return localize(wall, start.tzinfo)

    def occurrence_at(self, base: DateRange, pattern: RecurrencePattern, index: int) -> DateRange:
        """The ``index``-th occurrence; index 0 is ``base`` itself."""
        if index < 0:
            raise ValueError("Occurrence index cannot be negative")
        if index == 0:
            return base
        start = self.occurrence_start(base.start, pattern, index)
        return DateRange(start=start, end=normalize(start + base.duration))

    def first_index_at_or_after(self, start: datetime, pattern: RecurrencePattern, now: datetime) -> int:
        """Smallest index whose occurrence starts at or after ``now``.

        A closed-form estimate from the calendar distance is corrected by
        at most a couple of steps either way (DST shifts, month clamping).
        """
        require_comparable(now, start)
        if now <= start:
            return 0

        start_wall = wall_clock(start)
        now_wall = wall_clock(now.astimezone(start.tzinfo)) if is_aware(now) else now

        if pattern in DAY_STEPS:
            step = timedelta(days=DAY_STEPS[pattern])
            estimate = -((start_wall - now_wall) // step)
        else:
            months_between = (now_wall.year - start_wall.year) * 12 + (now_wall.month - start_wall.month)
            estimate = months_between // MONTH_STEPS[pattern]

        index = max(estimate - 1, 0)
        while self.occurrence_start(start, pattern, index) < now:
            index += 1
        while index > 0 and self.occurrence_start(start, pattern, index - 1) >= now:
            index -= 1
        return index

    def next_index(self, base: DateRange, pattern: RecurrencePattern, now: datetime) -> int:
        """Index of the current or next occurrence; 0 while the base range has not ended."""
        require_comparable(now, base.end)
        if base.end >= now:
            return 0
        return self.first_index_at_or_after(base.start, pattern, now)

    def next_occurrence(
        self,
        base: DateRange,
        pattern: RecurrencePattern,
        recurrence_end_date: Optional[datetime],
        now: datetime,
    ) -> Optional[DateRange]:
        """Current or next occurrence of ``base``, or None once the series is exhausted.

        The base range is returned unchanged while ``base.end >= now``.
        Otherwise the first occurrence starting at or after ``now`` is
        returned, unless it starts after ``recurrence_end_date``.
        """
        index = self.next_index(base, pattern, now)
        if index == 0:
            return base

        occurrence = self.occurrence_at(base, pattern, index)
        if recurrence_end_date is not None and occurrence.start > recurrence_end_date:
            logger.debug(
                "Recurrence exhausted: next %s start %s is after end date %s",
                pattern.value, occurrence.start.isoformat(), recurrence_end_date.isoformat(),
            )
            return None
        return occurrence

    def upcoming(
        self,
        base: DateRange,
        pattern: RecurrencePattern,
        recurrence_end_date: Optional[datetime],
        now: datetime,
        limit: int,
    ) -> List[DateRange]:
        """Up to ``limit`` occurrences from the next one onwards, stopping at the series end."""
        occurrences: List[DateRange] = []
        if limit <= 0:
            return occurrences

        index = self.next_index(base, pattern, now)
        while len(occurrences) < limit:
            occurrence = self.occurrence_at(base, pattern, index)
            if index > 0 and recurrence_end_date is not None and occurrence.start > recurrence_end_date:
                break
            occurrences.append(occurrence)
            index += 1
        return occurrences
