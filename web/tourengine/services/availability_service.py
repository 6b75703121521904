"""Availability of tour departures at a reference instant."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from ..core.base import BaseService
from ..core.config import Settings
from ..core.timeutils import require_comparable
from ..models import (
    DateRange, Departure, DepartureState, ScheduleAvailability, ScheduleType, TourSchedule,
)
from .recurrence_service import RecurrenceResolver

logger = logging.getLogger(__name__)


class AvailabilityEvaluator(BaseService):
    """Derives active/next departures and bookability from a schedule.

    Nothing is cached: every call recomputes from ``now``.
    """

    def __init__(self, settings: Optional[Settings] = None, recurrence: Optional[RecurrenceResolver] = None):
        super().__init__(settings)
        self.recurrence = recurrence or RecurrenceResolver(self.settings)

    def resolve_occurrence(self, departure: Departure, now: datetime) -> Optional[DateRange]:
        """The departure's relevant range at ``now``: its own range, or the next recurrence."""
        if not departure.is_recurring:
            return departure.date_range
        return self.recurrence.next_occurrence(
            departure.date_range,
            departure.recurrence_pattern,
            departure.recurrence_end_date,
            now,
        )

    def is_departure_active(self, departure: Departure, now: datetime) -> bool:
        require_comparable(now, departure.date_range.start)
        if not departure.is_recurring:
            return departure.date_range.contains(now)

        if departure.recurrence_end_date is not None and departure.recurrence_end_date < now:
            return False
        occurrence = self.resolve_occurrence(departure, now)
        return occurrence is not None and occurrence.contains(now)

    def active_departures(self, schedule: TourSchedule, now: datetime) -> List[Departure]:
        return [d for d in schedule.departures if self.is_departure_active(d, now)]

    def next_departure_with_range(
        self, schedule: TourSchedule, now: datetime
    ) -> Optional[Tuple[Departure, DateRange]]:
        """Departure with the earliest start strictly after ``now``, with that occurrence.

        Ties keep the departure that comes first in the schedule.
        """
        best: Optional[Tuple[Departure, DateRange]] = None
        for departure in schedule.departures:
            require_comparable(now, departure.date_range.start)
            occurrence = self.resolve_occurrence(departure, now)
            if occurrence is None:
                logger.debug("Skipping departure %s: recurrence exhausted", departure.id)
                continue
            if occurrence.start <= now:
                continue
            if best is None or occurrence.start < best[1].start:
                best = (departure, occurrence)
        return best

    def next_departure(self, schedule: TourSchedule, now: datetime) -> Optional[Departure]:
        found = self.next_departure_with_range(schedule, now)
        return found[0] if found else None

    def has_available_departures(self, schedule: TourSchedule, now: datetime) -> bool:
        if schedule.schedule_type == ScheduleType.flexible:
            date_range = schedule.default_date_range
            if date_range is None:
                return False
            require_comparable(now, date_range.end)
            return date_range.end >= now

        for departure in schedule.departures:
            require_comparable(now, departure.date_range.end)
            if not departure.is_recurring:
                if departure.date_range.end >= now:
                    return True
            elif departure.recurrence_end_date is None or departure.recurrence_end_date >= now:
                return True
        return False

    def departure_state(self, departure: Departure, now: datetime) -> DepartureState:
        require_comparable(now, departure.date_range.start)
        if not departure.is_recurring:
            if now < departure.date_range.start:
                return DepartureState.not_yet_started
            if departure.date_range.contains(now):
                return DepartureState.active
            return DepartureState.exhausted

        if departure.recurrence_end_date is not None and departure.recurrence_end_date < now:
            return DepartureState.exhausted
        occurrence = self.resolve_occurrence(departure, now)
        if occurrence is None:
            return DepartureState.exhausted
        if occurrence.contains(now):
            return DepartureState.recurring_current
        return DepartureState.recurring_upcoming

    def upcoming_occurrences(
        self, departure: Departure, now: datetime, limit: Optional[int] = None
    ) -> List[DateRange]:
        """Current and future occurrences, at most ``limit`` (capped by MAX_OCCURRENCES)."""
        max_occurrences = self.settings.MAX_OCCURRENCES
        limit = max_occurrences if limit is None else min(limit, max_occurrences)

        require_comparable(now, departure.date_range.end)
        if not departure.is_recurring:
            if limit > 0 and departure.date_range.end >= now:
                return [departure.date_range]
            return []

        if departure.recurrence_end_date is not None and departure.recurrence_end_date < now:
            return []
        return self.recurrence.upcoming(
            departure.date_range,
            departure.recurrence_pattern,
            departure.recurrence_end_date,
            now,
            limit,
        )

    def evaluate(self, schedule: TourSchedule, now: datetime) -> ScheduleAvailability:
        found = self.next_departure_with_range(schedule, now)
        return ScheduleAvailability(
            has_available_departures=self.has_available_departures(schedule, now),
            active_departures=tuple(self.active_departures(schedule, now)),
            next_departure=found[0] if found else None,
            next_departure_range=found[1] if found else None,
        )
