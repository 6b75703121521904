from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ....models import (
    DateRange, Departure, DepartureState, RecurrencePattern, ScheduleRecurrence,
    ScheduleRecurrencePattern, ScheduleType, TourSchedule,
)
from .common_schemas import DateRangeIn, DateRangeOut, ValidationIssueOut, localize_naive


class DepartureIn(BaseModel):
    """Schema for a departure inside a tour schedule"""
    id: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)
    date_range: DateRangeIn
    is_recurring: bool = False
    recurrence_pattern: Optional[RecurrencePattern] = None
    recurrence_end_date: Optional[datetime] = None
    selected_pricing_options: List[str] = []

    @field_validator("recurrence_end_date")
    @classmethod
    def _localize(cls, v: Optional[datetime]) -> Optional[datetime]:
        return localize_naive(v)

    def to_domain(self) -> Departure:
        return Departure(
            id=self.id,
            label=self.label,
            date_range=self.date_range.to_domain(),
            is_recurring=self.is_recurring,
            recurrence_pattern=self.recurrence_pattern,
            recurrence_end_date=self.recurrence_end_date,
            selected_pricing_options=tuple(self.selected_pricing_options),
        )


class ScheduleRecurrenceIn(BaseModel):
    """Schedule-level recurrence metadata"""
    pattern: ScheduleRecurrencePattern = ScheduleRecurrencePattern.weekly
    interval: int = Field(1, ge=1)
    end_date: Optional[datetime] = None

    @field_validator("end_date")
    @classmethod
    def _localize(cls, v: Optional[datetime]) -> Optional[datetime]:
        return localize_naive(v)

    def to_domain(self) -> ScheduleRecurrence:
        return ScheduleRecurrence(pattern=self.pattern, interval=self.interval, end_date=self.end_date)


class TourScheduleIn(BaseModel):
    """Schema for a tour's dates"""
    schedule_type: ScheduleType = ScheduleType.flexible
    default_date_range: Optional[DateRangeIn] = None
    departures: List[DepartureIn] = []
    recurrence: Optional[ScheduleRecurrenceIn] = None
    days: Optional[int] = Field(None, ge=0)
    nights: Optional[int] = Field(None, ge=0)

    def to_domain(self) -> TourSchedule:
        return TourSchedule(
            schedule_type=self.schedule_type,
            default_date_range=self.default_date_range.to_domain() if self.default_date_range else None,
            departures=tuple(d.to_domain() for d in self.departures),
            recurrence=self.recurrence.to_domain() if self.recurrence else None,
            days=self.days,
            nights=self.nights,
        )


class DepartureOut(BaseModel):
    """Schema for departure responses"""
    id: str
    label: str
    date_range: DateRangeOut
    is_recurring: bool
    recurrence_pattern: Optional[RecurrencePattern] = None
    recurrence_end_date: Optional[datetime] = None
    selected_pricing_options: List[str] = []
    state: DepartureState

    @classmethod
    def from_domain(cls, departure: Departure, state: DepartureState) -> "DepartureOut":
        return cls(
            id=departure.id,
            label=departure.label,
            date_range=DateRangeOut.from_domain(departure.date_range),
            is_recurring=departure.is_recurring,
            recurrence_pattern=departure.recurrence_pattern,
            recurrence_end_date=departure.recurrence_end_date,
            selected_pricing_options=list(departure.selected_pricing_options),
            state=state,
        )


class ScheduleAvailabilityOut(BaseModel):
    """Schema for schedule evaluation responses"""
    evaluated_at: datetime
    has_available_departures: bool
    active_departures: List[DepartureOut]
    next_departure: Optional[DepartureOut] = None
    next_departure_range: Optional[DateRangeOut] = None
    pricing_categories: List[str] = []
    warnings: List[ValidationIssueOut] = []


class OccurrencesOut(BaseModel):
    """Schema for a departure's upcoming occurrences"""
    departure_id: str
    state: DepartureState
    occurrences: List[DateRangeOut]

    @classmethod
    def build(cls, departure: Departure, state: DepartureState, occurrences: List[DateRange]) -> "OccurrencesOut":
        return cls(
            departure_id=departure.id,
            state=state,
            occurrences=[DateRangeOut.from_domain(o) for o in occurrences],
        )
