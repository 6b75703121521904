"""Schedule availability endpoints."""

from typing import Optional

import logging
from fastapi import APIRouter, Query

from ....core.validation import check_departure, check_tour_schedule
from ....deps import NowDep, SettingsDep
from ....services import AvailabilityEvaluator, PricingGroupAggregator
from ..schemas.common_schemas import DateRangeOut, ValidationIssueOut
from ..schemas.schedule_schemas import (
    DepartureIn, DepartureOut, OccurrencesOut, ScheduleAvailabilityOut, TourScheduleIn,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/evaluate", response_model=ScheduleAvailabilityOut)
async def evaluate_schedule(payload: TourScheduleIn, now: NowDep, settings: SettingsDep):
    """Active departures, next departure and bookability of a schedule"""
    schedule = payload.to_domain()
    service = AvailabilityEvaluator(settings)

    availability = service.evaluate(schedule, now)
    warnings = check_tour_schedule(schedule).warnings
    for departure in schedule.departures:
        warnings.extend(check_departure(departure).warnings)
    if warnings:
        logger.info("Schedule evaluated with %d warning(s)", len(warnings))

    next_departure = availability.next_departure
    return ScheduleAvailabilityOut(
        evaluated_at=now,
        has_available_departures=availability.has_available_departures,
        active_departures=[
            DepartureOut.from_domain(d, service.departure_state(d, now))
            for d in availability.active_departures
        ],
        next_departure=(
            DepartureOut.from_domain(next_departure, service.departure_state(next_departure, now))
            if next_departure else None
        ),
        next_departure_range=(
            DateRangeOut.from_domain(availability.next_departure_range)
            if availability.next_departure_range else None
        ),
        pricing_categories=PricingGroupAggregator(settings).pricing_categories(schedule),
        warnings=[ValidationIssueOut.from_domain(w) for w in warnings],
    )


@router.post("/departures/occurrences", response_model=OccurrencesOut)
async def list_occurrences(
    payload: DepartureIn,
    now: NowDep,
    settings: SettingsDep,
    limit: Optional[int] = Query(None, gt=0),
):
    """Current and upcoming occurrences of a single departure"""
    departure = payload.to_domain()
    service = AvailabilityEvaluator(settings)

    occurrences = service.upcoming_occurrences(departure, now, limit=limit)
    return OccurrencesOut.build(departure, service.departure_state(departure, now), occurrences)
