"""Explicit invariant checks for tour schedule and pricing values.

Each ``check_*`` function takes the whole entity and returns a
``ValidationResult`` instead of raising, so callers at the persistence or
API boundary can collect every problem at once. Domain values call the
matching check from ``__post_init__`` and raise on the first error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from .exceptions import ValidationError
from .timeutils import is_aware

if TYPE_CHECKING:
    from ..models import (
        DateRange, Departure, Discount, PaxRange, PricingGroup, PricingOption,
        PromoCode, ScheduleRecurrence, TourSchedule,
    )


class Severity(str, Enum):
    error = "error"
    warning = "warning"


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    message: str
    severity: Severity = Severity.error


@dataclass
class ValidationResult:
    """Outcome of an invariant check. Warnings never make a value invalid."""

    issues: List[ValidationIssue] = field(default_factory=list)

    def error(self, field_name: str, message: str) -> None:
        self.issues.append(ValidationIssue(field_name, message, Severity.error))

    def warn(self, field_name: str, message: str) -> None:
        self.issues.append(ValidationIssue(field_name, message, Severity.warning))

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.error]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.warning]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        """Raise ``ValidationError`` for the first error, listing all of them in details."""
        errors = self.errors
        if not errors:
            return
        first = errors[0]
        exc = ValidationError(first.message, field=first.field)
        exc.details["errors"] = [{"field": e.field, "message": e.message} for e in errors]
        raise exc


def _negative(value: Optional[Decimal]) -> bool:
    return value is not None and value < 0


def check_date_range(date_range: DateRange) -> ValidationResult:
    result = ValidationResult()
    if is_aware(date_range.start) != is_aware(date_range.end):
        result.error("to", "Start and end dates must both carry a timezone or both be naive")
        return result
    if date_range.end < date_range.start:
        result.error("to", "End date must be after or equal to start date")
    return result


def check_discount(discount: Discount) -> ValidationResult:
    result = ValidationResult()

    if _negative(discount.max_discount_amount):
        result.error("max_discount_amount", "Maximum discount amount must be positive")

    if not discount.enabled:
        return result

    if discount.discount_date_range is None:
        result.error("discount_date_range", "Discount date range is required when the discount is enabled")

    if discount.percentage_or_price:
        pct = discount.discount_percentage
        if pct is None:
            result.error("discount_percentage", "Percentage is required for a percentage discount")
        elif pct < 0 or pct > 100:
            result.error("discount_percentage", "Percentage discount must be between 0 and 100")
    else:
        price = discount.discount_price
        if price is None:
            result.error("discount_price", "Discount price is required for a fixed price discount")
        elif price < 0:
            result.error("discount_price", "Price discount must be a positive number")

    return result


def check_pax_range(pax_range: PaxRange) -> ValidationResult:
    result = ValidationResult()
    if pax_range.min_pax < 1:
        result.error("min_pax", "Minimum pax must be at least 1")
    if pax_range.max_pax < pax_range.min_pax:
        result.error("max_pax", "Maximum pax must be greater than or equal to minimum pax")
    return result


def check_pricing_option(option: PricingOption) -> ValidationResult:
    from ..models import PricingCategory

    result = ValidationResult()
    if not option.name or not option.name.strip():
        result.error("name", "Pricing option name is required")
    if option.price < 0:
        result.error("price", "Price must be a positive number")
    if option.category == PricingCategory.custom and not (option.custom_category or "").strip():
        result.error("custom_category", "Custom category is required when category is custom")
    if option.discount_enabled and option.discount is None:
        result.error("discount", "Discount is required when discount is enabled")
    return result


def check_pricing_group(group: PricingGroup) -> ValidationResult:
    result = ValidationResult()
    if not group.label or not group.label.strip():
        result.error("label", "Pricing group label is required")
    if not group.options:
        result.error("options", "At least one pricing option is required in a pricing group")
    return result


def check_departure(departure: Departure) -> ValidationResult:
    result = ValidationResult()
    if not departure.id:
        result.error("id", "Departure id is required")
    if not departure.label:
        result.error("label", "Departure label is required")

    if not departure.is_recurring:
        if departure.recurrence_pattern is not None:
            result.warn("recurrence_pattern", "Recurrence pattern is ignored for a non-recurring departure")
        return result

    if departure.recurrence_pattern is None:
        result.error("recurrence_pattern", "Recurrence pattern is required when isRecurring is true")

    end_date = departure.recurrence_end_date
    if end_date is not None:
        if is_aware(end_date) != is_aware(departure.date_range.start):
            result.error("recurrence_end_date", "Recurrence end date must match the departure's timezone awareness")
        elif end_date <= departure.date_range.start:
            result.error("recurrence_end_date", "Recurrence end date must be after the start date")
    return result


def check_schedule_recurrence(recurrence: ScheduleRecurrence) -> ValidationResult:
    result = ValidationResult()
    if recurrence.interval < 1:
        result.error("interval", "Recurrence interval must be at least 1")
    return result


def check_tour_schedule(schedule: TourSchedule) -> ValidationResult:
    from ..models import ScheduleType

    result = ValidationResult()

    if schedule.schedule_type == ScheduleType.flexible and schedule.default_date_range is None:
        result.error("default_date_range", "Default date range is required for a flexible schedule")

    for name in ("days", "nights"):
        value = getattr(schedule, name)
        if value is not None and value < 0:
            result.error(name, f"{name.capitalize()} must be a non-negative number")

    seen = set()
    for departure in schedule.departures:
        if departure.id in seen:
            result.error("departures", f"Duplicate departure id '{departure.id}'")
        seen.add(departure.id)

    if schedule.recurrence is not None:
        # The schedule-level pattern is metadata only; flag disagreement with the departures
        equivalent = schedule.recurrence.departure_pattern
        for departure in schedule.departures:
            if departure.is_recurring and departure.recurrence_pattern != equivalent:
                result.warn(
                    "recurrence",
                    f"Schedule recurrence does not match departure '{departure.id}'; "
                    "departure recurrence is used for occurrences",
                )
    return result


def check_promo_code(promo: PromoCode) -> ValidationResult:
    from ..models import PromoDiscountType

    result = ValidationResult()
    if not promo.code or not promo.code.strip():
        result.error("code", "Promo code is required")
    if promo.discount_value < 0:
        result.error("discount_value", "Discount value must be positive")
    elif promo.discount_type == PromoDiscountType.percentage and promo.discount_value > 100:
        result.error("discount_value", "Percentage discount cannot exceed 100%")
    if _negative(promo.max_discount_amount):
        result.error("max_discount_amount", "Maximum discount amount must be positive")
    if _negative(promo.min_purchase_amount):
        result.error("min_purchase_amount", "Minimum purchase amount must be positive")
    if promo.max_uses is not None and promo.max_uses < 1:
        result.error("max_uses", "Maximum uses must be at least 1")
    if promo.current_uses < 0:
        result.error("current_uses", "Current uses cannot be negative")
    if promo.valid_range.end <= promo.valid_range.start:
        result.error("valid_range", "End date must be after start date")
    return result
