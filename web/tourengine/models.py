"""Domain values for tour schedules and pricing.

Every value is immutable and checks its own invariants at construction,
so the services can compute over them without re-validating. Derived
views returned by the services live at the bottom of this module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from .core import validation


def to_decimal(value) -> Optional[Decimal]:
    """Money as Decimal; ints and floats go through ``str`` so 0.1 stays 0.1."""
    if value is None or isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# ---------- Enumerations ----------
class ScheduleType(str, Enum):
    flexible = "flexible"
    fixed = "fixed"
    multiple = "multiple"
    recurring = "recurring"


class RecurrencePattern(str, Enum):
    """Per-departure recurrence; the only pattern used to compute occurrences."""

    daily = "daily"
    weekly = "weekly"
    biweekly = "biweekly"
    monthly = "monthly"
    quarterly = "quarterly"
    yearly = "yearly"


class ScheduleRecurrencePattern(str, Enum):
    """Schedule-level recurrence vocabulary, combined with an interval."""

    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"


class PricingCategory(str, Enum):
    adult = "adult"
    child = "child"
    senior = "senior"
    student = "student"
    custom = "custom"


class PromoDiscountType(str, Enum):
    percentage = "percentage"
    fixed = "fixed"


class DepartureState(str, Enum):
    not_yet_started = "not_yet_started"
    active = "active"
    recurring_current = "recurring_current"
    recurring_upcoming = "recurring_upcoming"
    exhausted = "exhausted"


# ---------- Schedule values ----------
@dataclass(frozen=True)
class DateRange:
    """Closed interval of instants; ``end >= start``."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        validation.check_date_range(self).raise_for_errors()

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end


@dataclass(frozen=True)
class Departure:
    id: str
    label: str
    date_range: DateRange
    is_recurring: bool = False
    recurrence_pattern: Optional[RecurrencePattern] = None
    recurrence_end_date: Optional[datetime] = None
    selected_pricing_options: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "selected_pricing_options", tuple(self.selected_pricing_options))
        validation.check_departure(self).raise_for_errors()


_SCHEDULE_TO_DEPARTURE_PATTERN = {
    (ScheduleRecurrencePattern.daily, 1): RecurrencePattern.daily,
    (ScheduleRecurrencePattern.weekly, 1): RecurrencePattern.weekly,
    (ScheduleRecurrencePattern.weekly, 2): RecurrencePattern.biweekly,
    (ScheduleRecurrencePattern.monthly, 1): RecurrencePattern.monthly,
    (ScheduleRecurrencePattern.monthly, 3): RecurrencePattern.quarterly,
    (ScheduleRecurrencePattern.yearly, 1): RecurrencePattern.yearly,
}


@dataclass(frozen=True)
class ScheduleRecurrence:
    """Schedule-level recurrence metadata. Not used for occurrence computation."""

    pattern: ScheduleRecurrencePattern = ScheduleRecurrencePattern.weekly
    interval: int = 1
    end_date: Optional[datetime] = None

    def __post_init__(self) -> None:
        validation.check_schedule_recurrence(self).raise_for_errors()

    @property
    def departure_pattern(self) -> Optional[RecurrencePattern]:
        """The per-departure pattern with the same cadence, if one exists."""
        return _SCHEDULE_TO_DEPARTURE_PATTERN.get((self.pattern, self.interval))


@dataclass(frozen=True)
class TourSchedule:
    schedule_type: ScheduleType = ScheduleType.flexible
    default_date_range: Optional[DateRange] = None
    departures: Tuple[Departure, ...] = ()
    recurrence: Optional[ScheduleRecurrence] = None
    days: Optional[int] = None
    nights: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "departures", tuple(self.departures))
        validation.check_tour_schedule(self).raise_for_errors()


# ---------- Pricing values ----------
@dataclass(frozen=True)
class Discount:
    enabled: bool = False
    percentage_or_price: bool = False  # True = percentage mode
    discount_percentage: Optional[Decimal] = None
    discount_price: Optional[Decimal] = None
    max_discount_amount: Optional[Decimal] = None
    discount_date_range: Optional[DateRange] = None
    description: Optional[str] = None
    discount_code: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("discount_percentage", "discount_price", "max_discount_amount"):
            object.__setattr__(self, name, to_decimal(getattr(self, name)))
        validation.check_discount(self).raise_for_errors()


@dataclass(frozen=True)
class PaxRange:
    min_pax: int = 1
    max_pax: int = 10

    def __post_init__(self) -> None:
        validation.check_pax_range(self).raise_for_errors()

    def contains(self, pax: int) -> bool:
        return self.min_pax <= pax <= self.max_pax


@dataclass(frozen=True)
class PricingOption:
    id: str
    name: str
    price: Decimal
    category: PricingCategory = PricingCategory.adult
    custom_category: Optional[str] = None
    discount_enabled: bool = False
    discount: Optional[Discount] = None
    pax_range: PaxRange = field(default_factory=PaxRange)

    def __post_init__(self) -> None:
        object.__setattr__(self, "price", to_decimal(self.price))
        validation.check_pricing_option(self).raise_for_errors()

    @property
    def category_label(self) -> str:
        if self.category == PricingCategory.custom:
            return self.custom_category
        return self.category.value


@dataclass(frozen=True)
class PricingGroup:
    label: str
    options: Tuple[PricingOption, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", tuple(self.options))
        validation.check_pricing_group(self).raise_for_errors()


@dataclass(frozen=True)
class PromoCode:
    code: str
    discount_type: PromoDiscountType
    discount_value: Decimal
    valid_range: DateRange
    description: str = ""
    max_discount_amount: Optional[Decimal] = None
    min_purchase_amount: Optional[Decimal] = None
    max_uses: Optional[int] = None
    current_uses: int = 0
    is_active: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", self.code.strip().upper())
        for name in ("discount_value", "max_discount_amount", "min_purchase_amount"):
            object.__setattr__(self, name, to_decimal(getattr(self, name)))
        validation.check_promo_code(self).raise_for_errors()


# ---------- Derived views ----------
@dataclass(frozen=True)
class PriceBreakdown:
    original_price: Decimal
    effective_price: Decimal
    discount_amount: Decimal
    has_discount: bool
    discount_percentage: Optional[Decimal] = None


@dataclass(frozen=True)
class ResolvedPricingOption:
    option: PricingOption
    effective_price: Decimal
    has_active_discount: bool


@dataclass(frozen=True)
class PricingGroupSummary:
    label: str
    min_price: Decimal
    max_price: Decimal
    options: Tuple[ResolvedPricingOption, ...] = ()


@dataclass(frozen=True)
class PriceQuote:
    option_id: str
    pax: int
    unit_price: Decimal
    total: Decimal
    has_active_discount: bool


@dataclass(frozen=True)
class ScheduleAvailability:
    has_available_departures: bool
    active_departures: Tuple[Departure, ...]
    next_departure: Optional[Departure]
    next_departure_range: Optional[DateRange]
