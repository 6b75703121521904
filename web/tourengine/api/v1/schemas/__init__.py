from .common_schemas import DateRangeIn, DateRangeOut, ValidationIssueOut
from .schedule_schemas import (
    DepartureIn, DepartureOut, ScheduleRecurrenceIn, TourScheduleIn,
    ScheduleAvailabilityOut, OccurrencesOut,
)
from .pricing_schemas import (
    DiscountIn, PaxRangeIn, PricingOptionIn, PricingGroupIn, PricingOptionOut,
    PricingGroupOut, QuoteIn, QuoteOut, PromoCodeIn, PromoApplyIn, PromoApplyOut,
)

__all__ = [
    # Common schemas
    "DateRangeIn",
    "DateRangeOut",
    "ValidationIssueOut",

    # Schedule schemas
    "DepartureIn",
    "DepartureOut",
    "ScheduleRecurrenceIn",
    "TourScheduleIn",
    "ScheduleAvailabilityOut",
    "OccurrencesOut",

    # Pricing schemas
    "DiscountIn",
    "PaxRangeIn",
    "PricingOptionIn",
    "PricingGroupIn",
    "PricingOptionOut",
    "PricingGroupOut",
    "QuoteIn",
    "QuoteOut",
    "PromoCodeIn",
    "PromoApplyIn",
    "PromoApplyOut",
]
