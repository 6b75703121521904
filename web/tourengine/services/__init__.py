from .recurrence_service import RecurrenceResolver
from .discount_service import DiscountEngine, PromoCodeEngine
from .pricing_service import PricingOptionResolver, PricingGroupAggregator
from .availability_service import AvailabilityEvaluator

__all__ = [
    "RecurrenceResolver",
    "DiscountEngine",
    "PromoCodeEngine",
    "PricingOptionResolver",
    "PricingGroupAggregator",
    "AvailabilityEvaluator",
]
