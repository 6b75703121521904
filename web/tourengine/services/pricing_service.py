from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from ..core.base import BaseService
from ..core.config import Settings
from ..core.exceptions import ValidationError
from ..models import (
    Departure, PriceQuote, PricingGroup, PricingGroupSummary, PricingOption,
    ResolvedPricingOption, TourSchedule,
)
from .discount_service import DiscountEngine

logger = logging.getLogger(__name__)


class PricingOptionResolver(BaseService):
    """Effective price of a single pricing option"""

    def __init__(self, settings: Optional[Settings] = None, discount_engine: Optional[DiscountEngine] = None):
        super().__init__(settings)
        self.discount_engine = discount_engine or DiscountEngine(self.settings)

    def has_active_discount(self, option: PricingOption, now: datetime) -> bool:
        if not option.discount_enabled or option.discount is None:
            return False
        return self.discount_engine.is_active(option.discount, now)

    def resolve(self, option: PricingOption, now: datetime) -> ResolvedPricingOption:
        if option.discount_enabled:
            effective = self.discount_engine.effective_price(option.price, option.discount, now)
        else:
            effective = option.price
        return ResolvedPricingOption(
            option=option,
            effective_price=effective,
            has_active_discount=self.has_active_discount(option, now),
        )

    def quote(self, option: PricingOption, pax: int, now: datetime) -> PriceQuote:
        """Total for ``pax`` passengers at the option's effective price."""
        if not option.pax_range.contains(pax):
            raise ValidationError(
                f"Pax must be between {option.pax_range.min_pax} and {option.pax_range.max_pax} "
                f"for pricing option '{option.name}'",
                field="pax",
            )
        resolved = self.resolve(option, now)
        return PriceQuote(
            option_id=option.id,
            pax=pax,
            unit_price=resolved.effective_price,
            total=resolved.effective_price * pax,
            has_active_discount=resolved.has_active_discount,
        )


class PricingGroupAggregator(BaseService):
    """Group-level price bounds and option lookups"""

    def __init__(self, settings: Optional[Settings] = None, option_resolver: Optional[PricingOptionResolver] = None):
        super().__init__(settings)
        self.option_resolver = option_resolver or PricingOptionResolver(self.settings)

    def resolve(self, group: PricingGroup, now: datetime) -> PricingGroupSummary:
        """Min/max over the options' effective prices, so active discounts move the bounds."""
        resolved = tuple(self.option_resolver.resolve(option, now) for option in group.options)
        prices = [r.effective_price for r in resolved]
        return PricingGroupSummary(
            label=group.label,
            min_price=min(prices),
            max_price=max(prices),
            options=resolved,
        )

    def find_option_by_name(self, group: PricingGroup, name: str) -> Optional[PricingOption]:
        """Exact, case-sensitive match on the option name"""
        for option in group.options:
            if option.name == name:
                return option
        return None

    def options_for_departure(self, groups: Iterable[PricingGroup], departure: Departure) -> List[PricingOption]:
        """Options bookable on ``departure``; no selection means every option applies."""
        options = [option for group in groups for option in group.options]
        selected = set(departure.selected_pricing_options)
        if not selected:
            return options
        matched = [option for option in options if option.id in selected]
        if len(matched) < len(selected):
            known = {option.id for option in options}
            logger.debug(
                "Departure %s selects unknown pricing options: %s",
                departure.id, sorted(selected - known),
            )
        return matched

    def pricing_categories(self, schedule: TourSchedule) -> List[str]:
        """Distinct pricing option ids selected across all departures, in first-seen order"""
        categories: List[str] = []
        for departure in schedule.departures:
            for option_id in departure.selected_pricing_options:
                if option_id not in categories:
                    categories.append(option_id)
        return categories
