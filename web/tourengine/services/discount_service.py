"""Discount and promo code resolution."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from ..core.base import BaseService
from ..core.exceptions import BusinessLogicError, ValidationError
from ..core.timeutils import require_comparable
from ..models import Discount, PriceBreakdown, PromoCode, PromoDiscountType, to_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class DiscountEngine(BaseService):
    """Time-bounded discounts in percentage or fixed price mode."""

    def is_active(self, discount: Optional[Discount], now: datetime) -> bool:
        """True iff the discount is enabled and ``now`` lies inside its date range (inclusive)."""
        if discount is None or not discount.enabled:
            return False
        date_range = discount.discount_date_range
        if date_range is None:
            return False
        require_comparable(now, date_range.start)
        return date_range.contains(now)

    def effective_price(self, base_price: Decimal, discount: Optional[Discount], now: datetime) -> Decimal:
        """Price payable at ``now``. Never negative and never above ``base_price``."""
        base_price = to_decimal(base_price)
        if not self.is_active(discount, now):
            return base_price

        if discount.percentage_or_price:
            percentage = discount.discount_percentage
            if percentage is None or percentage < 0 or percentage > HUNDRED:
                raise ValidationError(
                    "Percentage discount must be between 0 and 100",
                    field="discount_percentage",
                )
            amount = base_price * percentage / HUNDRED
            cap = discount.max_discount_amount
            if cap is not None and amount > cap:
                amount = cap
            return max(ZERO, base_price - amount)

        if discount.discount_price is None or discount.discount_price < 0:
            raise ValidationError("Price discount must be a positive number", field="discount_price")
        return max(ZERO, base_price - discount.discount_price)

    def discount_amount(self, base_price: Decimal, discount: Optional[Discount], now: datetime) -> Decimal:
        base_price = to_decimal(base_price)
        return base_price - self.effective_price(base_price, discount, now)

    def breakdown(self, base_price: Decimal, discount: Optional[Discount], now: datetime) -> PriceBreakdown:
        """Original and discounted price side by side, as shown to customers."""
        base_price = to_decimal(base_price)
        active = self.is_active(discount, now)
        effective = self.effective_price(base_price, discount, now)
        percentage = None
        if active and discount.percentage_or_price:
            percentage = discount.discount_percentage
        return PriceBreakdown(
            original_price=base_price,
            effective_price=effective,
            discount_amount=base_price - effective,
            has_discount=active,
            discount_percentage=percentage,
        )


class PromoCodeEngine(BaseService):
    """Checks and applies tour promo codes. Usage counters are owned by the caller."""

    def find(self, promo_codes: Iterable[PromoCode], code: str) -> Optional[PromoCode]:
        """Case-insensitive lookup among active codes."""
        wanted = code.strip().lower()
        for promo in promo_codes:
            if promo.is_active and promo.code.lower() == wanted:
                return promo
        return None

    def check(self, promo: PromoCode, now: datetime, subtotal: Optional[Decimal] = None) -> None:
        """Raise ``BusinessLogicError`` if the code cannot be used at ``now``."""
        subtotal = to_decimal(subtotal)
        require_comparable(now, promo.valid_range.start)
        if not promo.is_active or not promo.valid_range.contains(now):
            raise BusinessLogicError("Promo code is not valid at this time", rule="promo_code_window")

        if promo.max_uses is not None and promo.current_uses >= promo.max_uses:
            raise BusinessLogicError(
                "Promo code has reached maximum usage limit",
                rule="promo_code_usage_limit",
            )

        if subtotal is not None and promo.min_purchase_amount is not None and subtotal < promo.min_purchase_amount:
            raise BusinessLogicError(
                f"Promo code requires a minimum purchase of {promo.min_purchase_amount}",
                rule="promo_code_min_purchase",
            )

    def apply(self, promo: PromoCode, subtotal: Decimal, now: datetime) -> Decimal:
        """Discounted subtotal after ``promo``; raises if the code cannot be used."""
        subtotal = to_decimal(subtotal)
        self.check(promo, now, subtotal)

        if promo.discount_type == PromoDiscountType.percentage:
            amount = subtotal * promo.discount_value / HUNDRED
            if promo.max_discount_amount is not None and amount > promo.max_discount_amount:
                amount = promo.max_discount_amount
        else:
            amount = promo.discount_value

        discounted = max(ZERO, subtotal - amount)
        logger.debug("Applied promo code %s: %s -> %s", promo.code, subtotal, discounted)
        return discounted
