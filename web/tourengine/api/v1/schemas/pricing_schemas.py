from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from ....models import (
    Discount, PaxRange, PriceQuote, PricingCategory, PricingGroup, PricingGroupSummary,
    PricingOption, PromoCode, PromoDiscountType, ResolvedPricingOption,
)
from .common_schemas import DateRangeIn


class DiscountIn(BaseModel):
    """Schema for an option discount. ``enabled`` defaults to the option's flag."""
    enabled: Optional[bool] = None
    percentage_or_price: bool = False
    discount_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    discount_price: Optional[Decimal] = Field(None, ge=0)
    max_discount_amount: Optional[Decimal] = Field(None, ge=0)
    discount_date_range: Optional[DateRangeIn] = None
    description: Optional[str] = None
    discount_code: Optional[str] = None

    def to_domain(self, default_enabled: bool = False) -> Discount:
        return Discount(
            enabled=default_enabled if self.enabled is None else self.enabled,
            percentage_or_price=self.percentage_or_price,
            discount_percentage=self.discount_percentage,
            discount_price=self.discount_price,
            max_discount_amount=self.max_discount_amount,
            discount_date_range=self.discount_date_range.to_domain() if self.discount_date_range else None,
            description=self.description,
            discount_code=self.discount_code,
        )


class PaxRangeIn(BaseModel):
    min_pax: int = Field(1, ge=1)
    max_pax: int = Field(10, ge=1)

    def to_domain(self) -> PaxRange:
        return PaxRange(min_pax=self.min_pax, max_pax=self.max_pax)


class PricingOptionIn(BaseModel):
    """Schema for a pricing option"""
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: PricingCategory = PricingCategory.adult
    custom_category: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    discount_enabled: bool = False
    discount: Optional[DiscountIn] = None
    pax_range: PaxRangeIn = PaxRangeIn()

    def to_domain(self) -> PricingOption:
        return PricingOption(
            id=self.id,
            name=self.name.strip(),
            price=self.price,
            category=self.category,
            custom_category=self.custom_category.strip() if self.custom_category else None,
            discount_enabled=self.discount_enabled,
            discount=self.discount.to_domain(self.discount_enabled) if self.discount else None,
            pax_range=self.pax_range.to_domain(),
        )


class PricingGroupIn(BaseModel):
    """Schema for a pricing group"""
    label: str = Field(..., min_length=1)
    options: List[PricingOptionIn] = Field(..., min_length=1)

    def to_domain(self) -> PricingGroup:
        return PricingGroup(label=self.label.strip(), options=tuple(o.to_domain() for o in self.options))


class PricingOptionOut(BaseModel):
    """Schema for a resolved pricing option"""
    id: str
    name: str
    category: str
    price: Decimal
    effective_price: Decimal
    has_active_discount: bool
    min_pax: int
    max_pax: int

    @classmethod
    def from_domain(cls, resolved: ResolvedPricingOption) -> "PricingOptionOut":
        option = resolved.option
        return cls(
            id=option.id,
            name=option.name,
            category=option.category_label,
            price=option.price,
            effective_price=resolved.effective_price,
            has_active_discount=resolved.has_active_discount,
            min_pax=option.pax_range.min_pax,
            max_pax=option.pax_range.max_pax,
        )


class PricingGroupOut(BaseModel):
    """Schema for a resolved pricing group"""
    label: str
    min_price: Decimal
    max_price: Decimal
    options: List[PricingOptionOut]

    @classmethod
    def from_domain(cls, summary: PricingGroupSummary) -> "PricingGroupOut":
        return cls(
            label=summary.label,
            min_price=summary.min_price,
            max_price=summary.max_price,
            options=[PricingOptionOut.from_domain(o) for o in summary.options],
        )


class QuoteIn(BaseModel):
    option: PricingOptionIn
    pax: int = Field(..., gt=0)


class QuoteOut(BaseModel):
    option_id: str
    pax: int
    unit_price: Decimal
    total: Decimal
    has_active_discount: bool

    @classmethod
    def from_domain(cls, quote: PriceQuote) -> "QuoteOut":
        return cls(
            option_id=quote.option_id,
            pax=quote.pax,
            unit_price=quote.unit_price,
            total=quote.total,
            has_active_discount=quote.has_active_discount,
        )


class PromoCodeIn(BaseModel):
    """Schema for a promo code attached to a tour"""
    code: str = Field(..., min_length=1)
    description: str = ""
    discount_type: PromoDiscountType
    discount_value: Decimal = Field(..., ge=0)
    max_discount_amount: Optional[Decimal] = Field(None, ge=0)
    min_purchase_amount: Optional[Decimal] = Field(None, ge=0)
    valid_range: DateRangeIn
    max_uses: Optional[int] = Field(None, ge=1)
    current_uses: int = Field(0, ge=0)
    is_active: bool = True

    def to_domain(self) -> PromoCode:
        return PromoCode(
            code=self.code,
            description=self.description,
            discount_type=self.discount_type,
            discount_value=self.discount_value,
            max_discount_amount=self.max_discount_amount,
            min_purchase_amount=self.min_purchase_amount,
            valid_range=self.valid_range.to_domain(),
            max_uses=self.max_uses,
            current_uses=self.current_uses,
            is_active=self.is_active,
        )


class PromoApplyIn(BaseModel):
    promo_codes: List[PromoCodeIn]
    code: str = Field(..., min_length=1)
    subtotal: Decimal = Field(..., ge=0)


class PromoApplyOut(BaseModel):
    code: str
    subtotal: Decimal
    discounted_subtotal: Decimal
    discount_amount: Decimal
