"""Pricing endpoints."""

import logging
from fastapi import APIRouter

from ....core.exceptions import NotFoundError
from ....deps import NowDep, SettingsDep
from ....services import PricingGroupAggregator, PricingOptionResolver, PromoCodeEngine
from ..schemas.pricing_schemas import (
    PricingGroupIn, PricingGroupOut, PricingOptionOut, PromoApplyIn, PromoApplyOut,
    QuoteIn, QuoteOut,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/groups/evaluate", response_model=PricingGroupOut)
async def evaluate_group(payload: PricingGroupIn, now: NowDep, settings: SettingsDep):
    """Effective prices of every option plus the group's min/max"""
    service = PricingGroupAggregator(settings)
    summary = service.resolve(payload.to_domain(), now)
    return PricingGroupOut.from_domain(summary)


@router.post("/groups/options/{name}", response_model=PricingOptionOut)
async def get_group_option(name: str, payload: PricingGroupIn, now: NowDep, settings: SettingsDep):
    """Resolve a single option of a group by its exact name"""
    service = PricingGroupAggregator(settings)
    option = service.find_option_by_name(payload.to_domain(), name)
    if option is None:
        raise NotFoundError("Pricing option", name)
    return PricingOptionOut.from_domain(service.option_resolver.resolve(option, now))


@router.post("/quote", response_model=QuoteOut)
async def quote_option(payload: QuoteIn, now: NowDep, settings: SettingsDep):
    """Total price for a number of passengers on one option"""
    service = PricingOptionResolver(settings)
    quote = service.quote(payload.option.to_domain(), payload.pax, now)
    return QuoteOut.from_domain(quote)


@router.post("/promo-codes/apply", response_model=PromoApplyOut)
async def apply_promo_code(payload: PromoApplyIn, now: NowDep, settings: SettingsDep):
    """Apply a promo code to a subtotal (usage is not counted here)"""
    service = PromoCodeEngine(settings)
    promo = service.find([p.to_domain() for p in payload.promo_codes], payload.code)
    if promo is None:
        raise NotFoundError("Promo code", payload.code)

    discounted = service.apply(promo, payload.subtotal, now)
    logger.info("Promo code %s applied", promo.code)
    return PromoApplyOut(
        code=promo.code,
        subtotal=payload.subtotal,
        discounted_subtotal=discounted,
        discount_amount=payload.subtotal - discounted,
    )
