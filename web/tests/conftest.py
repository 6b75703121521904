"""Pytest configuration and shared fixtures."""

from datetime import datetime

import pytest
import pytz
from fastapi.testclient import TestClient

from tourengine.core import Settings
from tourengine.models import DateRange
from tourengine.services import (
    AvailabilityEvaluator,
    DiscountEngine,
    PricingGroupAggregator,
    PricingOptionResolver,
    PromoCodeEngine,
    RecurrenceResolver,
)


def at(*args) -> datetime:
    """UTC instant shorthand used throughout the tests"""
    return datetime(*args, tzinfo=pytz.UTC)


def span(start: datetime, end: datetime) -> DateRange:
    return DateRange(start=start, end=end)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def recurrence(settings) -> RecurrenceResolver:
    return RecurrenceResolver(settings)


@pytest.fixture
def discounts(settings) -> DiscountEngine:
    return DiscountEngine(settings)


@pytest.fixture
def promo_codes(settings) -> PromoCodeEngine:
    return PromoCodeEngine(settings)


@pytest.fixture
def option_resolver(settings) -> PricingOptionResolver:
    return PricingOptionResolver(settings)


@pytest.fixture
def group_aggregator(settings) -> PricingGroupAggregator:
    return PricingGroupAggregator(settings)


@pytest.fixture
def availability(settings) -> AvailabilityEvaluator:
    return AvailabilityEvaluator(settings)


@pytest.fixture
def api_client() -> TestClient:
    from tourengine.main import app

    return TestClient(app)
