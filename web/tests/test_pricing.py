"""Tests for pricing option and pricing group resolution.

Run with: pytest web/tests/test_pricing.py -v
"""

from decimal import Decimal

import pytest

from conftest import at, span
from tourengine.core import ValidationError
from tourengine.models import (
    Departure, Discount, PaxRange, PricingCategory, PricingGroup, PricingOption,
    ScheduleType, TourSchedule,
)

NOW = at(2024, 6, 15)


def half_price(enabled=True) -> Discount:
    return Discount(
        enabled=enabled,
        percentage_or_price=True,
        discount_percentage=50,
        discount_date_range=span(at(2024, 6, 1), at(2024, 6, 30)),
    )


@pytest.fixture
def adult():
    return PricingOption(
        id="adult", name="Adult", price=Decimal("100"),
        discount_enabled=True, discount=half_price(),
        pax_range=PaxRange(min_pax=1, max_pax=6),
    )


@pytest.fixture
def child():
    return PricingOption(id="child", name="Child", price=Decimal("60"), category=PricingCategory.child)


@pytest.fixture
def group(adult, child):
    return PricingGroup(label="Standard", options=[adult, child])


class TestPricingOptionResolver:
    """Tests for PricingOptionResolver."""

    def test_active_discount(self, option_resolver, adult):
        resolved = option_resolver.resolve(adult, NOW)
        assert resolved.effective_price == Decimal("50")
        assert resolved.has_active_discount

    def test_no_discount(self, option_resolver, child):
        resolved = option_resolver.resolve(child, NOW)
        assert resolved.effective_price == Decimal("60")
        assert not resolved.has_active_discount

    def test_option_flag_gates_discount(self, option_resolver):
        """An attached discount is ignored while the option's discount flag is off."""
        option = PricingOption(id="o", name="Adult", price=Decimal("100"), discount=half_price())
        resolved = option_resolver.resolve(option, NOW)
        assert resolved.effective_price == Decimal("100")
        assert not resolved.has_active_discount

    def test_expired_discount(self, option_resolver, adult):
        resolved = option_resolver.resolve(adult, at(2024, 8, 1))
        assert resolved.effective_price == Decimal("100")
        assert not resolved.has_active_discount

    def test_quote(self, option_resolver, adult):
        quote = option_resolver.quote(adult, 3, NOW)
        assert quote.unit_price == Decimal("50")
        assert quote.total == Decimal("150")
        assert quote.has_active_discount

    @pytest.mark.parametrize("pax", [0, 7])
    def test_quote_outside_pax_range(self, option_resolver, adult, pax):
        with pytest.raises(ValidationError) as exc_info:
            option_resolver.quote(adult, pax, NOW)
        assert exc_info.value.field == "pax"


class TestPricingGroupAggregator:
    """Tests for PricingGroupAggregator."""

    def test_bounds_use_effective_prices(self, group_aggregator, group):
        """The discounted adult price (50) becomes the group minimum."""
        summary = group_aggregator.resolve(group, NOW)
        assert summary.min_price == Decimal("50")
        assert summary.max_price == Decimal("60")
        assert [o.option.id for o in summary.options] == ["adult", "child"]

    def test_bounds_without_active_discounts(self, group_aggregator, group):
        summary = group_aggregator.resolve(group, at(2024, 8, 1))
        assert summary.min_price == Decimal("60")
        assert summary.max_price == Decimal("100")

    def test_single_option(self, group_aggregator, child):
        summary = group_aggregator.resolve(PricingGroup(label="Kids", options=[child]), NOW)
        assert summary.min_price == summary.max_price == Decimal("60")

    def test_find_option_by_name(self, group_aggregator, group):
        assert group_aggregator.find_option_by_name(group, "Child").id == "child"

    def test_find_option_is_case_sensitive(self, group_aggregator, group):
        assert group_aggregator.find_option_by_name(group, "child") is None

    def test_options_for_departure(self, group_aggregator, group):
        departure = Departure(
            id="d1", label="June", date_range=span(at(2024, 6, 20), at(2024, 6, 22)),
            selected_pricing_options=["child"],
        )
        options = group_aggregator.options_for_departure([group], departure)
        assert [o.id for o in options] == ["child"]

    def test_empty_selection_means_all_options(self, group_aggregator, group):
        departure = Departure(id="d1", label="June", date_range=span(at(2024, 6, 20), at(2024, 6, 22)))
        options = group_aggregator.options_for_departure([group], departure)
        assert [o.id for o in options] == ["adult", "child"]

    def test_pricing_categories_in_first_seen_order(self, group_aggregator):
        schedule = TourSchedule(
            schedule_type=ScheduleType.multiple,
            departures=[
                Departure(
                    id="a", label="A", date_range=span(at(2024, 6, 1), at(2024, 6, 2)),
                    selected_pricing_options=["child", "adult"],
                ),
                Departure(
                    id="b", label="B", date_range=span(at(2024, 7, 1), at(2024, 7, 2)),
                    selected_pricing_options=["adult", "senior"],
                ),
            ],
        )
        assert group_aggregator.pricing_categories(schedule) == ["child", "adult", "senior"]
