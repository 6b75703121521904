"""HTTP tests for the v1 API.

Run with: pytest web/tests/test_api.py -v
"""

from datetime import datetime
from decimal import Decimal

import pytest
import pytz

NOW = {"at": "2024-06-01T12:00:00Z"}


def parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=pytz.UTC)


def departure(departure_id, start, end, **extra):
    return {"id": departure_id, "label": departure_id, "date_range": {"from": start, "to": end}, **extra}


ADULT = {
    "id": "adult",
    "name": "Adult",
    "price": "100",
    "discount_enabled": True,
    "discount": {
        "percentage_or_price": True,
        "discount_percentage": "50",
        "discount_date_range": {"from": "2024-06-01T00:00:00Z", "to": "2024-06-30T00:00:00Z"},
    },
    "pax_range": {"min_pax": 1, "max_pax": 6},
}

CHILD = {"id": "child", "name": "Child", "category": "child", "price": "60"}

GROUP = {"label": "Standard", "options": [ADULT, CHILD]}


class TestHealth:

    def test_health(self, api_client):
        response = api_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestScheduleEndpoints:
    """Tests for /api/v1/schedules"""

    def test_evaluate_picks_earliest_upcoming_departure(self, api_client):
        payload = {
            "schedule_type": "multiple",
            "departures": [
                departure(
                    "one-off", "2024-06-11T12:00:00Z", "2024-06-13T12:00:00Z",
                    selected_pricing_options=["adult"],
                ),
                departure(
                    "weekly", "2024-05-07T12:00:00Z", "2024-05-08T12:00:00Z",
                    is_recurring=True, recurrence_pattern="weekly",
                    selected_pricing_options=["child", "adult"],
                ),
            ],
        }
        response = api_client.post("/api/v1/schedules/evaluate", json=payload, params=NOW)
        assert response.status_code == 200

        body = response.json()
        assert parse(body["evaluated_at"]) == utc(2024, 6, 1, 12)
        assert body["has_available_departures"] is True
        assert body["active_departures"] == []
        assert body["next_departure"]["id"] == "weekly"
        assert body["next_departure"]["state"] == "recurring_upcoming"
        assert parse(body["next_departure_range"]["from"]) == utc(2024, 6, 4, 12)
        assert parse(body["next_departure_range"]["to"]) == utc(2024, 6, 5, 12)
        assert body["pricing_categories"] == ["adult", "child"]
        assert body["warnings"] == []

    def test_flexible_schedule_in_the_past(self, api_client):
        payload = {
            "schedule_type": "flexible",
            "default_date_range": {"from": "2024-04-01T00:00:00Z", "to": "2024-05-31T00:00:00Z"},
        }
        response = api_client.post("/api/v1/schedules/evaluate", json=payload, params=NOW)
        assert response.status_code == 200
        assert response.json()["has_available_departures"] is False

    def test_naive_reference_uses_configured_timezone(self, api_client):
        payload = {
            "schedule_type": "flexible",
            "default_date_range": {"from": "2024-05-01T00:00:00", "to": "2024-06-01T12:00:00"},
        }
        response = api_client.post(
            "/api/v1/schedules/evaluate", json=payload, params={"at": "2024-06-01T12:00:00"}
        )
        assert response.status_code == 200
        assert response.json()["has_available_departures"] is True

    def test_metadata_mismatch_is_reported_as_warning(self, api_client):
        payload = {
            "schedule_type": "recurring",
            "recurrence": {"pattern": "monthly"},
            "departures": [
                departure(
                    "weekly", "2024-05-07T12:00:00Z", "2024-05-08T12:00:00Z",
                    is_recurring=True, recurrence_pattern="weekly",
                ),
            ],
        }
        response = api_client.post("/api/v1/schedules/evaluate", json=payload, params=NOW)
        assert response.status_code == 200
        warnings = response.json()["warnings"]
        assert [w["field"] for w in warnings] == ["recurrence"]
        assert warnings[0]["severity"] == "warning"

    def test_flexible_without_range_is_rejected(self, api_client):
        response = api_client.post("/api/v1/schedules/evaluate", json={"schedule_type": "flexible"}, params=NOW)
        assert response.status_code == 400
        body = response.json()
        assert body["details"]["field"] == "default_date_range"
        assert body["details"]["errors"][0]["field"] == "default_date_range"

    def test_inverted_range_is_rejected(self, api_client):
        payload = {
            "schedule_type": "fixed",
            "departures": [departure("d", "2024-06-10T00:00:00Z", "2024-06-09T00:00:00Z")],
        }
        response = api_client.post("/api/v1/schedules/evaluate", json=payload, params=NOW)
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "to"

    def test_unknown_pattern_is_a_request_error(self, api_client):
        payload = {
            "schedule_type": "fixed",
            "departures": [
                departure(
                    "d", "2024-06-10T00:00:00Z", "2024-06-11T00:00:00Z",
                    is_recurring=True, recurrence_pattern="fortnightly",
                ),
            ],
        }
        response = api_client.post("/api/v1/schedules/evaluate", json=payload, params=NOW)
        assert response.status_code == 422
        assert response.json()["error"] == "Validation error"
        assert response.json()["details"]["errors"]

    def test_occurrences(self, api_client):
        payload = departure(
            "weekly", "2024-05-07T12:00:00Z", "2024-05-08T12:00:00Z",
            is_recurring=True, recurrence_pattern="weekly",
            recurrence_end_date="2024-06-20T00:00:00Z",
        )
        response = api_client.post(
            "/api/v1/schedules/departures/occurrences", json=payload, params={**NOW, "limit": 5}
        )
        assert response.status_code == 200

        body = response.json()
        assert body["departure_id"] == "weekly"
        assert body["state"] == "recurring_upcoming"
        starts = [parse(o["from"]) for o in body["occurrences"]]
        assert starts == [utc(2024, 6, 4, 12), utc(2024, 6, 11, 12), utc(2024, 6, 18, 12)]

    def test_occurrences_limit_must_be_positive(self, api_client):
        payload = departure("d", "2024-06-10T00:00:00Z", "2024-06-11T00:00:00Z")
        response = api_client.post(
            "/api/v1/schedules/departures/occurrences", json=payload, params={**NOW, "limit": 0}
        )
        assert response.status_code == 422


class TestPricingEndpoints:
    """Tests for /api/v1/pricing"""

    def test_group_bounds(self, api_client):
        response = api_client.post("/api/v1/pricing/groups/evaluate", json=GROUP, params=NOW)
        assert response.status_code == 200

        body = response.json()
        assert Decimal(body["min_price"]) == Decimal("50")
        assert Decimal(body["max_price"]) == Decimal("60")
        adult = body["options"][0]
        assert Decimal(adult["effective_price"]) == Decimal("50")
        assert adult["has_active_discount"] is True

    def test_empty_group_is_rejected(self, api_client):
        response = api_client.post(
            "/api/v1/pricing/groups/evaluate", json={"label": "Empty", "options": []}, params=NOW
        )
        assert response.status_code == 422

    def test_option_by_name(self, api_client):
        response = api_client.post("/api/v1/pricing/groups/options/Child", json=GROUP, params=NOW)
        assert response.status_code == 200
        assert response.json()["category"] == "child"

    def test_unknown_option_name(self, api_client):
        response = api_client.post("/api/v1/pricing/groups/options/child", json=GROUP, params=NOW)
        assert response.status_code == 404
        assert response.json()["details"]["entity"] == "Pricing option"

    def test_quote(self, api_client):
        response = api_client.post("/api/v1/pricing/quote", json={"option": ADULT, "pax": 3}, params=NOW)
        assert response.status_code == 200
        body = response.json()
        assert Decimal(body["unit_price"]) == Decimal("50")
        assert Decimal(body["total"]) == Decimal("150")

    @pytest.mark.parametrize("pax, status", [(7, 400), (0, 422)])
    def test_quote_outside_pax_range(self, api_client, pax, status):
        response = api_client.post("/api/v1/pricing/quote", json={"option": ADULT, "pax": pax}, params=NOW)
        assert response.status_code == status


PROMO = {
    "code": "summer10",
    "discount_type": "percentage",
    "discount_value": "10",
    "valid_range": {"from": "2024-06-01T00:00:00Z", "to": "2024-06-30T00:00:00Z"},
}


class TestPromoCodeEndpoint:
    """Tests for /api/v1/pricing/promo-codes/apply"""

    def test_apply(self, api_client):
        payload = {"promo_codes": [PROMO], "code": "SUMMER10", "subtotal": "250"}
        response = api_client.post("/api/v1/pricing/promo-codes/apply", json=payload, params=NOW)
        assert response.status_code == 200

        body = response.json()
        assert body["code"] == "SUMMER10"
        assert Decimal(body["discounted_subtotal"]) == Decimal("225")
        assert Decimal(body["discount_amount"]) == Decimal("25")

    def test_expired_code(self, api_client):
        payload = {"promo_codes": [PROMO], "code": "summer10", "subtotal": "250"}
        response = api_client.post(
            "/api/v1/pricing/promo-codes/apply", json=payload, params={"at": "2024-07-15T00:00:00Z"}
        )
        assert response.status_code == 422
        assert response.json()["details"]["rule"] == "promo_code_window"

    def test_unknown_code(self, api_client):
        payload = {"promo_codes": [PROMO], "code": "WINTER", "subtotal": "250"}
        response = api_client.post("/api/v1/pricing/promo-codes/apply", json=payload, params=NOW)
        assert response.status_code == 404
