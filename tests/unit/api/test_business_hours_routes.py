"""
Unit tests for the business hours lookup endpoint.
"""

from datetime import date, time

import pytest
from fastapi.testclient import TestClient

from clinic_backoffice.api.dependencies import get_business_hours_resolver
from clinic_backoffice.core.app_factory import create_app
from clinic_backoffice.domains.scheduling.application.services.business_hours_resolver import (
    BusinessHoursResolver,
)
from clinic_backoffice.domains.scheduling.domain.value_objects.business_hours import BusinessHourInterval

BASE = "/api/v1/business-hours"


@pytest.fixture
def client(business_hours_repository):
    business_hours_repository.overrides[date(2025, 3, 11)] = [
        BusinessHourInterval(start=time(14, 0), end=time(18, 0)),
        BusinessHourInterval(start=time(8, 0), end=time(12, 0)),
    ]
    business_hours_repository.overrides[date(2025, 3, 12)] = []
    app = create_app()
    app.dependency_overrides[get_business_hours_resolver] = lambda: BusinessHoursResolver(business_hours_repository)
    return TestClient(app)


class TestGetBusinessHours:
    """Tests for GET /business-hours."""

    def test_weekly_hours_for_regular_day(self, client) -> None:
        """Should return the weekly schedule when no override exists."""
        response = client.get(BASE, params={"date": "2025-03-10"})

        assert response.status_code == 200
        assert response.json() == [{"start": "09:00:00", "end": "17:00:00"}]

    def test_override_replaces_weekly_hours(self, client) -> None:
        """Should return override intervals ordered by start."""
        response = client.get(BASE, params={"date": "2025-03-11"})

        assert response.status_code == 200
        assert [interval["start"] for interval in response.json()] == ["08:00:00", "14:00:00"]

    def test_closed_override_and_weekend_are_empty(self, client) -> None:
        """Should return an empty list for a closed date and for Sunday."""
        assert client.get(BASE, params={"date": "2025-03-12"}).json() == []
        assert client.get(BASE, params={"date": "2025-03-16"}).json() == []

    def test_missing_date_returns_400(self, client) -> None:
        """Should reject a request without the date parameter."""
        response = client.get(BASE)

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"]["field"] == "date"

    @pytest.mark.parametrize("value", ["10/03/2025", "2025-13-01", "tomorrow"])
    def test_invalid_date_returns_400(self, client, value) -> None:
        """Should reject dates that are not YYYY-MM-DD."""
        response = client.get(BASE, params={"date": value})

        assert response.status_code == 400
        assert "YYYY-MM-DD" in response.json()["message"]
