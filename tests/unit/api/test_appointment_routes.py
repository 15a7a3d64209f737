"""
Unit tests for the appointment booking endpoints.

Use cases run over in-memory repositories via dependency overrides.
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from clinic_backoffice.api.dependencies import (
    get_book_appointment_use_case,
    get_reschedule_appointment_use_case,
)
from clinic_backoffice.core.app_factory import create_app
from clinic_backoffice.domains.scheduling.application.services.business_hours_resolver import (
    BusinessHoursResolver,
)
from clinic_backoffice.domains.scheduling.application.services.conflict_validator import (
    AppointmentConflictValidator,
)
from clinic_backoffice.domains.scheduling.application.use_cases.book_appointment import (
    BookAppointmentUseCase,
    RescheduleAppointmentUseCase,
)
from tests.utils.builders import AppointmentBuilder

BASE = "/api/v1/appointments"


@pytest.fixture
def client(appointment_repository, business_hours_repository, clinic_tz):
    validator = AppointmentConflictValidator(
        appointment_repository, BusinessHoursResolver(business_hours_repository), clinic_tz
    )
    app = create_app()
    app.dependency_overrides[get_book_appointment_use_case] = lambda: BookAppointmentUseCase(
        appointment_repository, validator
    )
    app.dependency_overrides[get_reschedule_appointment_use_case] = lambda: RescheduleAppointmentUseCase(
        appointment_repository, validator
    )
    return TestClient(app)


@pytest.fixture
def booked(appointment_repository, clinic_tz):
    """Existing 10:00-11:00 appointment on Monday 2025-03-10."""
    start = clinic_tz.localize(datetime(2025, 3, 10, 10, 0))
    return appointment_repository.add(AppointmentBuilder().starting_at(start).lasting(60).build())


class TestBookAppointment:
    """Tests for POST /appointments."""

    def test_book_returns_created(self, client) -> None:
        """Should return 201 with the computed end."""
        response = client.post(
            BASE, json={"start": "2025-03-10T14:00:00-03:00", "duration_minutes": 30, "patient_id": 1}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["id"] == 1
        assert datetime.fromisoformat(body["end"]) == datetime.fromisoformat("2025-03-10T14:30:00-03:00")
        assert response.headers["X-Request-ID"]

    def test_conflict_returns_409(self, client, booked) -> None:
        """Should map an overlap to 409 APPOINTMENT_CONFLICT."""
        response = client.post(
            BASE, json={"start": "2025-03-10T10:30:00-03:00", "duration_minutes": 60, "patient_id": 2}
        )

        assert response.status_code == 409
        assert response.json()["code"] == "APPOINTMENT_CONFLICT"

    def test_out_of_hours_returns_409(self, client) -> None:
        """Should map a slot after closing to 409 OUT_OF_HOURS."""
        response = client.post(
            BASE, json={"start": "2025-03-10T18:00:00-03:00", "duration_minutes": 60, "patient_name": "Walk-in"}
        )

        assert response.status_code == 409
        assert response.json()["code"] == "OUT_OF_HOURS"

    def test_domain_validation_returns_400(self, client) -> None:
        """Should map a non-positive duration to 400."""
        response = client.post(
            BASE, json={"start": "2025-03-10T10:00:00-03:00", "duration_minutes": 0, "patient_id": 1}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert response.json()["details"]["field"] == "duration_minutes"

    def test_naive_start_returns_422(self, client) -> None:
        """Should require a UTC offset on the start instant."""
        response = client.post(BASE, json={"start": "2025-03-10T10:00:00", "duration_minutes": 30, "patient_id": 1})

        assert response.status_code == 422
        assert response.json()["details"][0]["field"] == "body.start"


class TestRescheduleAppointment:
    """Tests for PUT /appointments/{id}."""

    def test_reschedule_over_own_slot(self, client, booked) -> None:
        """Should allow moving an appointment across its own previous slot."""
        response = client.put(f"{BASE}/{booked.id}", json={"start": "2025-03-10T10:30:00-03:00"})

        assert response.status_code == 200
        assert response.json()["duration_minutes"] == 60

    def test_reschedule_unknown_returns_404(self, client) -> None:
        """Should return 404 for an unknown appointment."""
        response = client.put(f"{BASE}/999", json={"start": "2025-03-10T10:30:00-03:00"})

        assert response.status_code == 404
        assert response.json()["code"] == "ENTITY_NOT_FOUND"
