from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from pawpal.db.models import Appointment, AppointmentStatus
from pawpal.services.calendar_service import build_appointment_calendar_ics


def _appointment(status: str) -> Appointment:
    created = datetime(2025, 6, 1, 8, 0, tzinfo=UTC)
    return Appointment(
        id=7,
        user_id=1,
        pet_id=3,
        ledger="grooming",
        service_type="full_groom",
        appointment_date=date(2025, 6, 1),
        time_slot="16:30",
        price=Decimal("49.00"),
        status=status,
        notes="Nervous; keep it quiet, please",
        created_at=created,
        updated_at=created,
    )


@pytest.mark.parametrize("status", ["pending", "confirmed"])
def test_active_appointments_can_be_cancelled(status):
    appointment = _appointment(status)
    at = datetime(2025, 6, 1, 9, 0, tzinfo=UTC)

    appointment.cancel(at=at)

    assert appointment.status == AppointmentStatus.CANCELLED.value
    assert appointment.updated_at == at
    assert appointment.is_active is False


@pytest.mark.parametrize("status", ["cancelled", "completed"])
def test_terminal_appointments_cannot_move(status):
    appointment = _appointment(status)

    assert appointment.can_transition_to(AppointmentStatus.CANCELLED) is False
    with pytest.raises(ValueError):
        appointment.complete()
    assert appointment.status == status


def test_calendar_marks_status_and_escapes_text():
    ics = build_appointment_calendar_ics(_appointment("cancelled"), pet_name="Biscuit")

    assert ics.startswith("BEGIN:VCALENDAR\r\n")
    assert "UID:grooming-7@pawpal.local" in ics
    assert "DTSTART:20250601T163000" in ics
    assert "DTEND:20250601T170000" in ics
    assert "SUMMARY:Full Groom for Biscuit" in ics
    assert r"Notes: Nervous\; keep it quiet\, please" in ics
    assert "STATUS:CANCELLED" in ics
    assert "LOCATION" not in ics
