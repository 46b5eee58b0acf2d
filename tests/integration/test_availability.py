from sqlalchemy.exc import OperationalError

from pawpal.core.config import settings
from pawpal.services import availability_service


def _broken_ledger(*args, **kwargs):
    raise OperationalError("SELECT time_slot FROM appointments", {}, Exception("connection reset"))


def test_availability_degrades_to_all_open_when_ledger_is_unreadable(client, monkeypatch):
    monkeypatch.setattr(availability_service, "taken_slots", _broken_ledger)

    response = client.get("/groomings/availability", params={"date": "2025-06-01"})

    assert response.status_code == 200
    data = response.json()
    assert data["degraded"] is True
    assert len(data["availability"]) == 16
    assert all(slot["available"] for slot in data["availability"])


def test_strict_availability_reports_503(client, monkeypatch):
    monkeypatch.setattr(availability_service, "taken_slots", _broken_ledger)
    monkeypatch.setattr(settings, "availability_strict", True)

    response = client.get("/doctor-appointments/availability", params={"date": "2025-06-01"})

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "transient_io"


def test_degraded_lookup_is_counted(client, monkeypatch):
    monkeypatch.setattr(availability_service, "taken_slots", _broken_ledger)

    client.get("/groomings/availability", params={"date": "2025-06-01"})
    metrics = client.get("/metrics").text

    assert 'availability_degraded_total{ledger="grooming"}' in metrics
