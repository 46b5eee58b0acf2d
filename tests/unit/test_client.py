from datetime import date
from decimal import Decimal

import httpx
import pytest

from pawpal.client.api import PawPalClient
from pawpal.client.mirror import MirrorEntry
from pawpal.core.errors import ConflictError, InvalidStateError, OwnershipError, TransientIOError

PASSWORD = "StrongPass123!"
DAY = date(2025, 6, 1)


def _unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def _offline_client(tmp_path) -> PawPalClient:
    http = httpx.Client(base_url="http://pawpal.invalid", transport=httpx.MockTransport(_unreachable))
    return PawPalClient(token="offline-token", mirror_dir=tmp_path, http_client=http)


@pytest.fixture()
def api(client, tmp_path) -> PawPalClient:
    client.post("/auth/register", json={"email": "sdk@example.com", "password": PASSWORD, "name": "Sdk"})
    pawpal = PawPalClient(mirror_dir=tmp_path, http_client=client)
    pawpal.login("sdk@example.com", PASSWORD)
    return pawpal


@pytest.fixture()
def sdk_pet_id(client, api) -> int:
    response = client.post(
        "/pets",
        headers={"Authorization": f"Bearer {api.token}"},
        json={"name": "Nugget", "species": "dog"},
    )
    return response.json()["id"]


def test_booking_flow_keeps_mirror_in_sync(api, sdk_pet_id):
    entry = api.create_booking("grooming", sdk_pet_id, "bath", DAY, "09:00", Decimal("29.00"))

    assert entry.status == "confirmed"
    assert entry.provisional is False
    assert [stored.id for stored in api.mirror("grooming").load()] == [entry.id]

    availability = api.availability("grooming", DAY)
    assert availability.degraded is False
    assert [slot.time_slot for slot in availability.availability if not slot.available] == ["09:00"]

    listed = api.list_bookings("grooming")
    assert [item.id for item in listed] == [entry.id]

    cancelled = api.cancel_booking("grooming", entry.id)
    assert cancelled is not None
    assert cancelled.status == "cancelled"
    assert api.mirror("grooming").load() == []


def test_conflict_and_ownership_errors_are_raised_as_domain_errors(api, sdk_pet_id):
    api.create_booking("doctor", sdk_pet_id, "checkup", DAY, "10:30", 35)

    with pytest.raises(ConflictError):
        api.create_booking("doctor", sdk_pet_id, "consultation", DAY, "10:30", 49)
    with pytest.raises(OwnershipError):
        api.create_booking("doctor", sdk_pet_id + 100, "checkup", DAY, "11:00", 35)


def test_cancel_of_missing_booking_counts_as_done(api):
    api.mirror("grooming").remember(
        MirrorEntry(
            id=9999,
            pet_id=1,
            ledger="grooming",
            service_type="bath",
            appointment_date=DAY,
            time_slot="09:00",
            price=Decimal("29.00"),
        )
    )

    assert api.cancel_booking("grooming", 9999) is None
    assert api.mirror("grooming").load() == []


def _provisional(pet_id: int, slot: str) -> MirrorEntry:
    return MirrorEntry(
        id="local-abc",
        pet_id=pet_id,
        ledger="grooming",
        service_type="bath",
        appointment_date=DAY,
        time_slot=slot,
        price=Decimal("29.00"),
        status="pending",
        provisional=True,
    )


def test_cancel_also_drops_provisional_copy_of_the_slot(api, sdk_pet_id):
    entry = api.create_booking("grooming", sdk_pet_id, "bath", DAY, "15:00", 29)
    api.mirror("grooming").remember(_provisional(sdk_pet_id, "15:00"))

    api.cancel_booking("grooming", entry.id)

    assert api.mirror("grooming").load() == []


def test_cancel_of_missing_booking_drops_provisional_copy_of_the_slot(api):
    mirror = api.mirror("grooming")
    mirror.remember(
        MirrorEntry(
            id=9998,
            pet_id=1,
            ledger="grooming",
            service_type="bath",
            appointment_date=DAY,
            time_slot="16:00",
            price=Decimal("29.00"),
        )
    )
    mirror.remember(_provisional(1, "16:00"))

    assert api.cancel_booking("grooming", 9998) is None
    assert mirror.load() == []


def test_second_cancel_raises_invalid_state(api, sdk_pet_id):
    entry = api.create_booking("grooming", sdk_pet_id, "nail_trim", DAY, "11:00", 12)
    api.cancel_booking("grooming", entry.id)

    with pytest.raises(InvalidStateError):
        api.cancel_booking("grooming", entry.id)


def test_offline_availability_is_degraded(tmp_path):
    offline = _offline_client(tmp_path)

    availability = offline.availability("doctor", DAY)

    assert availability.degraded is True
    assert len(availability.availability) == 20
    assert all(slot.available for slot in availability.availability)


def test_server_error_on_availability_is_degraded(tmp_path):
    def unavailable(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": {"code": "transient_io", "message": "down", "detail": None}})

    http = httpx.Client(base_url="http://pawpal.invalid", transport=httpx.MockTransport(unavailable))
    pawpal = PawPalClient(mirror_dir=tmp_path, http_client=http)

    assert pawpal.availability("grooming", DAY).degraded is True


def test_offline_create_raises_unless_optimistic(tmp_path):
    offline = _offline_client(tmp_path)

    with pytest.raises(TransientIOError):
        offline.create_booking("grooming", 1, "bath", DAY, "09:00", 29)

    provisional = offline.create_booking(
        "grooming", 1, "bath", DAY, "09:00", 29, idempotency_key="abc123", optimistic=True
    )

    assert provisional.id == "local-abc123"
    assert provisional.provisional is True
    assert provisional.status == "pending"
    listed = offline.list_bookings("grooming")
    assert [(entry.identity, entry.provisional) for entry in listed] == [("local-abc123", True)]


def test_provisional_entry_is_superseded_by_server_copy(api, sdk_pet_id, tmp_path):
    offline = _offline_client(tmp_path)
    offline.create_booking("grooming", sdk_pet_id, "bath", DAY, "14:00", 29, optimistic=True)

    confirmed = api.create_booking("grooming", sdk_pet_id, "bath", DAY, "14:00", 29)
    listed = api.list_bookings("grooming")

    assert [entry.id for entry in listed] == [confirmed.id]
    assert all(entry.provisional is False for entry in api.mirror("grooming").load())
