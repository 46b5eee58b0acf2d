import logging
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any
from uuid import uuid4

import httpx

from pawpal.client.mirror import BookingMirror, MirrorEntry, NaturalKey, merge
from pawpal.core.config import settings
from pawpal.core.errors import PawPalError, TransientIOError, error_from_payload
from pawpal.schemas.appointment import AvailabilityResponse, SlotAvailability
from pawpal.services.slot_service import generate_slots, resolve_ledger

logger = logging.getLogger(__name__)

LEDGER_PATHS = {
    "grooming": "/groomings",
    "doctor": "/doctor-appointments",
}
DEFAULT_MIRROR_DIR = Path.home() / ".pawpal"


class PawPalClient:
    """Thin HTTP client for the booking API with a local reconciliation mirror.

    ``http_client`` may be any ``httpx.Client``; tests hand in a FastAPI
    ``TestClient`` so the whole flow runs in-process.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: str | None = None,
        mirror_dir: Path | str = DEFAULT_MIRROR_DIR,
        http_client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.http = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self.token = token
        self.mirror_dir = Path(mirror_dir)
        self._mirrors: dict[str, BookingMirror] = {}

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "PawPalClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def mirror(self, ledger: str) -> BookingMirror:
        ledger = resolve_ledger(ledger).ledger.value
        if ledger not in self._mirrors:
            self._mirrors[ledger] = BookingMirror(
                self.mirror_dir,
                ledger,
                ttl=timedelta(hours=settings.client_mirror_ttl_hours),
            )
        return self._mirrors[ledger]

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = dict(extra or {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = self._headers(kwargs.pop("headers", None))
        try:
            return self.http.request(method, path, headers=headers, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("api_unreachable method=%s path=%s error=%s", method, path, exc)
            raise TransientIOError(f"Could not reach the booking API: {exc}") from exc

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> None:
        if response.is_success:
            return
        try:
            payload = response.json()
        except ValueError:
            payload = None
        raise error_from_payload(response.status_code, payload)

    def login(self, email: str, password: str) -> str:
        response = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self._raise_for_error(response)
        self.token = response.json()["access_token"]
        return self.token

    def availability(self, ledger: str, day: date) -> AvailabilityResponse:
        """Slot availability for ``day``; fails open to all-available when the API is down."""
        descriptor = resolve_ledger(ledger)
        path = f"{LEDGER_PATHS[descriptor.ledger.value]}/availability"
        try:
            response = self._request("GET", path, params={"date": day.isoformat()})
            self._raise_for_error(response)
        except TransientIOError:
            logger.warning("availability_degraded ledger=%s date=%s", descriptor.ledger.value, day.isoformat())
            return AvailabilityResponse(
                date=day,
                ledger=descriptor.ledger.value,
                degraded=True,
                availability=[SlotAvailability(time_slot=slot, available=True) for slot in generate_slots(descriptor.ledger)],
            )
        return AvailabilityResponse.model_validate(response.json())

    def create_booking(
        self,
        ledger: str,
        pet_id: int,
        service_type: str,
        appointment_date: date,
        time_slot: str,
        price: Decimal | float | str,
        notes: str | None = None,
        veterinarian_name: str | None = None,
        clinic_name: str | None = None,
        idempotency_key: str | None = None,
        optimistic: bool = False,
    ) -> MirrorEntry:
        """Book a slot.

        With ``optimistic=True`` a transport failure returns a provisional
        entry (id ``local-<key>``) instead of raising; it stays in the mirror
        until the server lists the booking or the entry expires.
        """
        descriptor = resolve_ledger(ledger)
        ledger_name = descriptor.ledger.value
        idempotency_key = idempotency_key or uuid4().hex
        body = {
            "pet_id": pet_id,
            "service_type": service_type,
            "appointment_date": appointment_date.isoformat(),
            "time_slot": time_slot,
            "price": str(price),
            "notes": notes,
            "veterinarian_name": veterinarian_name,
            "clinic_name": clinic_name,
        }
        mirror = self.mirror(ledger_name)
        try:
            response = self._request(
                "POST",
                LEDGER_PATHS[ledger_name],
                json=body,
                headers={"Idempotency-Key": idempotency_key},
            )
            self._raise_for_error(response)
        except TransientIOError:
            if not optimistic:
                raise
            entry = MirrorEntry(
                id=f"local-{idempotency_key}",
                pet_id=pet_id,
                ledger=ledger_name,
                service_type=service_type,
                appointment_date=appointment_date,
                time_slot=time_slot,
                price=Decimal(str(price)),
                status="pending",
                notes=notes,
                veterinarian_name=veterinarian_name,
                clinic_name=clinic_name,
                provisional=True,
            )
            mirror.remember(entry)
            logger.info("booking_provisional ledger=%s key=%s", ledger_name, idempotency_key)
            return entry

        entry = MirrorEntry.model_validate(response.json())
        mirror.forget(entry.natural_key)
        mirror.remember(entry)
        return entry

    def list_bookings(self, ledger: str, optimistic_entry: MirrorEntry | None = None) -> list[MirrorEntry]:
        """Server listing merged with the mirror; mirror only while the API is unreachable."""
        descriptor = resolve_ledger(ledger)
        ledger_name = descriptor.ledger.value
        mirror = self.mirror(ledger_name)
        try:
            response = self._request("GET", LEDGER_PATHS[ledger_name])
            self._raise_for_error(response)
        except TransientIOError:
            mirror.prune()
            return merge([], mirror.load(), optimistic_entry)
        server_list = [MirrorEntry.model_validate(item) for item in response.json()]
        return mirror.reconcile(server_list, optimistic_entry)

    def get_booking(self, ledger: str, booking_id: int) -> MirrorEntry:
        ledger_name = resolve_ledger(ledger).ledger.value
        response = self._request("GET", f"{LEDGER_PATHS[ledger_name]}/{booking_id}")
        self._raise_for_error(response)
        return MirrorEntry.model_validate(response.json())

    def cancel_booking(self, ledger: str, booking_id: int | str) -> MirrorEntry | None:
        """Cancel a booking and drop it from the mirror.

        A 404 from the server means the row is already gone, so it counts as
        success. Returns the server's cancelled entry, or None when there was
        nothing left to cancel remotely.
        """
        ledger_name = resolve_ledger(ledger).ledger.value
        mirror = self.mirror(ledger_name)
        if isinstance(booking_id, str) and booking_id.startswith("local-"):
            mirror.forget(booking_id)
            return None

        response = self._request("PATCH", f"{LEDGER_PATHS[ledger_name]}/{booking_id}/cancel")
        try:
            self._raise_for_error(response)
        except PawPalError as exc:
            if exc.status_code != 404:
                raise
            logger.info("booking_already_gone ledger=%s id=%s", ledger_name, booking_id)
            mirror.forget(booking_id)
            return None

        entry = MirrorEntry.model_validate(response.json())
        mirror.forget_entry(entry)
        return entry

    def forget_booking(self, ledger: str, key: int | str | NaturalKey | MirrorEntry) -> int:
        return self.mirror(ledger).forget(key)
