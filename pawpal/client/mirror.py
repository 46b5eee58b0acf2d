"""Local mirror of bookings kept by API clients.

The mirror papers over two failure modes of the booking flow: a create whose
response is lost after the server stored the row, and a cancel that answers
404 because the row is already gone. Entries the server has not confirmed are
marked ``provisional``; the server's copy always wins when both are known.
"""

import logging
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from pathlib import Path
from typing import NamedTuple

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    "grooming": "grooming_bookings",
    "doctor": "doctor_appointments",
}


class NaturalKey(NamedTuple):
    pet_id: int
    appointment_date: date
    time_slot: str
    service_type: str


class MirrorEntry(BaseModel):
    id: int | str | None = None
    pet_id: int
    ledger: str
    service_type: str
    appointment_date: date
    time_slot: str
    price: Decimal
    status: str = "confirmed"
    notes: str | None = None
    veterinarian_name: str | None = None
    clinic_name: str | None = None
    provisional: bool = False
    cached_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"extra": "ignore"}

    @property
    def identity(self) -> str | None:
        return None if self.id is None else str(self.id)

    @property
    def natural_key(self) -> NaturalKey:
        return NaturalKey(self.pet_id, self.appointment_date, self.time_slot, self.service_type)

    def matches(self, other: "MirrorEntry") -> bool:
        if self.identity is not None and self.identity == other.identity:
            return True
        return self.natural_key == other.natural_key


_entries_adapter = TypeAdapter(list[MirrorEntry])


def merge(
    server_list: list[MirrorEntry],
    local_list: list[MirrorEntry],
    optimistic_entry: MirrorEntry | None = None,
) -> list[MirrorEntry]:
    merged: list[MirrorEntry] = []
    for entry in [*server_list, *local_list]:
        if not any(existing.matches(entry) for existing in merged):
            merged.append(entry)
    if optimistic_entry is not None and not any(existing.matches(optimistic_entry) for existing in merged):
        merged.insert(0, optimistic_entry)
    return merged


class BookingMirror:
    def __init__(self, directory: Path | str, ledger: str, ttl: timedelta = timedelta(hours=48)) -> None:
        self.ledger = ledger
        self.ttl = ttl
        self.path = Path(directory) / f"{STORAGE_KEYS.get(ledger, ledger)}.json"

    def load(self) -> list[MirrorEntry]:
        if not self.path.exists():
            return []
        try:
            return _entries_adapter.validate_json(self.path.read_bytes())
        except ValidationError:
            logger.warning("mirror_unreadable path=%s", self.path)
            return []

    def save(self, entries: list[MirrorEntry]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        tmp_path.write_bytes(_entries_adapter.dump_json(entries))
        tmp_path.replace(self.path)

    def remember(self, entry: MirrorEntry) -> None:
        entries = [existing for existing in self.load() if entry.identity is None or existing.identity != entry.identity]
        self.save([entry, *entries])

    def find(self, identity: int | str) -> MirrorEntry | None:
        return next((entry for entry in self.load() if entry.identity == str(identity)), None)

    def forget(self, key: int | str | NaturalKey | MirrorEntry) -> int:
        """Drop entries by identity or natural key.

        An id that is still cached also takes every entry sharing its natural
        key, so provisional copies of the same slot go with it.
        """
        if isinstance(key, MirrorEntry):
            return self.forget_entry(key)
        if not isinstance(key, NaturalKey):
            cached = self.find(key)
            if cached is not None:
                return self.forget_entry(cached)
        entries = self.load()
        if isinstance(key, NaturalKey):
            kept = [entry for entry in entries if entry.natural_key != key]
        else:
            kept = [entry for entry in entries if entry.identity != str(key)]
        self.save(kept)
        return len(entries) - len(kept)

    def forget_entry(self, entry: MirrorEntry) -> int:
        entries = self.load()
        kept = [existing for existing in entries if not existing.matches(entry)]
        self.save(kept)
        return len(entries) - len(kept)

    def prune(self, now: datetime | None = None) -> int:
        """Drop provisional entries older than the TTL."""
        now = now or datetime.now(UTC)
        entries = self.load()
        kept = [entry for entry in entries if not entry.provisional or now - entry.cached_at <= self.ttl]
        if len(kept) != len(entries):
            self.save(kept)
        return len(entries) - len(kept)

    def reconcile(
        self,
        server_list: list[MirrorEntry],
        optimistic_entry: MirrorEntry | None = None,
    ) -> list[MirrorEntry]:
        """Merge a fresh server listing with the mirror and resync the stored copy.

        The store keeps the server's entries plus provisional entries the
        server does not know about yet; everything else is superseded.
        """
        self.prune()
        local = self.load()
        merged = merge(server_list, local, optimistic_entry)

        unconfirmed = [
            entry
            for entry in local
            if entry.provisional and not any(server_entry.matches(entry) for server_entry in server_list)
        ]
        self.save([*server_list, *unconfirmed])
        return merged
