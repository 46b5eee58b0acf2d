import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pawpal.core.config import settings
from pawpal.core.errors import TransientIOError
from pawpal.core.metrics import AVAILABILITY_DEGRADED
from pawpal.db.models import ACTIVE_STATUSES, Appointment
from pawpal.services.slot_service import Ledger, generate_slots, resolve_ledger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailabilityResult:
    day: date
    ledger: Ledger
    slots: tuple[tuple[str, bool], ...]
    # True when the ledger could not be read and every slot is reported free.
    degraded: bool = False

    @property
    def available_slots(self) -> list[str]:
        return [slot for slot, available in self.slots if available]


def taken_slots(db: Session, ledger: Ledger, day: date) -> set[str]:
    rows = db.scalars(
        select(Appointment.time_slot).where(
            Appointment.ledger == ledger.value,
            Appointment.appointment_date == day,
            Appointment.status.in_(ACTIVE_STATUSES),
        )
    ).all()
    return set(rows)


def get_availability(db: Session, category: str | Ledger, day: date, strict: bool | None = None) -> AvailabilityResult:
    descriptor = resolve_ledger(category)
    slots = generate_slots(descriptor.ledger)
    strict = settings.availability_strict if strict is None else strict

    try:
        taken = taken_slots(db=db, ledger=descriptor.ledger, day=day)
    except SQLAlchemyError:
        db.rollback()
        if strict:
            raise TransientIOError("Availability is temporarily unavailable") from None
        logger.warning(
            "availability_degraded ledger=%s date=%s",
            descriptor.ledger.value,
            day.isoformat(),
            exc_info=True,
        )
        AVAILABILITY_DEGRADED.labels(ledger=descriptor.ledger.value).inc()
        return AvailabilityResult(
            day=day,
            ledger=descriptor.ledger,
            slots=tuple((slot, True) for slot in slots),
            degraded=True,
        )

    return AvailabilityResult(
        day=day,
        ledger=descriptor.ledger,
        slots=tuple((slot, slot not in taken) for slot in slots),
    )
