import logging
from datetime import UTC, date, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pawpal.core.config import settings
from pawpal.core.errors import ConflictError, InvalidRequestError, InvalidStateError, NotFoundError, OwnershipError
from pawpal.core.metrics import BOOKING_OUTCOMES
from pawpal.db.models import ACTIVE_STATUSES, Appointment, AppointmentStatus
from pawpal.schemas.appointment import AppointmentCreateRequest
from pawpal.services.pet_service import is_owned_active_pet
from pawpal.services.slot_service import Ledger, LedgerDescriptor, generate_slots, resolve_ledger

logger = logging.getLogger(__name__)

SLOT_UNAVAILABLE_DETAIL = "Selected time slot is not available"
IDEMPOTENCY_KEY_REUSE_DETAIL = "Idempotency key already used with another booking"
APPOINTMENT_NOT_FOUND_DETAIL = "Appointment not found"
CANNOT_CANCEL_DETAIL = "Cannot cancel this appointment"


def _validate_request(descriptor: LedgerDescriptor, payload: AppointmentCreateRequest) -> None:
    if payload.service_type not in descriptor.services:
        raise InvalidRequestError(
            f"Unknown {descriptor.ledger.value} service: {payload.service_type}",
            detail={"allowed": list(descriptor.service_types)},
        )
    if payload.time_slot not in generate_slots(descriptor.ledger):
        raise InvalidRequestError(f"Time slot {payload.time_slot} is outside the {descriptor.ledger.value} schedule")
    if not descriptor.allows_clinic_details and (payload.veterinarian_name or payload.clinic_name):
        raise InvalidRequestError("veterinarian_name and clinic_name apply to doctor appointments only")


def _same_booking(appointment: Appointment, ledger: Ledger, payload: AppointmentCreateRequest) -> bool:
    return (
        appointment.ledger == ledger.value
        and appointment.pet_id == payload.pet_id
        and appointment.appointment_date == payload.appointment_date
        and appointment.time_slot == payload.time_slot
    )


def _replay_idempotent_create(
    db: Session,
    user_id: int,
    idempotency_key: str,
    ledger: Ledger,
    payload: AppointmentCreateRequest,
) -> Appointment | None:
    existing = db.scalar(
        select(Appointment).where(
            Appointment.user_id == user_id,
            Appointment.idempotency_key == idempotency_key,
        )
    )
    if existing is None:
        return None
    if not _same_booking(existing, ledger, payload):
        raise ConflictError(IDEMPOTENCY_KEY_REUSE_DETAIL, code="idempotency_key_reused")
    return existing


def _active_slot_taken(db: Session, ledger: Ledger, day: date, time_slot: str) -> bool:
    return (
        db.scalar(
            select(Appointment.id).where(
                Appointment.ledger == ledger.value,
                Appointment.appointment_date == day,
                Appointment.time_slot == time_slot,
                Appointment.status.in_(ACTIVE_STATUSES),
            )
        )
        is not None
    )


def _resolve_price(descriptor: LedgerDescriptor, payload: AppointmentCreateRequest):
    catalog_price = descriptor.catalog_price(payload.service_type)
    if settings.booking_price_from_catalog:
        return catalog_price
    if payload.price != catalog_price:
        logger.info(
            "booking_price_differs ledger=%s service=%s submitted=%s catalog=%s",
            descriptor.ledger.value,
            payload.service_type,
            payload.price,
            catalog_price,
        )
    return payload.price


def create_appointment(
    db: Session,
    user_id: int,
    ledger: Ledger | str,
    payload: AppointmentCreateRequest,
    idempotency_key: str | None = None,
) -> Appointment:
    descriptor = resolve_ledger(ledger)
    _validate_request(descriptor, payload)

    if idempotency_key:
        existing = _replay_idempotent_create(db, user_id, idempotency_key, descriptor.ledger, payload)
        if existing is not None:
            return existing

    if not is_owned_active_pet(db=db, pet_id=payload.pet_id, user_id=user_id):
        BOOKING_OUTCOMES.labels(ledger=descriptor.ledger.value, outcome="ownership_error").inc()
        raise OwnershipError()

    if _active_slot_taken(db, descriptor.ledger, payload.appointment_date, payload.time_slot):
        BOOKING_OUTCOMES.labels(ledger=descriptor.ledger.value, outcome="conflict").inc()
        raise ConflictError(SLOT_UNAVAILABLE_DETAIL)

    now = datetime.now(UTC)
    appointment = Appointment(
        user_id=user_id,
        pet_id=payload.pet_id,
        ledger=descriptor.ledger.value,
        service_type=payload.service_type,
        appointment_date=payload.appointment_date,
        time_slot=payload.time_slot,
        price=_resolve_price(descriptor, payload),
        status=AppointmentStatus.CONFIRMED.value,
        notes=payload.notes,
        veterinarian_name=payload.veterinarian_name,
        clinic_name=payload.clinic_name,
        idempotency_key=idempotency_key,
        created_at=now,
        updated_at=now,
    )
    db.add(appointment)
    try:
        db.commit()
    except IntegrityError:
        # Lost the race against a concurrent insert: the active-slot index rejected this row.
        db.rollback()
        if idempotency_key:
            existing = _replay_idempotent_create(db, user_id, idempotency_key, descriptor.ledger, payload)
            if existing is not None:
                return existing
        BOOKING_OUTCOMES.labels(ledger=descriptor.ledger.value, outcome="conflict").inc()
        logger.info(
            "booking_conflict ledger=%s date=%s slot=%s",
            descriptor.ledger.value,
            payload.appointment_date.isoformat(),
            payload.time_slot,
        )
        raise ConflictError(SLOT_UNAVAILABLE_DETAIL) from None

    db.refresh(appointment)
    BOOKING_OUTCOMES.labels(ledger=descriptor.ledger.value, outcome="created").inc()
    logger.info(
        "booking_created id=%s ledger=%s date=%s slot=%s",
        appointment.id,
        appointment.ledger,
        appointment.appointment_date.isoformat(),
        appointment.time_slot,
    )
    return appointment


def get_appointment(db: Session, appointment_id: int, user_id: int, ledger: Ledger | str) -> Appointment:
    descriptor = resolve_ledger(ledger)
    appointment = db.scalar(
        select(Appointment).where(
            Appointment.id == appointment_id,
            Appointment.user_id == user_id,
            Appointment.ledger == descriptor.ledger.value,
        )
    )
    if appointment is None:
        raise NotFoundError(APPOINTMENT_NOT_FOUND_DETAIL)
    return appointment


def list_appointments(
    db: Session,
    user_id: int,
    ledger: Ledger | str,
    status: AppointmentStatus | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[Appointment]:
    descriptor = resolve_ledger(ledger)
    query = select(Appointment).where(
        Appointment.user_id == user_id,
        Appointment.ledger == descriptor.ledger.value,
    )
    if status:
        query = query.where(Appointment.status == status.value)
    if date_from:
        query = query.where(Appointment.appointment_date >= date_from)
    if date_to:
        query = query.where(Appointment.appointment_date <= date_to)

    query = query.order_by(
        Appointment.appointment_date.desc(),
        Appointment.time_slot.desc(),
        Appointment.id.desc(),
    )
    return list(db.scalars(query.limit(limit).offset(offset)).all())


def cancel_appointment(db: Session, appointment_id: int, user_id: int, ledger: Ledger | str) -> Appointment:
    descriptor = resolve_ledger(ledger)
    appointment = db.scalar(
        select(Appointment)
        .where(
            Appointment.id == appointment_id,
            Appointment.user_id == user_id,
            Appointment.ledger == descriptor.ledger.value,
        )
        .with_for_update()
    )
    if appointment is None:
        raise NotFoundError(APPOINTMENT_NOT_FOUND_DETAIL)

    if not appointment.can_transition_to(AppointmentStatus.CANCELLED):
        current_status = appointment.status
        db.rollback()
        raise InvalidStateError(CANNOT_CANCEL_DETAIL, detail={"status": current_status})

    appointment.cancel()
    db.commit()
    db.refresh(appointment)
    BOOKING_OUTCOMES.labels(ledger=descriptor.ledger.value, outcome="cancelled").inc()
    logger.info("booking_cancelled id=%s ledger=%s", appointment.id, appointment.ledger)
    return appointment
