import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from pawpal.core.metrics import BOOKING_OUTCOMES
from pawpal.db.models import ACTIVE_STATUSES, Appointment, AppointmentStatus
from pawpal.db.session import SessionLocal
from pawpal.services.calendar_service import slot_start
from pawpal.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


def complete_past_appointments(db: Session, now: datetime | None = None) -> int:
    """Mark active appointments whose slot has started as completed.

    ``now`` is compared against the naive slot start, so it is taken as local
    service time like the appointment dates themselves.
    """
    current_time = (now or datetime.now()).replace(tzinfo=None)

    candidates = db.scalars(
        select(Appointment).where(
            Appointment.status.in_(ACTIVE_STATUSES),
            Appointment.appointment_date <= current_time.date(),
        )
    ).all()

    completed = [
        appointment
        for appointment in candidates
        if slot_start(appointment.appointment_date, appointment.time_slot) <= current_time
    ]
    for appointment in completed:
        appointment.complete()
        BOOKING_OUTCOMES.labels(ledger=appointment.ledger, outcome="completed").inc()

    if completed:
        db.commit()
        logger.info("appointments_completed count=%s", len(completed))
    return len(completed)


@celery_app.task(name="appointments.complete_past")
def complete_past_appointments_task() -> dict[str, int]:
    db = SessionLocal()
    try:
        return {"completed": complete_past_appointments(db=db)}
    finally:
        db.close()
