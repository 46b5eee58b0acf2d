from datetime import date, timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from pawpal.db.models import ACTIVE_STATUSES, Appointment, HealthRecord, Pet, Vaccination
from pawpal.schemas.dashboard import DashboardResponse, UpcomingItem

UPCOMING_WINDOW_DAYS = 30
UPCOMING_LIMIT = 10


def _upcoming_health_records(db: Session, user_id: int, until: date) -> list[UpcomingItem]:
    rows = db.execute(
        select(HealthRecord, Pet.name)
        .join(Pet, HealthRecord.pet_id == Pet.id)
        .where(
            HealthRecord.user_id == user_id,
            Pet.is_active.is_(True),
            HealthRecord.is_completed.is_(False),
            HealthRecord.next_due_date.is_not(None),
            HealthRecord.next_due_date <= until,
        )
    ).all()
    return [
        UpcomingItem(
            id=record.id,
            title=record.title,
            record_type=record.record_type,
            due_date=record.next_due_date,
            pet_id=record.pet_id,
            pet_name=pet_name,
        )
        for record, pet_name in rows
    ]


def _upcoming_vaccinations(db: Session, user_id: int, until: date) -> list[UpcomingItem]:
    rows = db.execute(
        select(Vaccination, Pet.name)
        .join(Pet, Vaccination.pet_id == Pet.id)
        .where(
            Vaccination.user_id == user_id,
            Pet.is_active.is_(True),
            Vaccination.next_due_date.is_not(None),
            Vaccination.next_due_date <= until,
        )
    ).all()
    return [
        UpcomingItem(
            id=vaccination.id,
            title=vaccination.vaccine_name,
            record_type="vaccination",
            due_date=vaccination.next_due_date,
            pet_id=vaccination.pet_id,
            pet_name=pet_name,
        )
        for vaccination, pet_name in rows
    ]


def build_dashboard(db: Session, user_id: int, today: date | None = None) -> DashboardResponse:
    today = today or date.today()
    until = today + timedelta(days=UPCOMING_WINDOW_DAYS)

    items = _upcoming_health_records(db, user_id, until) + _upcoming_vaccinations(db, user_id, until)
    items.sort(key=lambda item: item.due_date)

    pet_count = db.scalar(
        select(func.count(Pet.id)).where(Pet.user_id == user_id, Pet.is_active.is_(True))
    )
    upcoming_appointments = db.scalar(
        select(func.count(Appointment.id)).where(
            Appointment.user_id == user_id,
            Appointment.status.in_(ACTIVE_STATUSES),
            Appointment.appointment_date >= today,
        )
    )
    return DashboardResponse(
        upcoming_items=items[:UPCOMING_LIMIT],
        pet_count=pet_count or 0,
        upcoming_appointments=upcoming_appointments or 0,
    )
