from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from pawpal.db.base import Base
from pawpal.db.models import Appointment, AppointmentStatus, Pet, User
from pawpal.tasks.completions import complete_past_appointments


def _build_session() -> Session:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    return TestSession()


def _seed_owner_and_pet(db: Session) -> tuple[User, Pet]:
    owner = User(email="task-owner@example.com", hashed_password="x", name="Owner", is_active=True)
    db.add(owner)
    db.flush()
    pet = Pet(user_id=owner.id, name="Biscuit", species="dog", is_active=True)
    db.add(pet)
    db.flush()
    return owner, pet


def _appointment(owner: User, pet: Pet, day: date, slot: str, status: str = "confirmed") -> Appointment:
    now = datetime.now(UTC)
    return Appointment(
        user_id=owner.id,
        pet_id=pet.id,
        ledger="grooming",
        service_type="bath",
        appointment_date=day,
        time_slot=slot,
        price=Decimal("29.00"),
        status=status,
        created_at=now,
        updated_at=now,
    )


def test_complete_past_appointments_marks_started_slots_only():
    db = _build_session()
    owner, pet = _seed_owner_and_pet(db)
    started = _appointment(owner, pet, date(2025, 6, 1), "09:00")
    later_today = _appointment(owner, pet, date(2025, 6, 1), "15:00")
    cancelled = _appointment(owner, pet, date(2025, 5, 30), "09:00", status=AppointmentStatus.CANCELLED.value)
    db.add_all([started, later_today, cancelled])
    db.commit()

    completed = complete_past_appointments(db=db, now=datetime(2025, 6, 1, 12, 0))

    assert completed == 1
    assert db.get(Appointment, started.id).status == AppointmentStatus.COMPLETED.value
    assert db.get(Appointment, later_today.id).status == AppointmentStatus.CONFIRMED.value
    assert db.get(Appointment, cancelled.id).status == AppointmentStatus.CANCELLED.value
    db.close()


def test_completed_slot_is_free_again():
    db = _build_session()
    owner, pet = _seed_owner_and_pet(db)
    db.add(_appointment(owner, pet, date(2025, 6, 1), "09:00"))
    db.commit()

    complete_past_appointments(db=db, now=datetime(2025, 6, 2, 8, 0))
    db.add(_appointment(owner, pet, date(2025, 6, 1), "09:00"))
    db.commit()

    assert db.query(Appointment).count() == 2
    db.close()


def test_nothing_to_complete_returns_zero():
    db = _build_session()

    assert complete_past_appointments(db=db, now=datetime(2025, 6, 1, 12, 0)) == 0
    db.close()
