from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, date, datetime
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from pawpal.core.errors import ConflictError
from pawpal.db.base import Base
from pawpal.db.models import Appointment, Pet, User
from pawpal.schemas.appointment import AppointmentCreateRequest
from pawpal.services.booking_service import create_appointment


def _seed(SessionLocal) -> list[tuple[int, int]]:
    seed_session = SessionLocal()
    owners = []
    for index in range(4):
        user = User(email=f"race-{index}@example.com", hashed_password="x", name=f"Racer {index}", is_active=True)
        seed_session.add(user)
        seed_session.flush()
        pet = Pet(user_id=user.id, name=f"Pet {index}", species="dog", is_active=True)
        seed_session.add(pet)
        seed_session.flush()
        owners.append((user.id, pet.id))
    seed_session.commit()
    seed_session.close()
    return owners


@pytest.mark.concurrent
def test_parallel_booking_attempts_only_one_succeeds(tmp_path):
    db_file = tmp_path / "race.db"
    engine = create_engine(f"sqlite+pysqlite:///{db_file}", connect_args={"check_same_thread": False})
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    owners = _seed(SessionLocal)

    def attempt(owner: tuple[int, int]) -> str:
        user_id, pet_id = owner
        session = SessionLocal()
        try:
            create_appointment(
                db=session,
                user_id=user_id,
                ledger="grooming",
                payload=AppointmentCreateRequest(
                    pet_id=pet_id,
                    service_type="bath",
                    appointment_date=date(2025, 6, 1),
                    time_slot="09:00",
                    price=Decimal("29.00"),
                ),
            )
            return "created"
        except ConflictError:
            return "conflict"
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=len(owners)) as pool:
        results = list(pool.map(attempt, owners))

    assert sorted(results) == ["conflict", "conflict", "conflict", "created"]

    check = SessionLocal()
    assert check.query(Appointment).count() == 1
    check.close()


@pytest.mark.concurrent
def test_active_slot_index_rejects_direct_double_insert(tmp_path):
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'index.db'}")
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    (user_id, pet_id), _, _, _ = _seed(SessionLocal)

    def row(status: str) -> Appointment:
        now = datetime.now(UTC)
        return Appointment(
            user_id=user_id,
            pet_id=pet_id,
            ledger="doctor",
            service_type="checkup",
            appointment_date=date(2025, 7, 10),
            time_slot="10:30",
            price=Decimal("35.00"),
            status=status,
            created_at=now,
            updated_at=now,
        )

    session = SessionLocal()
    session.add_all([row("cancelled"), row("completed"), row("confirmed")])
    session.commit()

    session.add(row("pending"))
    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()
    session.close()
