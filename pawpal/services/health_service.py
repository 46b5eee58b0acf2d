from sqlalchemy import func, select
from sqlalchemy.orm import Session

from pawpal.db.models import DietPlan, HealthRecord, Vaccination
from pawpal.schemas.health import DietPlanCreateRequest, HealthRecordCreateRequest, VaccinationCreateRequest
from pawpal.services.pet_service import get_owned_pet


def list_health_records(db: Session, pet_id: int, user_id: int) -> list[HealthRecord]:
    get_owned_pet(db=db, pet_id=pet_id, user_id=user_id)
    due = func.coalesce(HealthRecord.next_due_date, HealthRecord.date_scheduled)
    return list(
        db.scalars(
            select(HealthRecord)
            .where(HealthRecord.pet_id == pet_id, HealthRecord.user_id == user_id)
            .order_by(due.asc(), HealthRecord.created_at.desc(), HealthRecord.id.desc())
        ).all()
    )


def create_health_record(db: Session, pet_id: int, user_id: int, payload: HealthRecordCreateRequest) -> HealthRecord:
    get_owned_pet(db=db, pet_id=pet_id, user_id=user_id)
    record = HealthRecord(
        pet_id=pet_id,
        user_id=user_id,
        is_completed=False,
        next_due_date=payload.date_scheduled,
        **payload.model_dump(),
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def list_vaccinations(db: Session, pet_id: int, user_id: int) -> list[Vaccination]:
    get_owned_pet(db=db, pet_id=pet_id, user_id=user_id)
    return list(
        db.scalars(
            select(Vaccination)
            .where(Vaccination.pet_id == pet_id, Vaccination.user_id == user_id)
            .order_by(Vaccination.next_due_date.asc(), Vaccination.date_administered.desc(), Vaccination.id)
        ).all()
    )


def create_vaccination(db: Session, pet_id: int, user_id: int, payload: VaccinationCreateRequest) -> Vaccination:
    get_owned_pet(db=db, pet_id=pet_id, user_id=user_id)
    vaccination = Vaccination(pet_id=pet_id, user_id=user_id, **payload.model_dump())
    db.add(vaccination)
    db.commit()
    db.refresh(vaccination)
    return vaccination


def list_diet_plans(db: Session, pet_id: int, user_id: int) -> list[DietPlan]:
    get_owned_pet(db=db, pet_id=pet_id, user_id=user_id)
    return list(
        db.scalars(
            select(DietPlan)
            .where(DietPlan.pet_id == pet_id, DietPlan.user_id == user_id)
            .order_by(DietPlan.is_active.desc(), DietPlan.created_at.desc(), DietPlan.id.desc())
        ).all()
    )


def create_diet_plan(db: Session, pet_id: int, user_id: int, payload: DietPlanCreateRequest) -> DietPlan:
    get_owned_pet(db=db, pet_id=pet_id, user_id=user_id)
    plan = DietPlan(pet_id=pet_id, user_id=user_id, is_active=True, **payload.model_dump())
    db.add(plan)
    db.commit()
    db.refresh(plan)
    return plan
