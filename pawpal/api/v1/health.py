from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from pawpal.api.deps import get_current_user
from pawpal.db.models import User
from pawpal.db.session import get_db
from pawpal.schemas.health import (
    DietPlanCreateRequest,
    DietPlanResponse,
    HealthRecordCreateRequest,
    HealthRecordResponse,
    VaccinationCreateRequest,
    VaccinationResponse,
)
from pawpal.services import health_service

router = APIRouter(prefix="/pets/{pet_id}", tags=["health"])


@router.get("/health-records", response_model=list[HealthRecordResponse], status_code=status.HTTP_200_OK)
def list_health_records(
    pet_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[HealthRecordResponse]:
    records = health_service.list_health_records(db=db, pet_id=pet_id, user_id=current_user.id)
    return [HealthRecordResponse.model_validate(record) for record in records]


@router.post("/health-records", response_model=HealthRecordResponse, status_code=status.HTTP_201_CREATED)
def create_health_record(
    pet_id: int,
    payload: HealthRecordCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> HealthRecordResponse:
    record = health_service.create_health_record(db=db, pet_id=pet_id, user_id=current_user.id, payload=payload)
    return HealthRecordResponse.model_validate(record)


@router.get("/vaccinations", response_model=list[VaccinationResponse], status_code=status.HTTP_200_OK)
def list_vaccinations(
    pet_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[VaccinationResponse]:
    vaccinations = health_service.list_vaccinations(db=db, pet_id=pet_id, user_id=current_user.id)
    return [VaccinationResponse.model_validate(vaccination) for vaccination in vaccinations]


@router.post("/vaccinations", response_model=VaccinationResponse, status_code=status.HTTP_201_CREATED)
def create_vaccination(
    pet_id: int,
    payload: VaccinationCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> VaccinationResponse:
    vaccination = health_service.create_vaccination(db=db, pet_id=pet_id, user_id=current_user.id, payload=payload)
    return VaccinationResponse.model_validate(vaccination)


@router.get("/diet-plans", response_model=list[DietPlanResponse], status_code=status.HTTP_200_OK)
def list_diet_plans(
    pet_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[DietPlanResponse]:
    plans = health_service.list_diet_plans(db=db, pet_id=pet_id, user_id=current_user.id)
    return [DietPlanResponse.model_validate(plan) for plan in plans]


@router.post("/diet-plans", response_model=DietPlanResponse, status_code=status.HTTP_201_CREATED)
def create_diet_plan(
    pet_id: int,
    payload: DietPlanCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DietPlanResponse:
    plan = health_service.create_diet_plan(db=db, pet_id=pet_id, user_id=current_user.id, payload=payload)
    return DietPlanResponse.model_validate(plan)
