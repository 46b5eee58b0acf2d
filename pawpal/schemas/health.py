from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from pawpal.db.models.health_record import HealthRecordType


class HealthRecordCreateRequest(BaseModel):
    record_type: HealthRecordType
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    date_scheduled: date | None = None
    veterinarian_name: str | None = Field(default=None, max_length=120)
    clinic_name: str | None = Field(default=None, max_length=120)
    notes: str | None = Field(default=None, max_length=1000)
    cost: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    is_recurring: bool = False
    recurrence_interval_days: int | None = Field(default=None, gt=0)

    model_config = {"use_enum_values": True}

    @model_validator(mode="after")
    def validate_recurrence(self) -> "HealthRecordCreateRequest":
        if self.recurrence_interval_days is not None and not self.is_recurring:
            raise ValueError("recurrence_interval_days requires is_recurring")
        return self


class HealthRecordResponse(BaseModel):
    id: int
    pet_id: int
    user_id: int
    record_type: HealthRecordType
    title: str
    description: str | None
    date_scheduled: date | None
    date_completed: date | None
    veterinarian_name: str | None
    clinic_name: str | None
    notes: str | None
    cost: Decimal | None
    is_completed: bool
    is_recurring: bool
    recurrence_interval_days: int | None
    next_due_date: date | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class VaccinationCreateRequest(BaseModel):
    vaccine_name: str = Field(min_length=1, max_length=120)
    date_administered: date | None = None
    next_due_date: date | None = None
    veterinarian_name: str | None = Field(default=None, max_length=120)
    clinic_name: str | None = Field(default=None, max_length=120)
    batch_number: str | None = Field(default=None, max_length=64)
    notes: str | None = Field(default=None, max_length=1000)
    is_core_vaccine: bool = False

    @model_validator(mode="after")
    def validate_dates(self) -> "VaccinationCreateRequest":
        if self.date_administered and self.next_due_date and self.next_due_date < self.date_administered:
            raise ValueError("next_due_date must not precede date_administered")
        return self


class VaccinationResponse(BaseModel):
    id: int
    pet_id: int
    user_id: int
    vaccine_name: str
    date_administered: date | None
    next_due_date: date | None
    veterinarian_name: str | None
    clinic_name: str | None
    batch_number: str | None
    notes: str | None
    is_core_vaccine: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DietPlanCreateRequest(BaseModel):
    food_brand: str | None = Field(default=None, max_length=120)
    food_type: str | None = Field(default=None, max_length=120)
    daily_amount: str | None = Field(default=None, max_length=120)
    feeding_times: list[str] | None = None
    special_instructions: str | None = Field(default=None, max_length=1000)
    start_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="after")
    def validate_interval(self) -> "DietPlanCreateRequest":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")
        return self


class DietPlanResponse(BaseModel):
    id: int
    pet_id: int
    user_id: int
    food_brand: str | None
    food_type: str | None
    daily_amount: str | None
    feeding_times: list[str] | None
    special_instructions: str | None
    start_date: date | None
    end_date: date | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
