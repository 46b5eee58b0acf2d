from datetime import date, datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, Field

TIME_SLOT_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class AppointmentCreateRequest(BaseModel):
    pet_id: int
    service_type: str = Field(
        min_length=1,
        max_length=40,
        validation_alias=AliasChoices("service_type", "visit_type"),
    )
    appointment_date: date
    time_slot: str = Field(pattern=TIME_SLOT_PATTERN)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    notes: str | None = Field(default=None, max_length=1000)
    veterinarian_name: str | None = Field(default=None, max_length=120)
    clinic_name: str | None = Field(default=None, max_length=120)


class AppointmentResponse(BaseModel):
    id: int
    user_id: int
    pet_id: int
    ledger: str
    service_type: str
    appointment_date: date
    time_slot: str
    price: Decimal
    status: str
    notes: str | None
    veterinarian_name: str | None
    clinic_name: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SlotAvailability(BaseModel):
    time_slot: str
    available: bool


class AvailabilityResponse(BaseModel):
    date: date
    ledger: str
    degraded: bool = False
    availability: list[SlotAvailability]


class CatalogServiceResponse(BaseModel):
    service_type: str
    label: str
    price: Decimal


class CatalogResponse(BaseModel):
    ledger: str
    open_hour: int
    close_hour: int
    slots: list[str]
    services: list[CatalogServiceResponse]
