from datetime import date, datetime

from pydantic import BaseModel, Field

from pawpal.db.models.pet import PetGender


class PetCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    species: str = Field(min_length=1, max_length=60)
    breed: str | None = Field(default=None, max_length=120)
    birth_date: date | None = None
    weight: float | None = Field(default=None, gt=0)
    gender: PetGender | None = None
    photo_url: str | None = Field(default=None, max_length=500)
    microchip_id: str | None = Field(default=None, max_length=64)

    model_config = {"use_enum_values": True}


class PetUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    species: str | None = Field(default=None, min_length=1, max_length=60)
    breed: str | None = Field(default=None, max_length=120)
    birth_date: date | None = None
    weight: float | None = Field(default=None, gt=0)
    gender: PetGender | None = None
    photo_url: str | None = Field(default=None, max_length=500)
    microchip_id: str | None = Field(default=None, max_length=64)

    model_config = {"use_enum_values": True}


class PetResponse(BaseModel):
    id: int
    user_id: int
    name: str
    species: str
    breed: str | None
    birth_date: date | None
    weight: float | None
    gender: PetGender | None
    photo_url: str | None
    microchip_id: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
