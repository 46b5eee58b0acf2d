from sqlalchemy import select
from sqlalchemy.orm import Session

from pawpal.core.errors import OwnershipError
from pawpal.db.models import Pet
from pawpal.schemas.pet import PetCreateRequest, PetUpdateRequest

REQUIRED_PET_FIELDS = frozenset({"name", "species"})


def _owned_active_pet_query(pet_id: int, user_id: int):
    return select(Pet).where(Pet.id == pet_id, Pet.user_id == user_id, Pet.is_active.is_(True))


def is_owned_active_pet(db: Session, pet_id: int, user_id: int) -> bool:
    return db.scalar(_owned_active_pet_query(pet_id, user_id)) is not None


def get_owned_pet(db: Session, pet_id: int, user_id: int) -> Pet:
    pet = db.scalar(_owned_active_pet_query(pet_id, user_id))
    if pet is None:
        raise OwnershipError()
    return pet


def list_pets(db: Session, user_id: int) -> list[Pet]:
    return list(
        db.scalars(
            select(Pet)
            .where(Pet.user_id == user_id, Pet.is_active.is_(True))
            .order_by(Pet.created_at.desc(), Pet.id.desc())
        ).all()
    )


def create_pet(db: Session, user_id: int, payload: PetCreateRequest) -> Pet:
    pet = Pet(user_id=user_id, is_active=True, **payload.model_dump())
    db.add(pet)
    db.commit()
    db.refresh(pet)
    return pet


def update_pet(db: Session, pet_id: int, user_id: int, payload: PetUpdateRequest) -> Pet:
    pet = get_owned_pet(db=db, pet_id=pet_id, user_id=user_id)
    for field_name, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field_name in REQUIRED_PET_FIELDS:
            continue
        setattr(pet, field_name, value)
    db.commit()
    db.refresh(pet)
    return pet


def deactivate_pet(db: Session, pet_id: int, user_id: int) -> None:
    pet = get_owned_pet(db=db, pet_id=pet_id, user_id=user_id)
    pet.is_active = False
    db.commit()
