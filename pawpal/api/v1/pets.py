from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from pawpal.api.deps import get_current_user
from pawpal.db.models import User
from pawpal.db.session import get_db
from pawpal.schemas.pet import PetCreateRequest, PetResponse, PetUpdateRequest
from pawpal.services.pet_service import create_pet, deactivate_pet, get_owned_pet, list_pets, update_pet

router = APIRouter(prefix="/pets", tags=["pets"])


@router.get("", response_model=list[PetResponse], status_code=status.HTTP_200_OK)
def list_my_pets(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[PetResponse]:
    return [PetResponse.model_validate(pet) for pet in list_pets(db=db, user_id=current_user.id)]


@router.post("", response_model=PetResponse, status_code=status.HTTP_201_CREATED)
def add_pet(
    payload: PetCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PetResponse:
    pet = create_pet(db=db, user_id=current_user.id, payload=payload)
    return PetResponse.model_validate(pet)


@router.get("/{pet_id}", response_model=PetResponse, status_code=status.HTTP_200_OK)
def get_pet(
    pet_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PetResponse:
    return PetResponse.model_validate(get_owned_pet(db=db, pet_id=pet_id, user_id=current_user.id))


@router.patch("/{pet_id}", response_model=PetResponse, status_code=status.HTTP_200_OK)
def edit_pet(
    pet_id: int,
    payload: PetUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PetResponse:
    pet = update_pet(db=db, pet_id=pet_id, user_id=current_user.id, payload=payload)
    return PetResponse.model_validate(pet)


@router.delete("/{pet_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_pet(
    pet_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    deactivate_pet(db=db, pet_id=pet_id, user_id=current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
