from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from pawpal.api.deps import get_current_user
from pawpal.db.models import User
from pawpal.db.session import get_db
from pawpal.schemas.user import ProfileUpdateRequest, UserResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse, status_code=status.HTTP_200_OK)
def get_me(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.put("/me", response_model=UserResponse, status_code=status.HTTP_200_OK)
def update_me(
    payload: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserResponse:
    for field_name, value in payload.model_dump().items():
        setattr(current_user, field_name, value)
    db.commit()
    db.refresh(current_user)
    return UserResponse.model_validate(current_user)
