from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from pawpal.core.config import settings
from pawpal.core.rate_limiter import rate_limit_or_raise
from pawpal.db.session import get_db
from pawpal.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from pawpal.schemas.user import UserResponse
from pawpal.services.auth_service import login_user, register_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
) -> UserResponse:
    rate_limit_or_raise("register", settings.auth_register_max_attempts, request=request, response=response)
    user = register_user(payload=payload, db=db)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse, status_code=status.HTTP_200_OK)
def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
) -> TokenResponse:
    rate_limit_or_raise("login", settings.auth_login_max_attempts, request=request, response=response)
    return login_user(payload=payload, db=db)
