from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from pawpal.api.deps import get_current_user
from pawpal.db.models import User
from pawpal.db.session import get_db
from pawpal.schemas.dashboard import DashboardResponse
from pawpal.services.dashboard_service import build_dashboard

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse, status_code=status.HTTP_200_OK)
def get_dashboard(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DashboardResponse:
    return build_dashboard(db=db, user_id=current_user.id)
