"""
Employer overview - job and applicant totals, recent postings
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.core.dependencies import get_current_employer, get_db
from backend.app.models.user import User
from backend.app.schemas.overview import OverviewResponse
from backend.app.services.overview_service import OverviewService

router = APIRouter(prefix="/employer/overview", tags=["employer"])


@router.get("", response_model=OverviewResponse)
def get_overview(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_employer),
):
    return OverviewService.build_overview(db, current_user.id)
