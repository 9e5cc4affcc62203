"""
Job listing for seekers - open postings only
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.core.dependencies import get_current_user, get_db
from backend.app.models.user import User
from backend.app.schemas.job import JobPayload, job_to_record
from backend.app.services.job_service import JobService

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=List[JobPayload])
def list_open_jobs(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Open jobs, newest first."""
    return [job_to_record(j) for j in JobService.list_open_jobs(db)]
