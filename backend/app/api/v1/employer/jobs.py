"""
Employer job postings - CRUD and open/closed toggle
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.dependencies import get_change_feed, get_current_employer, get_db
from backend.app.core.errors import NotFound, ValidationFailed
from backend.app.core.logging_config import get_logger
from backend.app.models.user import User
from backend.app.schemas.application import MessageResponse
from backend.app.schemas.job import JobIn, JobPayload, job_to_record
from backend.app.services.change_feed import ChangeFeed
from backend.app.services.job_service import JobService
from backend.app.services.projections import sort_by_timestamp_desc

logger = get_logger("api.employer.jobs")
router = APIRouter(prefix="/employer/jobs", tags=["employer"])


def _server_error(db: Session, action: str, job_id: str | None = None) -> HTTPException:
    db.rollback()
    logger.exception("Job %s error job_id=%s", action, job_id)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Error trying to {action} job",
    )


@router.get("", response_model=List[JobPayload])
def list_my_jobs(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_employer),
):
    """Own postings, newest first."""
    jobs = [job_to_record(j) for j in JobService.list_employer_jobs(db, current_user.id)]
    return sort_by_timestamp_desc(jobs, "createdAt")


@router.post("", response_model=JobPayload, status_code=status.HTTP_201_CREATED)
def create_job(
    payload: JobIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_employer),
    feed: ChangeFeed = Depends(get_change_feed),
):
    try:
        job = JobService.create_job(db, current_user, payload, feed=feed)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SQLAlchemyError:
        raise _server_error(db, "create")
    return job_to_record(job)


@router.put("/{job_id}", response_model=JobPayload)
def update_job(
    job_id: str,
    payload: JobIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_employer),
    feed: ChangeFeed = Depends(get_change_feed),
):
    try:
        job = JobService.update_job(db, current_user, job_id, payload, feed=feed)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SQLAlchemyError:
        raise _server_error(db, "update", job_id)
    return job_to_record(job)


@router.delete("/{job_id}", response_model=MessageResponse)
def delete_job(
    job_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_employer),
    feed: ChangeFeed = Depends(get_change_feed),
):
    try:
        JobService.delete_job(db, current_user, job_id, feed=feed)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SQLAlchemyError:
        raise _server_error(db, "delete", job_id)
    return MessageResponse(message="Job deleted successfully")


@router.post("/{job_id}/toggle-status", response_model=JobPayload)
def toggle_job_status(
    job_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_employer),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """Open <-> closed."""
    try:
        job = JobService.toggle_status(db, current_user, job_id, feed=feed)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SQLAlchemyError:
        raise _server_error(db, "update", job_id)
    return job_to_record(job)
