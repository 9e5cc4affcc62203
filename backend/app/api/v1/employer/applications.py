"""
Employer applicants API - filtered list with counts, accept/reject/schedule,
resume download, live stream
"""
from datetime import datetime
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import RedirectResponse, StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.config import STATUS_ACCEPTED, STATUS_REJECTED, STATUS_SCHEDULED
from backend.app.core.dependencies import get_change_feed, get_current_employer, get_db, get_session_factory
from backend.app.core.errors import NotFound, ValidationFailed
from backend.app.core.logging_config import get_logger
from backend.app.models.user import User
from backend.app.schemas.application import (
    AcceptIn,
    EmployerApplicationsResponse,
    RejectIn,
    ScheduleIn,
    StatusUpdateResponse,
)
from backend.app.schemas.job import job_to_record
from backend.app.services.application_service import ApplicationService
from backend.app.services.change_feed import ChangeFeed
from backend.app.services.job_service import JobService
from backend.app.services.projections import (
    STATUS_FILTERS,
    compose_schedule,
    filter_applications,
    project_employer_feed,
    status_counts,
)
from backend.app.services.status_service import StatusService
from backend.app.utils.downloads import file_download
from backend.app.utils.sse import stream_view
from backend.app.views.employer_feed import EmployerApplicationFeed

logger = get_logger("api.employer.applications")
router = APIRouter(prefix="/employer/applications", tags=["employer"])


def _check_status_filter(status_filter: str) -> None:
    if status_filter not in STATUS_FILTERS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown status filter: {status_filter}",
        )


def _listing(items: list[dict], status_filter: str, search: str) -> EmployerApplicationsResponse:
    return EmployerApplicationsResponse(
        items=filter_applications(items, status=status_filter, search=search),
        counts=status_counts(items),
    )


@router.get("", response_model=EmployerApplicationsResponse)
def list_applicants(
    status_filter: str = Query("all", alias="status"),
    search: str = Query(""),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_employer),
):
    """
    Applicants across the employer's jobs, newest first.

    - **status**: all | pending | scheduled | accepted | rejected
    - **search**: case-insensitive match on name, email or position
    Counts always cover the unfiltered list.
    """
    _check_status_filter(status_filter)
    jobs = {j.id: job_to_record(j) for j in JobService.list_employer_jobs(db, current_user.id)}
    items = project_employer_feed(ApplicationService.list_all_records(db), jobs)
    return _listing(items, status_filter, search)


@router.get("/stream")
def stream_applicants(
    status_filter: str = Query("all", alias="status"),
    search: str = Query(""),
    current_user: User = Depends(get_current_employer),
    session_factory: Callable = Depends(get_session_factory),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """Server-sent events: filtered list and counts again whenever jobs or applications change."""
    _check_status_filter(status_filter)
    view = EmployerApplicationFeed(session_factory, current_user.id, feed=feed)
    return StreamingResponse(
        stream_view(view, lambda items: _listing(items, status_filter, search).model_dump(mode="json")),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )


def _transition(
    db: Session,
    employer: User,
    application_id: str,
    new_status: str,
    feed: ChangeFeed,
    scheduled_at: datetime | None = None,
    **metadata,
) -> StatusUpdateResponse:
    try:
        result = StatusService.transition(
            db, employer, application_id, new_status, scheduled_at=scheduled_at, feed=feed, **metadata
        )
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Status update error application_id=%s status=%s", application_id, new_status)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update status",
        )

    if not result["success"]:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=result["message"])
    app = result["application"]
    return StatusUpdateResponse(
        id=app.id,
        status=app.status,
        scheduledAt=app.scheduled_at,
        updatedAt=app.updated_at,
        message=result["message"],
    )


def _require_confirmation(confirm: bool, action: str) -> None:
    if not confirm:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Confirmation required to {action} this applicant.",
        )


@router.post("/{application_id}/accept", response_model=StatusUpdateResponse)
def accept_applicant(
    application_id: str,
    body: AcceptIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_employer),
    feed: ChangeFeed = Depends(get_change_feed),
):
    _require_confirmation(body.confirm, "accept")
    return _transition(
        db, current_user, application_id, STATUS_ACCEPTED, feed,
        acceptance_requirements=body.acceptanceRequirements,
    )


@router.post("/{application_id}/reject", response_model=StatusUpdateResponse)
def reject_applicant(
    application_id: str,
    body: RejectIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_employer),
    feed: ChangeFeed = Depends(get_change_feed),
):
    _require_confirmation(body.confirm, "reject")
    return _transition(
        db, current_user, application_id, STATUS_REJECTED, feed,
        rejection_reason=body.rejectionReason,
        rejection_comment=body.rejectionComment,
    )


@router.post("/{application_id}/schedule", response_model=StatusUpdateResponse)
def schedule_interview(
    application_id: str,
    body: ScheduleIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_employer),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """Set an interview time (date YYYY-MM-DD, time HH:MM, server-local)."""
    try:
        scheduled_at = compose_schedule(body.date, body.time)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _transition(
        db, current_user, application_id, STATUS_SCHEDULED, feed,
        scheduled_at=scheduled_at,
        interview_details=body.interviewDetails,
    )


@router.get("/{application_id}/resume")
def download_applicant_resume(
    application_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_employer),
):
    """Resume bytes for inline/stored files, or a redirect for external links."""
    try:
        app = ApplicationService.get_application(db, application_id)
        if not StatusService.is_owner(db, current_user, app):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only manage applications for your own jobs.",
            )
        resolved = ApplicationService.resolve_resume(app)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError:
        logger.warning("Unreadable resume application_id=%s", application_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume could not be read")
    except RuntimeError:
        logger.exception("Resume download error application_id=%s", application_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error downloading resume",
        )

    if isinstance(resolved, str):
        return RedirectResponse(resolved)
    return file_download(resolved.data, resolved.filename, resolved.content_type)
