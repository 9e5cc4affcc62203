"""
Seeker applications API - list own applications, apply, cancel, live stream
"""
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.dependencies import get_change_feed, get_current_seeker, get_db, get_session_factory
from backend.app.core.errors import NotFound
from backend.app.core.logging_config import get_logger
from backend.app.models.user import User
from backend.app.schemas.application import (
    ApplyIn,
    ApplyResponse,
    MessageResponse,
    SeekerApplicationsResponse,
)
from backend.app.services.application_service import ApplicationService
from backend.app.services.change_feed import ChangeFeed
from backend.app.services.projections import project_seeker_feed
from backend.app.utils.sse import stream_view
from backend.app.views.seeker_feed import SeekerApplicationFeed

logger = get_logger("api.applications")
router = APIRouter(prefix="/applications", tags=["applications"])


def _render(items: list[dict]) -> dict:
    return SeekerApplicationsResponse(items=items).model_dump(mode="json")


@router.get("", response_model=SeekerApplicationsResponse)
def list_my_applications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_seeker),
):
    """Own applications, newest first."""
    records = ApplicationService.list_seeker_records(db, current_user.id)
    return SeekerApplicationsResponse(items=project_seeker_feed(records))


@router.post("", response_model=ApplyResponse, status_code=status.HTTP_201_CREATED)
def apply_to_job(
    body: ApplyIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_seeker),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """Apply to an open job with the current profile and files."""
    try:
        result = ApplicationService.apply(db, current_user, body.jobId, feed=feed)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Apply error job_id=%s seeker_id=%s", body.jobId, current_user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error submitting application",
        )

    if not result["success"]:
        logger.info("Apply refused job_id=%s seeker_id=%s reason=%s", body.jobId, current_user.id, result["message"])
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=result["message"])

    application = result["application"]
    return ApplyResponse(
        id=application.id,
        jobId=application.job_id,
        status=application.status,
        message=result["message"],
    )


@router.get("/stream")
def stream_my_applications(
    current_user: User = Depends(get_current_seeker),
    session_factory: Callable = Depends(get_session_factory),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """Server-sent events: the full list again on every change to the applications collection."""
    view = SeekerApplicationFeed(session_factory, current_user.id, feed=feed)
    return StreamingResponse(
        stream_view(view, _render),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )


@router.delete("/{application_id}", response_model=MessageResponse)
def cancel_application(
    application_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_seeker),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """Withdraw an application while it is still pending."""
    try:
        result = ApplicationService.cancel_application(db, current_user, application_id, feed=feed)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Cancel error application_id=%s", application_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error canceling application",
        )

    if not result["success"]:
        code = status.HTTP_403_FORBIDDEN if result["reason"] == "not_owner" else status.HTTP_409_CONFLICT
        raise HTTPException(status_code=code, detail=result["message"])
    return MessageResponse(message=result["message"])
