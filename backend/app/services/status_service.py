"""
Status transitions of an application, made by the employer owning its job.

pending -> scheduled | accepted | rejected is the lifecycle the views offer.
The handler itself does not refuse a second transition away from a resolved
status; it logs it so the event is visible.
"""
from datetime import datetime

from sqlalchemy.orm import Session

from backend.app.core.config import (
    APPLICATION_STATUSES,
    COLLECTION_APPLICATIONS,
    STATUS_ACCEPTED,
    STATUS_PENDING,
    STATUS_REJECTED,
    STATUS_SCHEDULED,
)
from backend.app.core.errors import ValidationFailed
from backend.app.core.logging_config import get_logger
from backend.app.models.application import Application
from backend.app.models.job import Job
from backend.app.models.user import User
from backend.app.services.application_service import ApplicationService
from backend.app.services.change_feed import ChangeFeed, change_feed

logger = get_logger("services.status")

# Outcome fields written only together with their status
_METADATA_BY_STATUS = {
    STATUS_REJECTED: ("rejection_reason", "rejection_comment"),
    STATUS_ACCEPTED: ("acceptance_requirements",),
    STATUS_SCHEDULED: ("interview_details",),
}


class StatusService:
    @staticmethod
    def is_owner(db: Session, employer: User, app: Application) -> bool:
        job = db.query(Job).filter(Job.id == app.job_id).first()
        return job is not None and job.employer_id == employer.id

    @staticmethod
    def update_status(
        db: Session,
        app: Application,
        new_status: str,
        scheduled_at: datetime | None = None,
        feed: ChangeFeed | None = None,
        **metadata,
    ) -> Application:
        """
        Write status, a server update time, scheduled_at when given, and the
        outcome metadata belonging to new_status. Last writer wins.
        """
        if new_status not in APPLICATION_STATUSES:
            raise ValidationFailed(f"Unknown status: {new_status}")
        previous = app.status or STATUS_PENDING
        if previous != STATUS_PENDING:
            logger.warning(
                "Re-transition of resolved application application_id=%s from=%s to=%s",
                app.id,
                previous,
                new_status,
            )

        app.status = new_status
        app.updated_at = datetime.utcnow()
        if scheduled_at is not None:
            app.scheduled_at = scheduled_at
        for field in _METADATA_BY_STATUS.get(new_status, ()):
            value = metadata.get(field)
            if value is not None:
                setattr(app, field, value)
        db.commit()
        db.refresh(app)
        logger.info(
            "Application status updated application_id=%s from=%s to=%s scheduled_at=%s",
            app.id,
            previous,
            new_status,
            app.scheduled_at.isoformat() if app.scheduled_at else None,
        )
        (feed or change_feed).publish(COLLECTION_APPLICATIONS, app.id)
        return app

    @staticmethod
    def transition(
        db: Session,
        employer: User,
        application_id: str,
        new_status: str,
        scheduled_at: datetime | None = None,
        feed: ChangeFeed | None = None,
        **metadata,
    ) -> dict:
        """Ownership-checked update_status. Returns {"success", "message", "application"}."""
        app = ApplicationService.get_application(db, application_id)
        if not StatusService.is_owner(db, employer, app):
            logger.warning(
                "Status change refused, not owner application_id=%s employer_id=%s",
                application_id,
                employer.id,
            )
            return {"success": False, "message": "You can only manage applications for your own jobs."}
        app = StatusService.update_status(db, app, new_status, scheduled_at=scheduled_at, feed=feed, **metadata)
        labels = {STATUS_ACCEPTED: "Accepted", STATUS_REJECTED: "Rejected", STATUS_SCHEDULED: "Scheduled"}
        return {
            "success": True,
            "message": f"{labels.get(new_status, new_status.capitalize())} {app.full_name or 'applicant'}",
            "application": app,
        }
