"""
Application service - reads of the applications collection, apply, and
seeker-side cancel. Status changes by employers live in status_service.
"""
import mimetypes
import re
from datetime import datetime

from sqlalchemy.orm import Session

from backend.app.core.config import (
    ACTIVE_APPLICATION_STATUSES,
    COLLECTION_APPLICATIONS,
    JOB_STATUS_CLOSED,
    JOB_STATUS_OPEN,
    STATUS_PENDING,
    settings,
)
from backend.app.core.errors import NotFound
from backend.app.core.logging_config import get_logger
from backend.app.models.application import Application
from backend.app.models.job import Job
from backend.app.models.user import User
from backend.app.schemas.application import application_to_record
from backend.app.services import blob_storage
from backend.app.services.change_feed import ChangeFeed, change_feed
from backend.app.services.file_encoding import DownloadedFile, data_url_mime, decode_data_url, is_data_url
from backend.app.services.job_service import JobService
from backend.app.services.profile_service import ProfileService

logger = get_logger("services.application")

_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


class ApplicationService:
    @staticmethod
    def get_application(db: Session, application_id: str) -> Application:
        app = db.query(Application).filter(Application.id == application_id).first()
        if not app:
            raise NotFound("Application not found")
        return app

    @staticmethod
    def list_seeker_records(db: Session, seeker_id: int) -> list[dict]:
        """Raw records of one seeker's applications."""
        rows = db.query(Application).filter(Application.seeker_id == seeker_id).all()
        return [application_to_record(a) for a in rows]

    @staticmethod
    def list_all_records(db: Session) -> list[dict]:
        """Raw records of the whole collection; callers filter by job ownership."""
        return [application_to_record(a) for a in db.query(Application).all()]

    @staticmethod
    def apply(db: Session, seeker: User, job_id: str, feed: ChangeFeed | None = None) -> dict:
        """
        Create a pending application from the seeker's profile, files and the job.
        Blocked when the job is closed or the seeker's latest application for it
        is still pending/scheduled/accepted.
        """
        feed = feed or change_feed
        job = JobService.get_job(db, job_id)
        if (job.job_status or JOB_STATUS_OPEN) == JOB_STATUS_CLOSED:
            return {"success": False, "message": "This job is closed and cannot accept applications."}

        previous = (
            db.query(Application)
            .filter(Application.job_id == job.id, Application.seeker_id == seeker.id)
            .all()
        )
        latest = max(previous, key=lambda a: a.applied_at or datetime.min, default=None)
        if latest is not None and (latest.status or STATUS_PENDING) in ACTIVE_APPLICATION_STATUSES:
            return {"success": False, "message": "You already applied for this job."}

        profile = ProfileService.get_or_create_profile(db, seeker)
        files = ProfileService.get_files(db, seeker.id)
        application = Application(
            seeker_id=seeker.id,
            job_id=job.id,
            employer_id=job.employer_id,
            full_name=profile.full_name or seeker.full_name or "",
            email=profile.email or seeker.email or "",
            contact_number=profile.contact_number or profile.phone or "",
            desired_job=profile.desired_job or "",
            experience=profile.experience or "",
            education=profile.education or "",
            skills=profile.skills or "",
            cover_letter=profile.cover_letter or "",
            profile_image=(files.photo_base64 or files.photo_url or "") if files else "",
            resume_link=(files.resume_base64 or files.resume_url or "") if files else "",
            resume_name=(files.resume_name or "") if files else "",
            position_applied=job.job_title or "Unknown Position",
            job_title=job.job_title or "",
            company_name=job.company_name or "Unknown Company",
            company_address=job.address or "",
            company_barangay=job.barangay or "",
            job_contact_number=job.contact_number or "",
            status=STATUS_PENDING,
            applied_at=datetime.utcnow(),
            extra={
                "age": profile.age or "",
                "gender": profile.gender or "",
                "address": profile.address or "",
                "barangay": profile.barangay or "",
                "jobType": job.job_type or "full-time",
            },
        )
        db.add(application)
        db.commit()
        db.refresh(application)
        logger.info(
            "Application created application_id=%s job_id=%s seeker_id=%s",
            application.id,
            job.id,
            seeker.id,
        )
        feed.publish(COLLECTION_APPLICATIONS, application.id, "added")
        JobService.enforce_applicant_limit(db, job, feed=feed)
        return {
            "success": True,
            "message": "Applied successfully! Your application has been sent to the employer.",
            "application": application,
        }

    @staticmethod
    def cancel_application(db: Session, seeker: User, application_id: str, feed: ChangeFeed | None = None) -> dict:
        """
        Hard-delete the seeker's own application while it is pending.
        Any other status is refused without a write.
        """
        app = ApplicationService.get_application(db, application_id)
        if app.seeker_id != seeker.id:
            logger.warning(
                "Cancel refused, not owner application_id=%s seeker_id=%s",
                application_id,
                seeker.id,
            )
            return {"success": False, "reason": "not_owner", "message": "You can only cancel your own applications."}
        if (app.status or STATUS_PENDING) != STATUS_PENDING:
            return {"success": False, "reason": "not_pending", "message": "You can only cancel pending applications."}

        db.delete(app)
        db.commit()
        logger.info("Application canceled application_id=%s seeker_id=%s", application_id, seeker.id)
        (feed or change_feed).publish(COLLECTION_APPLICATIONS, application_id, "removed")
        return {"success": True, "message": "Application canceled successfully! You can apply again later."}

    @staticmethod
    def resolve_resume(app: Application) -> DownloadedFile | str:
        """
        Resume attached to an application: decoded bytes for inline or locally
        stored files, or an absolute URL to redirect to.
        """
        link = (app.resume_link or (app.extra or {}).get("resume") or (app.extra or {}).get("resumeURL") or "").strip()
        if not link:
            raise NotFound("No resume attached")
        name = app.resume_name or "resume"
        guessed = mimetypes.guess_type(name)[0] or "application/octet-stream"
        if is_data_url(link):
            return DownloadedFile(name, data_url_mime(link, guessed), decode_data_url(link))
        if blob_storage.parse_s3_key_from_url(link) or link.startswith(f"/{settings.upload_dir}/"):
            try:
                return DownloadedFile(name, guessed, blob_storage.load_blob(link))
            except FileNotFoundError as e:
                raise NotFound("Stored resume is missing") from e
        if _URL_RE.match(link):
            return link
        return f"https://{link}"
