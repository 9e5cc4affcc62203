"""
Job postings - employer CRUD, open/closed toggle, auto-close at the applicant limit
"""
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session

from backend.app.core.config import (
    COLLECTION_JOBS,
    JOB_STATUS_CLOSED,
    JOB_STATUS_OPEN,
    STATUS_REJECTED,
)
from backend.app.core.errors import NotFound, ValidationFailed
from backend.app.core.logging_config import get_logger
from backend.app.models.application import Application
from backend.app.models.job import Job
from backend.app.models.user import User
from backend.app.schemas.job import JobIn
from backend.app.services.change_feed import ChangeFeed, change_feed
from backend.app.services.employer_profile_service import EmployerProfileService

logger = get_logger("services.job")

_REQUIRED = ("jobTitle", "jobDescription", "contactNumber", "address", "barangay")


def _parse_limit(raw) -> int:
    if raw == "" or raw is None:
        return 0
    try:
        limit = int(raw)
    except (TypeError, ValueError) as e:
        raise ValidationFailed("Applicant limit must be a whole number.") from e
    if limit < 0:
        raise ValidationFailed("Applicant limit must be zero or greater.")
    return limit


def _validate(payload: JobIn) -> int:
    if any(not (getattr(payload, f) or "").strip() for f in _REQUIRED):
        raise ValidationFailed("Please fill all required fields.")
    return _parse_limit(payload.applicantLimit)


def _with_company_defaults(payload: JobIn, company: dict) -> JobIn:
    """Blank contact number, address and barangay fall back to the employer profile."""
    updates = {
        field: company[key]
        for field, key in (("contactNumber", "contact_number"), ("address", "address"), ("barangay", "barangay"))
        if not (getattr(payload, field) or "").strip() and company[key]
    }
    return payload.model_copy(update=updates) if updates else payload


class JobService:
    @staticmethod
    def list_employer_jobs(db: Session, employer_id: int) -> list[Job]:
        return db.query(Job).filter(Job.employer_id == employer_id).all()

    @staticmethod
    def list_open_jobs(db: Session) -> list[Job]:
        """Jobs a seeker can browse, newest first (missing created_at last)."""
        jobs = db.query(Job).filter(Job.job_status == JOB_STATUS_OPEN).all()
        return sorted(jobs, key=lambda j: (j.created_at or datetime.min, j.id), reverse=True)

    @staticmethod
    def get_job(db: Session, job_id: str) -> Job:
        job = db.query(Job).filter(Job.id == job_id).first()
        if not job:
            raise NotFound("Job not found")
        return job

    @staticmethod
    def get_owned_job(db: Session, employer: User, job_id: str) -> Job:
        """Job owned by employer; other employers' jobs look missing."""
        job = JobService.get_job(db, job_id)
        if job.employer_id != employer.id:
            raise NotFound("Job not found")
        return job

    @staticmethod
    def create_job(db: Session, employer: User, payload: JobIn, feed: ChangeFeed | None = None) -> Job:
        company = EmployerProfileService.company_details(db, employer)
        payload = _with_company_defaults(payload, company)
        limit = _validate(payload)
        job = Job(
            employer_id=employer.id,
            job_title=payload.jobTitle.strip(),
            job_description=payload.jobDescription,
            job_image=payload.jobImage,
            experience=payload.experience,
            skills=payload.skills,
            contact_number=payload.contactNumber,
            address=payload.address,
            barangay=payload.barangay,
            company_name=company["company_name"],
            applicant_limit=limit,
            job_status=payload.jobStatus or JOB_STATUS_OPEN,
            job_type=payload.jobType or "full-time",
            created_at=datetime.utcnow(),
        )
        db.add(job)
        db.commit()
        db.refresh(job)
        logger.info("Job created job_id=%s employer_id=%s limit=%s", job.id, employer.id, limit)
        (feed or change_feed).publish(COLLECTION_JOBS, job.id, "added")
        return job

    @staticmethod
    def update_job(db: Session, employer: User, job_id: str, payload: JobIn, feed: ChangeFeed | None = None) -> Job:
        job = JobService.get_owned_job(db, employer, job_id)
        limit = _validate(payload)
        job.job_title = payload.jobTitle.strip()
        job.job_description = payload.jobDescription
        job.job_image = payload.jobImage
        job.experience = payload.experience
        job.skills = payload.skills
        job.contact_number = payload.contactNumber
        job.address = payload.address
        job.barangay = payload.barangay
        job.applicant_limit = limit
        job.job_status = payload.jobStatus or JOB_STATUS_OPEN
        job.job_type = payload.jobType or "full-time"
        job.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(job)
        logger.info("Job updated job_id=%s employer_id=%s", job.id, employer.id)
        (feed or change_feed).publish(COLLECTION_JOBS, job.id)
        return job

    @staticmethod
    def delete_job(db: Session, employer: User, job_id: str, feed: ChangeFeed | None = None) -> None:
        job = JobService.get_owned_job(db, employer, job_id)
        db.delete(job)
        db.commit()
        logger.info("Job deleted job_id=%s employer_id=%s", job_id, employer.id)
        (feed or change_feed).publish(COLLECTION_JOBS, job_id, "removed")

    @staticmethod
    def toggle_status(db: Session, employer: User, job_id: str, feed: ChangeFeed | None = None) -> Job:
        job = JobService.get_owned_job(db, employer, job_id)
        job.job_status = JOB_STATUS_CLOSED if (job.job_status or JOB_STATUS_OPEN) == JOB_STATUS_OPEN else JOB_STATUS_OPEN
        job.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(job)
        logger.info("Job status toggled job_id=%s status=%s", job.id, job.job_status)
        (feed or change_feed).publish(COLLECTION_JOBS, job.id)
        return job

    @staticmethod
    def enforce_applicant_limit(db: Session, job: Job, feed: ChangeFeed | None = None) -> bool:
        """Close an open job once its non-rejected applications reach the limit. Returns True if closed."""
        limit = job.applicant_limit or 0
        if limit <= 0 or (job.job_status or JOB_STATUS_OPEN) == JOB_STATUS_CLOSED:
            return False
        count = (
            db.query(Application)
            .filter(
                Application.job_id == job.id,
                or_(Application.status.is_(None), Application.status != STATUS_REJECTED),
            )
            .count()
        )
        if count < limit:
            return False
        job.job_status = JOB_STATUS_CLOSED
        job.updated_at = datetime.utcnow()
        db.commit()
        logger.info("Job auto-closed job_id=%s applicants=%s limit=%s", job.id, count, limit)
        (feed or change_feed).publish(COLLECTION_JOBS, job.id)
        return True
