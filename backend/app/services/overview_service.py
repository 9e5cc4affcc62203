"""
Employer overview - one-shot snapshot of jobs and applicant counts.
Rejected applications never count as applicants.
"""
from sqlalchemy.orm import Session

from backend.app.core.config import JOB_STATUS_OPEN, settings
from backend.app.core.logging_config import get_logger
from backend.app.schemas.job import job_to_record
from backend.app.services.application_service import ApplicationService
from backend.app.services.job_service import JobService
from backend.app.services.projections import applicant_counts_by_job, sort_by_timestamp_desc

logger = get_logger("services.overview")


class OverviewService:
    @staticmethod
    def build_overview(db: Session, employer_id: int, recent_limit: int | None = None) -> dict:
        limit = recent_limit if recent_limit is not None else settings.overview_recent_jobs_limit

        jobs = [job_to_record(j) for j in JobService.list_employer_jobs(db, employer_id)]
        applications = ApplicationService.list_all_records(db)

        per_job = applicant_counts_by_job(applications, [j["id"] for j in jobs])
        recent = sort_by_timestamp_desc(jobs, "createdAt")[:limit]
        recent_jobs = [
            {
                **j,
                "jobTitle": j.get("jobTitle") or "Untitled",
                "jobStatus": j.get("jobStatus") or "open",
                "jobType": j.get("jobType") or "full-time",
                "applicantLimit": j.get("applicantLimit") or 0,
                "applicants": per_job.get(j["id"], 0),
            }
            for j in recent
        ]
        overview = {
            "totalJobs": len(jobs),
            "totalApplicants": sum(per_job.values()),
            "openJobs": sum(1 for j in jobs if (j.get("jobStatus") or JOB_STATUS_OPEN) == JOB_STATUS_OPEN),
            "applicantsByJob": per_job,
            "recentJobs": recent_jobs,
        }
        logger.info(
            "Overview built employer_id=%s jobs=%s applicants=%s",
            employer_id,
            overview["totalJobs"],
            overview["totalApplicants"],
        )
        return overview
