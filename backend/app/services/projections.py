"""
Pure transformations over materialized records: display projections for the
seeker and employer feeds, timestamp ordering, filter/search and status counts.
Records are camelCase dicts as produced by application_to_record/job_to_record.
"""
from datetime import datetime
from typing import Any, Iterable

from backend.app.core.config import APPLICATION_STATUSES
from backend.app.core.errors import ValidationFailed

EPOCH = datetime(1970, 1, 1)
STATUS_FILTERS = ("all",) + APPLICATION_STATUSES


def first_truthy(*values: Any, default: Any = "") -> Any:
    """First value that is not None/empty, else default."""
    for v in values:
        if v:
            return v
    return default


def sort_by_timestamp_desc(items: Iterable[dict], key: str) -> list[dict]:
    """
    Newest first. Items without a timestamp count as epoch 0 and go last;
    ties are broken by id so the order never depends on input order.
    """
    return sorted(
        items,
        key=lambda item: (item.get(key) or EPOCH, str(item.get("id", ""))),
        reverse=True,
    )


def project_seeker_application(raw: dict) -> dict:
    """Display shape for the seeker's own list. Raw fields are kept underneath."""
    return {
        **raw,
        "id": raw.get("id"),
        "jobTitle": first_truthy(raw.get("positionApplied"), raw.get("jobTitle"), raw.get("job"), default="Unknown Job"),
        "companyName": first_truthy(raw.get("companyName"), default="Unknown Company"),
        "status": first_truthy(raw.get("status"), default="pending"),
        "appliedAt": raw.get("appliedAt") or None,
        "scheduledAt": raw.get("scheduledAt") or None,
        "rejectionReason": raw.get("rejectionReason") or "",
        "rejectionComment": raw.get("rejectionComment") or "",
        "acceptanceRequirements": raw.get("acceptanceRequirements") or "",
        "interviewDetails": raw.get("interviewDetails") or "",
    }


def project_seeker_feed(records: Iterable[dict]) -> list[dict]:
    return sort_by_timestamp_desc((project_seeker_application(r) for r in records), "appliedAt")


def project_employer_application(raw: dict, jobs: dict[str, dict]) -> dict:
    """Display shape for the employer list; positionApplied prefers the live job title."""
    job = jobs.get(raw.get("jobId") or "") or {}
    return {
        "id": raw.get("id"),
        "seekerId": first_truthy(raw.get("seekerId"), raw.get("userId")),
        "fullName": first_truthy(raw.get("fullName"), raw.get("name"), raw.get("userName")),
        "email": raw.get("email") or "",
        "contactNumber": first_truthy(raw.get("contactNumber"), raw.get("phone"), raw.get("contact")),
        "resumeLink": first_truthy(raw.get("resumeLink"), raw.get("resume"), raw.get("resumeURL")),
        "jobId": raw.get("jobId") or "",
        "positionApplied": first_truthy(job.get("jobTitle"), raw.get("positionApplied")),
        "status": first_truthy(raw.get("status"), default="pending"),
        "appliedAt": first_truthy(raw.get("appliedAt"), raw.get("createdAt"), default=None),
        "scheduledAt": raw.get("scheduledAt") or None,
        "profileImage": raw.get("profileImage") or "",
        "coverLetter": first_truthy(raw.get("coverLetter"), raw.get("message")),
        "resumeName": raw.get("resumeName") or "",
        "raw": raw,
    }


def project_employer_feed(records: Iterable[dict], jobs: dict[str, dict]) -> list[dict]:
    """Keep only applications on the employer's jobs, project, newest first."""
    mine = (r for r in records if r.get("jobId") in jobs)
    return sort_by_timestamp_desc((project_employer_application(r, jobs) for r in mine), "appliedAt")


def filter_applications(items: Iterable[dict], status: str = "all", search: str = "") -> list[dict]:
    """Exact status match (or "all") AND case-insensitive substring over name, email, position."""
    if status not in STATUS_FILTERS:
        raise ValidationFailed(f"Unknown status filter: {status}")
    q = (search or "").lower().strip()
    result = []
    for a in items:
        if status != "all" and a.get("status") != status:
            continue
        if q and not any(
            q in (a.get(field) or "").lower()
            for field in ("fullName", "email", "positionApplied")
        ):
            continue
        result.append(a)
    return result


def status_counts(items: Iterable[dict]) -> dict[str, int]:
    """Totals per status, recomputed from the full list."""
    items = list(items)
    counts = {"total": len(items)}
    for status in APPLICATION_STATUSES:
        counts[status] = sum(1 for a in items if a.get("status") == status)
    return counts


def applicant_counts_by_job(records: Iterable[dict], job_ids: Iterable[str]) -> dict[str, int]:
    """Non-rejected applications per job, for the given jobs only."""
    counts = {job_id: 0 for job_id in job_ids}
    for r in records:
        job_id = r.get("jobId")
        if job_id in counts and r.get("status") != "rejected":
            counts[job_id] += 1
    return counts


def compose_schedule(date: str, time: str) -> datetime:
    """Combine YYYY-MM-DD and HH:MM into a naive local datetime."""
    if not (date or "").strip() or not (time or "").strip():
        raise ValidationFailed("Please choose a date and time.")
    try:
        return datetime.strptime(f"{date.strip()}T{time.strip()}:00", "%Y-%m-%dT%H:%M:%S")
    except ValueError as e:
        raise ValidationFailed("Invalid interview date or time.") from e
