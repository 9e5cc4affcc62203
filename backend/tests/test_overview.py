"""Tests for GET /api/employer/overview"""
from datetime import datetime

from backend.app.models.application import Application
from backend.app.models.job import Job
from backend.app.services.overview_service import OverviewService


def _job(db_session, employer_id, title, created_at=None, **fields):
    job = Job(employer_id=employer_id, job_title=title, job_description="desc", created_at=created_at, **fields)
    db_session.add(job)
    db_session.commit()
    return job.id


def _applications(db_session, job_id, *statuses):
    for status in statuses:
        db_session.add(Application(seeker_id=1, job_id=job_id, status=status))
    db_session.commit()


def test_overview_requires_employer(client, seeker_headers):
    r = client.get("/api/employer/overview", headers=seeker_headers)
    assert r.status_code == 403


def test_overview_excludes_rejected(client, employer_headers, employer_user, db_session):
    j1 = _job(db_session, employer_user.id, "Cashier", datetime(2024, 1, 1))
    j2 = _job(db_session, employer_user.id, "Cook", datetime(2024, 2, 1))
    j3 = _job(db_session, employer_user.id, "Driver", datetime(2024, 3, 1), job_status="closed")
    _applications(db_session, j1, "pending", "pending", "accepted")
    _applications(db_session, j3, "rejected")

    r = client.get("/api/employer/overview", headers=employer_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["totalJobs"] == 3
    assert data["totalApplicants"] == 3
    assert data["openJobs"] == 2
    assert data["applicantsByJob"] == {j1: 3, j2: 0, j3: 0}
    assert [j["jobTitle"] for j in data["recentJobs"]] == ["Driver", "Cook", "Cashier"]
    assert data["recentJobs"][2]["applicants"] == 3


def test_overview_ignores_other_employers(client, employer_headers, employer_user, other_employer, db_session):
    mine = _job(db_session, employer_user.id, "Cashier")
    theirs = _job(db_session, other_employer.id, "Driver")
    _applications(db_session, mine, "pending")
    _applications(db_session, theirs, "pending", "pending")

    data = client.get("/api/employer/overview", headers=employer_headers).json()
    assert data["totalJobs"] == 1
    assert data["totalApplicants"] == 1


def test_recent_jobs_top_five_missing_created_last(db_session, employer_user):
    for month in range(1, 7):
        _job(db_session, employer_user.id, f"Job {month}", datetime(2024, month, 1))
    undated = Job(employer_id=employer_user.id, job_title="Undated", job_description="desc")
    db_session.add(undated)
    db_session.commit()
    # created_at defaults on insert; clear it to model a record without one
    undated.created_at = None
    db_session.commit()

    overview = OverviewService.build_overview(db_session, employer_user.id)
    assert overview["totalJobs"] == 7
    assert [j["jobTitle"] for j in overview["recentJobs"]] == ["Job 6", "Job 5", "Job 4", "Job 3", "Job 2"]

    overview = OverviewService.build_overview(db_session, employer_user.id, recent_limit=10)
    assert overview["recentJobs"][-1]["jobTitle"] == "Undated"


def test_recent_job_defaults(db_session, employer_user):
    job = Job(
        employer_id=employer_user.id,
        job_title="",
        job_description="desc",
        job_status=None,
        job_type=None,
        applicant_limit=None,
        created_at=datetime(2024, 1, 1),
    )
    db_session.add(job)
    db_session.commit()

    [recent] = OverviewService.build_overview(db_session, employer_user.id)["recentJobs"]
    assert recent["jobTitle"] == "Untitled"
    assert recent["jobStatus"] == "open"
    assert recent["jobType"] == "full-time"
    assert recent["applicantLimit"] == 0
    assert recent["applicants"] == 0
