"""
Employer overview schemas
"""
from typing import List

from pydantic import BaseModel, Field

from backend.app.schemas.job import JobPayload


class RecentJob(JobPayload):
    applicants: int = 0


class OverviewResponse(BaseModel):
    totalJobs: int = 0
    totalApplicants: int = 0
    openJobs: int = 0
    applicantsByJob: dict[str, int] = Field(default_factory=dict)
    recentJobs: List[RecentJob] = Field(default_factory=list)
