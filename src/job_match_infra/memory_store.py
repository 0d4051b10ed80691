"""In-process JobStore over plain lists of models."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from job_match_core.models.candidate import ApplicationRecord, CandidateProfile, CVDocument
from job_match_core.models.job import JobPosting
from job_match_core.models.search import JobSearchFilters, StorePage
from job_match_core.query import matches_filters, paginate, sort_postings
from job_match_infra.fixtures import FixtureData


class InMemoryJobStore:
    """JobStore backed by dictionaries, used for fixtures and tests."""

    def __init__(
        self,
        jobs: Iterable[JobPosting] = (),
        candidates: Iterable[CandidateProfile] = (),
        cvs: Iterable[CVDocument] = (),
        applications: Iterable[ApplicationRecord] = (),
    ) -> None:
        self.jobs: dict[int, JobPosting] = {job.id: job for job in jobs}
        self.candidates: dict[int, CandidateProfile] = {c.id: c for c in candidates}
        self.cvs: list[CVDocument] = list(cvs)
        self.applications: list[ApplicationRecord] = list(applications)

    @classmethod
    def from_fixture(cls, data: FixtureData) -> InMemoryJobStore:
        return cls(data.jobs, data.candidates, data.cvs, data.applications)

    async def search_jobs(
        self, filters: JobSearchFilters, page: int = 1, limit: int = 20
    ) -> StorePage:
        now = datetime.now(UTC)
        matched = sort_postings(
            [job for job in self.jobs.values() if matches_filters(job, filters, now)],
            filters,
        )
        return StorePage(items=paginate(matched, page, limit), total=len(matched))

    async def get_job(self, job_id: int) -> JobPosting | None:
        return self.jobs.get(job_id)

    async def get_candidate_profile(self, candidate_id: int) -> CandidateProfile | None:
        return self.candidates.get(candidate_id)

    async def list_cvs(self, candidate_id: int) -> list[CVDocument]:
        return [cv for cv in self.cvs if cv.candidate_id == candidate_id]

    async def list_applications(self, candidate_id: int) -> list[ApplicationRecord]:
        return [app for app in self.applications if app.candidate_id == candidate_id]

    async def check_applied(self, candidate_id: int, job_id: int) -> bool:
        return any(
            app.candidate_id == candidate_id and app.job_id == job_id
            for app in self.applications
        )
