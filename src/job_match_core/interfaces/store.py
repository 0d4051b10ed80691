"""Abstract read-only store interface consumed by the engine."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from job_match_core.models.candidate import ApplicationRecord, CandidateProfile, CVDocument
from job_match_core.models.job import JobPosting
from job_match_core.models.search import JobSearchFilters, StorePage


@runtime_checkable
class JobStore(Protocol):
    """Narrow query interface over jobs, candidates and applications.

    Implementations raise ``StoreError`` when the backing store fails.
    """

    async def search_jobs(
        self, filters: JobSearchFilters, page: int = 1, limit: int = 20
    ) -> StorePage:
        """Return one page of eligible postings matching the filters."""
        ...

    async def get_job(self, job_id: int) -> JobPosting | None:
        """Retrieve a posting by ID regardless of its status."""
        ...

    async def get_candidate_profile(self, candidate_id: int) -> CandidateProfile | None:
        """Retrieve a candidate profile by candidate ID."""
        ...

    async def list_cvs(self, candidate_id: int) -> list[CVDocument]:
        """List the candidate's CV documents."""
        ...

    async def list_applications(self, candidate_id: int) -> list[ApplicationRecord]:
        """List the candidate's applications."""
        ...

    async def check_applied(self, candidate_id: int, job_id: int) -> bool:
        """Whether the candidate has applied to the posting."""
        ...
