"""SQL-backed implementation of the JobStore protocol."""

from __future__ import annotations

from datetime import UTC, datetime

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from job_match_core.exceptions import StoreError
from job_match_core.models.candidate import ApplicationRecord, CandidateProfile, CVDocument
from job_match_core.models.job import JobPosting
from job_match_core.models.search import JobSearchFilters, StorePage
from job_match_core.query import matches_filters, paginate, sort_postings
from job_match_infra.db.models import (
    ApplicationModel,
    CandidateProfileModel,
    CVDocumentModel,
    JobPostingModel,
)
from job_match_infra.fixtures import FixtureData

logger = structlog.get_logger()


def _naive_utc(value: datetime | None) -> datetime | None:
    """DateTime columns store naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


class SqlJobStore:
    """Read queries over the job board tables plus fixture loading.

    Enum, category and status predicates run in SQL; the remaining filter
    semantics, ordering and pagination reuse the shared query helpers so that
    every store answers identically.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize with an async session factory."""
        self._session_factory = session_factory

    async def search_jobs(
        self, filters: JobSearchFilters, page: int = 1, limit: int = 20
    ) -> StorePage:
        """Return one page of eligible postings matching the filters."""
        stmt = select(JobPostingModel).where(JobPostingModel.status == "published")
        if filters.work_arrangement:
            stmt = stmt.where(JobPostingModel.work_arrangement == filters.work_arrangement)
        if filters.employment_type:
            stmt = stmt.where(JobPostingModel.employment_type == filters.employment_type)
        if filters.experience_tier:
            stmt = stmt.where(JobPostingModel.experience_tier == filters.experience_tier)
        if filters.category_id is not None:
            stmt = stmt.where(JobPostingModel.category_id == filters.category_id)

        try:
            async with self._session_factory() as session:
                rows = (await session.execute(stmt)).scalars().all()
                postings = [JobPosting.model_validate(row, from_attributes=True) for row in rows]
        except SQLAlchemyError as e:
            msg = f"Job search failed: {e}"
            raise StoreError(msg) from e

        now = datetime.now(UTC)
        matched = sort_postings([p for p in postings if matches_filters(p, filters, now)], filters)
        return StorePage(items=paginate(matched, page, limit), total=len(matched))

    async def get_job(self, job_id: int) -> JobPosting | None:
        """Retrieve a posting by ID regardless of its status."""
        try:
            async with self._session_factory() as session:
                row = await session.get(JobPostingModel, job_id)
                return JobPosting.model_validate(row, from_attributes=True) if row else None
        except SQLAlchemyError as e:
            msg = f"Loading job {job_id} failed: {e}"
            raise StoreError(msg) from e

    async def get_candidate_profile(self, candidate_id: int) -> CandidateProfile | None:
        """Retrieve a candidate profile by candidate ID."""
        try:
            async with self._session_factory() as session:
                row = await session.get(CandidateProfileModel, candidate_id)
                if row is None:
                    return None
                return CandidateProfile.model_validate(row, from_attributes=True)
        except SQLAlchemyError as e:
            msg = f"Loading candidate {candidate_id} failed: {e}"
            raise StoreError(msg) from e

    async def list_cvs(self, candidate_id: int) -> list[CVDocument]:
        """List the candidate's CV documents."""
        stmt = (
            select(CVDocumentModel)
            .where(CVDocumentModel.candidate_id == candidate_id)
            .order_by(CVDocumentModel.id)
        )
        try:
            async with self._session_factory() as session:
                rows = (await session.execute(stmt)).scalars().all()
                return [CVDocument.model_validate(row, from_attributes=True) for row in rows]
        except SQLAlchemyError as e:
            msg = f"Listing CVs for candidate {candidate_id} failed: {e}"
            raise StoreError(msg) from e

    async def list_applications(self, candidate_id: int) -> list[ApplicationRecord]:
        """List the candidate's applications."""
        stmt = (
            select(ApplicationModel)
            .where(ApplicationModel.candidate_id == candidate_id)
            .order_by(ApplicationModel.id)
        )
        try:
            async with self._session_factory() as session:
                rows = (await session.execute(stmt)).scalars().all()
                return [
                    ApplicationRecord.model_validate(row, from_attributes=True) for row in rows
                ]
        except SQLAlchemyError as e:
            msg = f"Listing applications for candidate {candidate_id} failed: {e}"
            raise StoreError(msg) from e

    async def check_applied(self, candidate_id: int, job_id: int) -> bool:
        """Whether the candidate has applied to the posting."""
        stmt = select(ApplicationModel.id).where(
            ApplicationModel.candidate_id == candidate_id,
            ApplicationModel.job_id == job_id,
        )
        try:
            async with self._session_factory() as session:
                return (await session.execute(stmt.limit(1))).first() is not None
        except SQLAlchemyError as e:
            msg = f"Application lookup failed: {e}"
            raise StoreError(msg) from e

    async def save_fixture(self, data: FixtureData) -> dict[str, int]:
        """Insert or replace every record of a fixture in one transaction."""
        try:
            async with self._session_factory() as session, session.begin():
                for job in data.jobs:
                    values = job.model_dump()
                    for key in ("published_at", "expires_at", "created_at"):
                        values[key] = _naive_utc(values[key])
                    await session.merge(JobPostingModel(**values))
                for profile in data.candidates:
                    await session.merge(CandidateProfileModel(**profile.model_dump()))
                await session.flush()
                for cv in data.cvs:
                    await session.merge(CVDocumentModel(**cv.model_dump()))
                for app in data.applications:
                    values = app.model_dump()
                    values["applied_at"] = _naive_utc(values["applied_at"])
                    await session.merge(ApplicationModel(**values))
        except SQLAlchemyError as e:
            msg = f"Saving fixture failed: {e}"
            raise StoreError(msg) from e

        counts = data.counts()
        logger.info("fixture_saved", **counts)
        return counts
