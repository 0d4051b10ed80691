"""Similar and same-employer job lookups."""

from __future__ import annotations

from collections.abc import Iterable

from job_match_core.models.job import JobPosting


def _required(posting: JobPosting) -> set[str]:
    return {s.strip().lower() for s in posting.required_skills if s.strip()}


def shared_criteria(source: JobPosting, other: JobPosting) -> int:
    """Number of criteria two postings have in common.

    Criteria are category, at least one required skill, experience tier and
    work arrangement. Unknown values never count as shared.
    """
    shared = 0
    if source.category_id is not None and source.category_id == other.category_id:
        shared += 1
    if _required(source) & _required(other):
        shared += 1
    if source.experience_tier is not None and source.experience_tier == other.experience_tier:
        shared += 1
    if (
        source.work_arrangement is not None
        and source.work_arrangement == other.work_arrangement
    ):
        shared += 1
    return shared


def find_similar(
    source: JobPosting, pool: Iterable[JobPosting], limit: int
) -> list[JobPosting]:
    """Postings sharing at least one criterion with ``source``, closest first."""
    scored = [
        (shared, job)
        for job in pool
        if job.id != source.id and (shared := shared_criteria(source, job)) > 0
    ]
    scored.sort(key=lambda item: (item[0], item[1].listed_at, item[1].id), reverse=True)
    return [job for _, job in scored[:limit]]


def find_by_employer(
    source: JobPosting, pool: Iterable[JobPosting], limit: int
) -> list[JobPosting]:
    """Other postings from the same employer, most recent first."""
    employer = source.employer.strip().lower()
    matches = [
        job
        for job in pool
        if job.id != source.id and job.employer.strip().lower() == employer
    ]
    matches.sort(key=lambda job: (job.listed_at, job.id), reverse=True)
    return matches[:limit]
