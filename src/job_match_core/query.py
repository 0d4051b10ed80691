"""Filter predicates and ordering shared by every store implementation."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from job_match_core.constants import POSTED_WITHIN_DAYS, RELEVANCE_FIELD_WEIGHTS
from job_match_core.models.job import JobPosting
from job_match_core.models.search import JobSearchFilters


def _contains(haystack: str | None, needle: str) -> bool:
    return haystack is not None and needle.lower() in haystack.lower()


def matches_filters(posting: JobPosting, filters: JobSearchFilters, now: datetime) -> bool:
    """Return True when an eligible posting satisfies every set predicate."""
    if not posting.is_eligible(now):
        return False

    if filters.query and not (
        _contains(posting.title, filters.query)
        or _contains(posting.description, filters.query)
        or _contains(posting.employer, filters.query)
    ):
        return False

    if filters.location and not _contains(posting.location, filters.location):
        return False
    if filters.work_arrangement and posting.work_arrangement != filters.work_arrangement:
        return False
    if filters.employment_type and posting.employment_type != filters.employment_type:
        return False
    if filters.experience_tier and posting.experience_tier != filters.experience_tier:
        return False
    if filters.category_id is not None and posting.category_id != filters.category_id:
        return False

    if filters.salary_min is not None and (
        posting.salary_min is None or posting.salary_min < filters.salary_min
    ):
        return False
    if filters.salary_max is not None and (
        posting.salary_max is None or posting.salary_max > filters.salary_max
    ):
        return False

    if filters.skills and not skills_overlap(
        filters.skills, [*posting.required_skills, *posting.preferred_skills]
    ):
        return False

    if filters.posted_within:
        cutoff = now - timedelta(days=POSTED_WITHIN_DAYS[filters.posted_within])
        if posting.listed_at < cutoff:
            return False

    return True


def skills_overlap(wanted: Iterable[str], offered: Iterable[str]) -> bool:
    """Case-insensitive exact overlap between two skill lists."""
    offered_lower = {s.strip().lower() for s in offered}
    return any(s.strip().lower() in offered_lower for s in wanted)


def relevance(posting: JobPosting, query: str | None) -> int:
    """Weighted count of query hits across title, employer and description."""
    if not query:
        return 0
    needle = query.lower()
    score = 0
    for field_name, weight in RELEVANCE_FIELD_WEIGHTS.items():
        value = getattr(posting, field_name) or ""
        score += value.lower().count(needle) * weight
    return score


def sort_postings(postings: list[JobPosting], filters: JobSearchFilters) -> list[JobPosting]:
    """Order postings by the requested sort key; ties fall back to id."""
    reverse = filters.sort_order == "desc"
    if filters.sort_by == "relevance" and filters.query:
        return sorted(
            postings,
            key=lambda p: (relevance(p, filters.query), p.listed_at, p.id),
            reverse=reverse,
        )
    return sorted(postings, key=lambda p: (p.listed_at, p.id), reverse=reverse)


def paginate(items: list[JobPosting], page: int, limit: int) -> list[JobPosting]:
    """Slice a 1-indexed page out of an ordered list."""
    offset = (page - 1) * limit
    return items[offset : offset + limit]
