"""Facet aggregation over a pool of job postings."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable

from job_match_core.constants import SALARY_BUCKETS
from job_match_core.models.job import JobPosting
from job_match_core.models.search import FacetCount, SearchFacets


def _count_by(
    pool: Iterable[JobPosting],
    key: Callable[[JobPosting], object | None],
    limit: int | None = None,
) -> list[FacetCount]:
    """Group by a raw field value, skipping postings where it is null."""
    counts: Counter[str] = Counter()
    for posting in pool:
        value = key(posting)
        if value is None or value == "":
            continue
        counts[str(value)] += 1

    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    if limit is not None:
        ordered = ordered[:limit]
    return [FacetCount(value=value, count=count) for value, count in ordered]


def salary_bucket(posting: JobPosting) -> str | None:
    """Label of the fixed salary bucket a posting falls into, None if unsalaried."""
    if posting.salary_min is None and posting.salary_max is None:
        return None
    salary = max(posting.salary_max or 0, posting.salary_min or 0, 0)
    for label, low, high in SALARY_BUCKETS:
        if low <= salary < high:
            return label
    return None


def _salary_facets(pool: Iterable[JobPosting]) -> list[FacetCount]:
    counts = Counter(b for b in map(salary_bucket, pool) if b is not None)
    return [FacetCount(value=label, count=counts[label]) for label, _, _ in SALARY_BUCKETS]


def aggregate_facets(pool: list[JobPosting], limit: int = 10) -> SearchFacets:
    """Compute count-by-value breakdowns for search refinement.

    Location, category and employer lists are capped at ``limit``; work
    arrangement and experience tier are small closed sets returned in full.
    Salary buckets are always listed in bucket order, including empty ones.
    """
    return SearchFacets(
        locations=_count_by(pool, lambda p: p.location, limit),
        work_arrangements=_count_by(pool, lambda p: p.work_arrangement),
        experience_tiers=_count_by(pool, lambda p: p.experience_tier),
        salary_ranges=_salary_facets(pool),
        categories=_count_by(pool, lambda p: p.category_id, limit),
        employers=_count_by(pool, lambda p: p.employer, limit),
    )
