"""Time-decayed popularity ranking for trending and featured feeds."""

from __future__ import annotations

from datetime import datetime

from job_match_core.constants import (
    TRENDING_APPLICATION_WEIGHT,
    TRENDING_RECENCY_DAYS,
    TRENDING_RECENCY_WEIGHT,
    TRENDING_VIEW_WEIGHT,
)
from job_match_core.models.job import JobPosting


def trending_score(posting: JobPosting, now: datetime) -> float:
    """Views, applications and a recency bonus that fades over a week."""
    recency = max(0.0, TRENDING_RECENCY_DAYS - posting.days_since_published(now))
    return (
        posting.view_count * TRENDING_VIEW_WEIGHT
        + posting.application_count * TRENDING_APPLICATION_WEIGHT
        + recency * TRENDING_RECENCY_WEIGHT
    )


def rank_trending(pool: list[JobPosting], limit: int, now: datetime) -> list[JobPosting]:
    """Top published postings by trending score, newest first on ties."""
    published = [p for p in pool if p.status == "published"]
    published.sort(
        key=lambda p: (trending_score(p, now), p.listed_at, p.id),
        reverse=True,
    )
    return published[:limit]


def rank_featured(pool: list[JobPosting], limit: int) -> list[JobPosting]:
    """Featured published postings, most recently listed first."""
    featured = [p for p in pool if p.is_featured and p.status == "published"]
    featured.sort(key=lambda p: (p.listed_at, p.id), reverse=True)
    return featured[:limit]
