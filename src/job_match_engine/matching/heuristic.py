"""Heuristic recommender: local-only ranking that never calls a provider."""

from __future__ import annotations

import time
from collections.abc import Collection
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from job_match_core.interfaces.store import JobStore
from job_match_core.models.job import JobPosting
from job_match_core.models.match import MatchResult
from job_match_core.models.search import JobSearchFilters
from job_match_engine.matching.candidate import CandidateContext, load_candidate_context
from job_match_engine.matching.explain import build_match_result
from job_match_engine.scoring.match_scorer import MatchScorer

if TYPE_CHECKING:
    from job_match_core.config.settings import Settings

logger = structlog.get_logger()


class HeuristicRecommender:
    """Rank eligible postings for a candidate with the local match scorer.

    This is the last link of every fallback chain, so the only errors it can
    raise are the store's own.
    """

    def __init__(
        self,
        store: JobStore,
        settings: Settings,
        scorer: MatchScorer | None = None,
    ) -> None:
        """Initialize with a store, settings and an optional scorer."""
        self._store = store
        self.settings = settings
        self.scorer = scorer or MatchScorer()

    async def candidate_pool(
        self,
        context: CandidateContext,
        size: int,
        exclude_ids: Collection[int] = (),
        now: datetime | None = None,
    ) -> list[JobPosting]:
        """Eligible postings the candidate has not applied to, minus exclusions."""
        now = now or datetime.now(UTC)
        skip = context.applied_job_ids | set(exclude_ids)
        # over-fetch so skipped ids never shrink the pool below ``size``
        page = await self._store.search_jobs(
            JobSearchFilters(), page=1, limit=size + len(skip)
        )
        pool = [job for job in page.items if job.is_eligible(now) and job.id not in skip]
        return pool[:size]

    def rank_pool(
        self,
        context: CandidateContext,
        pool: list[JobPosting],
        limit: int,
        include_skill_gaps: bool = False,
    ) -> list[MatchResult]:
        """Score and order a pool; ties go to the more recently published posting."""
        snapshot = context.snapshot
        assert snapshot is not None
        results = [
            build_match_result(snapshot, job, self.scorer.score(snapshot, job), include_skill_gaps)
            for job in pool
        ]
        results.sort(key=lambda r: (r.match_score, r.job.listed_at, r.job.id), reverse=True)
        return results[:limit]

    async def rank(
        self,
        context: CandidateContext,
        limit: int,
        exclude_ids: Collection[int] = (),
        include_skill_gaps: bool = False,
        now: datetime | None = None,
    ) -> list[MatchResult]:
        """Top ``limit`` explainable matches for an already loaded candidate."""
        start = time.monotonic()
        pool = await self.candidate_pool(
            context, self.settings.recommendation_pool_size, exclude_ids, now
        )
        results = self.rank_pool(context, pool, limit, include_skill_gaps)
        logger.debug(
            "heuristic_ranked",
            candidate_id=context.candidate_id,
            pool_size=len(pool),
            returned=len(results),
            duration=round(time.monotonic() - start, 3),
        )
        return results

    async def recommend(self, candidate_id: int, limit: int) -> list[JobPosting]:
        """Top ``limit`` postings for a candidate, loading the candidate first."""
        context = await load_candidate_context(self._store, candidate_id)
        return [result.job for result in await self.rank(context, limit)]
