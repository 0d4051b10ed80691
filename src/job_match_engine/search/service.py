"""Job search façade: filtered pages, facets, personalization and discovery feeds."""

from __future__ import annotations

import math
import time
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

import structlog
from pydantic import ValidationError as PydanticValidationError

from job_match_core.exceptions import NotFoundError, ValidationError
from job_match_core.interfaces.cache import CacheClient
from job_match_core.interfaces.store import JobStore
from job_match_core.models.job import JobPosting
from job_match_core.models.match import MatchResult, SkillGapReport
from job_match_core.models.search import (
    JobDetails,
    JobSearchFilters,
    SearchFacets,
    SearchHit,
    SearchResponse,
)
from job_match_engine.matching.candidate import CandidateContext, load_candidate_context
from job_match_engine.matching.heuristic import HeuristicRecommender
from job_match_engine.matching.semantic import SemanticMatcher
from job_match_engine.matching.similar import find_by_employer, find_similar
from job_match_engine.scoring.trending import rank_featured, rank_trending
from job_match_engine.search.facets import aggregate_facets

if TYPE_CHECKING:
    from job_match_core.config.settings import Settings

logger = structlog.get_logger()

SuggestionKind = Literal["title", "employer", "location"]

_MIN_SUGGESTION_QUERY = 2
_MAX_SUGGESTIONS = 10
_RELATED_LIMIT = 5


class JobSearchService:
    """Read-only entry point composing the store with the matching engine."""

    def __init__(
        self,
        store: JobStore,
        settings: Settings,
        heuristic: HeuristicRecommender | None = None,
        semantic: SemanticMatcher | None = None,
        cache: CacheClient | None = None,
    ) -> None:
        """Initialize with a store and settings.

        Without a semantic matcher the service uses one with an empty provider
        chain, which answers from the heuristic recommender.
        """
        self._store = store
        self.settings = settings
        self.heuristic = heuristic or HeuristicRecommender(store, settings)
        self.semantic = semantic or SemanticMatcher(store, settings, [], self.heuristic)
        self._cache = cache

    async def search(
        self,
        filters: JobSearchFilters | Mapping[str, Any] | None = None,
        candidate_id: int | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> SearchResponse:
        """One page of matching postings with facets.

        When ``candidate_id`` is given each hit carries the candidate's match
        score and applied flag, and a few heuristic picks outside the page are
        attached as recommendations.
        """
        start = time.monotonic()
        parsed = self._parse_filters(filters)
        limit = self.settings.default_page_size if limit is None else limit
        self._check_paging(page, limit)

        context: CandidateContext | None = None
        if candidate_id is not None:
            context = await load_candidate_context(self._store, candidate_id)

        result = await self._store.search_jobs(parsed, page=page, limit=limit)
        facets = await self._facets(parsed)

        hits = [self._hit(job, context) for job in result.items]
        recommendations: list[JobPosting] = []
        if context is not None and self.settings.search_recommendations > 0:
            picks = await self.heuristic.rank(
                context,
                self.settings.search_recommendations,
                exclude_ids=[hit.job.id for hit in hits],
            )
            recommendations = [pick.job for pick in picks]

        logger.info(
            "search_complete",
            total=result.total,
            page=page,
            returned=len(hits),
            personalized=context is not None,
            duration=round(time.monotonic() - start, 3),
        )
        return SearchResponse(
            items=hits,
            total=result.total,
            pages=math.ceil(result.total / limit),
            page=page,
            limit=limit,
            facets=facets,
            recommendations=recommendations,
        )

    async def recommend(
        self,
        candidate_id: int,
        limit: int = 10,
        use_semantic_matcher: bool = True,
        include_skill_gaps: bool = True,
    ) -> list[MatchResult]:
        """Explained matches for a candidate, weakest below the score floor dropped."""
        self._check_limit(limit)
        if use_semantic_matcher:
            return await self.semantic.analyze(candidate_id, limit, include_skill_gaps)

        context = await load_candidate_context(self._store, candidate_id)
        results = await self.heuristic.rank(
            context,
            self.settings.recommendation_pool_size,
            include_skill_gaps=include_skill_gaps,
        )
        kept = [r for r in results if r.match_score >= self.settings.min_match_score]
        return kept[:limit]

    async def trending(self, limit: int = 10) -> list[JobPosting]:
        """Most popular recent postings."""
        self._check_limit(limit)
        pool = await self._pool(JobSearchFilters(), limit * self.settings.trending_pool_multiplier)
        return rank_trending(pool, limit, datetime.now(UTC))

    async def featured(self, limit: int = 10) -> list[JobPosting]:
        """Featured postings, newest first."""
        self._check_limit(limit)
        pool = await self._pool(JobSearchFilters(), self.settings.featured_pool_size)
        return rank_featured(pool, limit)

    async def similar(self, job_id: int, limit: int = _RELATED_LIMIT) -> list[JobPosting]:
        """Postings resembling ``job_id`` by category, skills, tier or arrangement."""
        self._check_limit(limit)
        source = await self._get_job(job_id)
        merged: dict[int, JobPosting] = {}
        for filters in self._similarity_queries(source):
            for job in await self._pool(filters, self.settings.similar_pool_size):
                merged.setdefault(job.id, job)
        return find_similar(source, merged.values(), limit)

    async def by_employer(self, job_id: int, limit: int = _RELATED_LIMIT) -> list[JobPosting]:
        """Other postings from the employer of ``job_id``."""
        self._check_limit(limit)
        source = await self._get_job(job_id)
        pool = await self._pool(
            JobSearchFilters(query=source.employer), self.settings.similar_pool_size
        )
        return find_by_employer(source, pool, limit)

    async def analyze_skill_gaps(
        self, candidate_id: int, job_ids: Sequence[int]
    ) -> SkillGapReport:
        """Skill gaps between a candidate and a set of target postings."""
        return await self.semantic.analyze_skill_gaps(candidate_id, job_ids)

    async def suggestions(self, query: str, kind: SuggestionKind = "title") -> list[str]:
        """Autocomplete values for titles, employers or locations."""
        needle = query.strip()
        if len(needle) < _MIN_SUGGESTION_QUERY:
            return []
        if kind not in ("title", "employer", "location"):
            msg = f"Unknown suggestion kind: {kind!r}"
            raise ValidationError(msg)

        filters = (
            JobSearchFilters(location=needle)
            if kind == "location"
            else JobSearchFilters(query=needle)
        )
        pool = await self._pool(filters, self.settings.facet_pool_size)

        seen: set[str] = set()
        values: list[str] = []
        for job in pool:
            value = getattr(job, kind)
            if not value or needle.lower() not in value.lower():
                continue
            key = value.strip().lower()
            if key in seen:
                continue
            seen.add(key)
            values.append(value.strip())
            if len(values) >= _MAX_SUGGESTIONS:
                break
        return values

    async def job_details(self, job_id: int, candidate_id: int | None = None) -> JobDetails:
        """A posting with its related postings, annotated for the candidate if given."""
        job = await self._get_job(job_id)
        hit = SearchHit(job=job)
        if candidate_id is not None:
            context = await load_candidate_context(self._store, candidate_id)
            hit = self._hit(job, context)
            hit.is_applied = await self._store.check_applied(candidate_id, job_id)

        return JobDetails(
            job=hit,
            similar_jobs=await self.similar(job_id, _RELATED_LIMIT),
            employer_jobs=await self.by_employer(job_id, _RELATED_LIMIT),
        )

    def _hit(self, job: JobPosting, context: CandidateContext | None) -> SearchHit:
        if context is None or context.snapshot is None:
            return SearchHit(job=job)
        score = self.heuristic.scorer.score(context.snapshot, job)
        return SearchHit(
            job=job,
            match_score=score.match_score,
            is_applied=job.id in context.applied_job_ids,
        )

    @staticmethod
    def _similarity_queries(source: JobPosting) -> list[JobSearchFilters]:
        """One store query per similarity criterion known on ``source``."""
        queries: list[JobSearchFilters] = []
        if source.category_id is not None:
            queries.append(JobSearchFilters(category_id=source.category_id))
        skills = tuple(s for s in source.required_skills if s.strip())
        if skills:
            queries.append(JobSearchFilters(skills=skills))
        if source.experience_tier is not None:
            queries.append(JobSearchFilters(experience_tier=source.experience_tier))
        if source.work_arrangement is not None:
            queries.append(JobSearchFilters(work_arrangement=source.work_arrangement))
        return queries

    async def _pool(self, filters: JobSearchFilters, size: int) -> list[JobPosting]:
        page = await self._store.search_jobs(filters, page=1, limit=size)
        return page.items

    async def _get_job(self, job_id: int) -> JobPosting:
        job = await self._store.get_job(job_id)
        if job is None:
            msg = f"Job posting {job_id} not found"
            raise NotFoundError(msg)
        return job

    async def _facets(self, filters: JobSearchFilters) -> SearchFacets:
        """Aggregate facets over the filtered pool, memoized per freshness window."""
        key = None
        if self._cache is not None:
            ttl = self.settings.facet_cache_ttl_seconds
            window = int(time.time() // ttl)
            key = f"facets:{window}:{filters.signature()}"
            cached = await self._cache.get(key)
            if cached is not None:
                return SearchFacets.model_validate_json(cached)

        pool = await self._pool(filters, self.settings.facet_pool_size)
        facets = aggregate_facets(pool, self.settings.facet_limit)

        if self._cache is not None and key is not None:
            await self._cache.set(
                key, facets.model_dump_json(), self.settings.facet_cache_ttl_seconds
            )
        return facets

    @staticmethod
    def _parse_filters(
        filters: JobSearchFilters | Mapping[str, Any] | None,
    ) -> JobSearchFilters:
        if filters is None:
            return JobSearchFilters()
        if isinstance(filters, JobSearchFilters):
            return filters
        try:
            return JobSearchFilters.model_validate(dict(filters))
        except PydanticValidationError as e:
            msg = f"Invalid search filters: {e}"
            raise ValidationError(msg) from e

    def _check_paging(self, page: int, limit: int) -> None:
        if page < 1:
            msg = f"page must be >= 1, got {page}"
            raise ValidationError(msg)
        self._check_limit(limit)

    def _check_limit(self, limit: int) -> None:
        if not 1 <= limit <= self.settings.max_page_size:
            msg = f"limit must be between 1 and {self.settings.max_page_size}, got {limit}"
            raise ValidationError(msg)
