"""Semantic matcher: provider fallback chain ending in the heuristic recommender."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from job_match_core.constants import SEMANTIC_MATCH_PROMPT_VERSION, SKILL_GAP_PROMPT_VERSION
from job_match_core.exceptions import NotFoundError, ProviderUnavailableError, ValidationError
from job_match_core.interfaces.provider import TextProvider
from job_match_core.interfaces.store import JobStore
from job_match_core.models.job import JobPosting
from job_match_core.models.match import (
    FactorAnalysis,
    MatchResult,
    SkillGap,
    SkillGapReport,
    SkillsMatch,
)
from job_match_engine.matching.candidate import CandidateContext, load_candidate_context
from job_match_engine.matching.explain import heuristic_skill_gap_report
from job_match_engine.matching.heuristic import HeuristicRecommender
from job_match_engine.parsing import extract_json_block
from job_match_engine.prompts.semantic_matcher import (
    JOB_BLOCK,
    SEMANTIC_MATCH_PROMPT,
    SKILL_GAP_INSTRUCTION,
    SKILL_GAP_SCHEMA,
)
from job_match_engine.prompts.skill_gaps import SKILL_GAP_PROMPT

if TYPE_CHECKING:
    from job_match_core.config.settings import Settings

logger = structlog.get_logger()

P = TypeVar("P", bound=BaseModel)

_IMPORTANCE = ("critical", "important", "nice-to-have")


def _clamp_score(value: float) -> int:
    return min(100, max(0, round(value)))


class ProviderSkillGap(BaseModel):
    """Skill gap as written by a provider."""

    model_config = ConfigDict(populate_by_name=True)

    skill: str
    importance: str = "important"
    description: str = ""
    learning_resources: list[str] = Field(default_factory=list, alias="learningResources")

    @field_validator("importance")
    @classmethod
    def normalize_importance(cls, value: str) -> str:
        """Coerce unknown importance labels to 'important'."""
        value = value.strip().lower()
        return value if value in _IMPORTANCE else "important"

    def to_model(self) -> SkillGap:
        return SkillGap(
            skill=self.skill,
            importance=self.importance,  # type: ignore[arg-type]
            description=self.description,
            learning_resources=self.learning_resources,
        )


class ProviderFactor(BaseModel):
    """Score/analysis pair as written by a provider."""

    score: float = 0
    analysis: str = ""

    def to_model(self) -> FactorAnalysis:
        return FactorAnalysis(score=_clamp_score(self.score), analysis=self.analysis)


class ProviderSkillsMatch(BaseModel):
    """Skill coverage as written by a provider."""

    matching: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    percentage: float = 0


class ProviderMatch(BaseModel):
    """One job's analysis inside a provider payload."""

    model_config = ConfigDict(populate_by_name=True)

    job_id: int = Field(alias="jobId")
    match_score: float = Field(alias="matchScore")
    skills_match: ProviderSkillsMatch = Field(
        default_factory=ProviderSkillsMatch, alias="skillsMatch"
    )
    experience_match: ProviderFactor = Field(
        default_factory=ProviderFactor, alias="experienceMatch"
    )
    salary_match: ProviderFactor = Field(default_factory=ProviderFactor, alias="salaryMatch")
    location_match: ProviderFactor = Field(default_factory=ProviderFactor, alias="locationMatch")
    overall_analysis: str = Field(default="", alias="overallAnalysis")
    recommendations: list[str] = Field(default_factory=list)
    skill_gaps: list[ProviderSkillGap] = Field(default_factory=list, alias="skillGaps")


class ProviderMatchPayload(BaseModel):
    """Structured block expected in a semantic match response."""

    matches: list[ProviderMatch]


class ProviderSkillGapPayload(BaseModel):
    """Structured block expected in a skill gap response."""

    model_config = ConfigDict(populate_by_name=True)

    overall_gaps: list[ProviderSkillGap] = Field(default_factory=list, alias="overallGaps")
    job_specific_gaps: dict[str, list[ProviderSkillGap]] = Field(
        default_factory=dict, alias="jobSpecificGaps"
    )
    recommendations: list[str] = Field(default_factory=list)


def _format_salary(job: JobPosting) -> str:
    if job.salary_min is None and job.salary_max is None:
        return "Not specified"
    return f"{job.salary_min or 0}-{job.salary_max or job.salary_min or 0} {job.salary_currency}"


def format_jobs_block(jobs: Sequence[JobPosting]) -> str:
    """Render postings for a provider prompt."""
    return "\n\n".join(
        JOB_BLOCK.format(
            id=job.id,
            title=job.title,
            employer=job.employer,
            location=job.location or "Not specified",
            work_arrangement=job.work_arrangement or "Not specified",
            experience_tier=job.experience_tier or "Not specified",
            salary=_format_salary(job),
            required_skills=", ".join(job.required_skills) or "Not specified",
            preferred_skills=", ".join(job.preferred_skills) or "None",
            description=job.description[:1000],
        )
        for job in jobs
    )


class SemanticMatcher:
    """Provider-backed match analysis with a fallback chain.

    Each configured provider is tried at most once per request, in order.
    A timeout, transport error or unparseable answer moves on to the next
    provider; after the last one the heuristic recommender answers. Only one
    source ever backs the returned results.
    """

    def __init__(
        self,
        store: JobStore,
        settings: Settings,
        providers: Sequence[TextProvider],
        heuristic: HeuristicRecommender | None = None,
    ) -> None:
        """Initialize with a store, settings and an ordered provider chain."""
        self._store = store
        self.settings = settings
        self.providers = list(providers)
        self.heuristic = heuristic or HeuristicRecommender(store, settings)

    async def analyze(
        self,
        candidate_id: int,
        limit: int = 10,
        include_skill_gaps: bool = True,
    ) -> list[MatchResult]:
        """Ranked, explained matches for a candidate; never fails on provider errors."""
        context = await load_candidate_context(self._store, candidate_id)
        return await self.analyze_context(context, limit, include_skill_gaps)

    async def analyze_context(
        self,
        context: CandidateContext,
        limit: int,
        include_skill_gaps: bool = True,
    ) -> list[MatchResult]:
        """Run the fallback chain for an already loaded candidate."""
        start = time.monotonic()
        pool_size = max(limit, 1) * self.settings.semantic_pool_multiplier
        pool = await self.heuristic.candidate_pool(context, pool_size)

        if pool and self.providers:
            prompt = self._build_match_prompt(context, pool, include_skill_gaps)
            for provider in self.providers:
                payload = await self._attempt(provider, prompt, ProviderMatchPayload)
                if payload is None:
                    continue
                results = self._to_results(payload, pool, provider.name, include_skill_gaps)
                if not results:
                    logger.warning(
                        "provider_failed",
                        provider=provider.name,
                        reason="no recognizable job ids in response",
                    )
                    continue
                final = self._finalize(results, limit)
                logger.info(
                    "semantic_match_complete",
                    candidate_id=context.candidate_id,
                    source=provider.name,
                    returned=len(final),
                    prompt_version=SEMANTIC_MATCH_PROMPT_VERSION,
                    duration=round(time.monotonic() - start, 2),
                )
                return final

        logger.info(
            "semantic_fallback_heuristic",
            candidate_id=context.candidate_id,
            providers_tried=len(self.providers) if pool else 0,
        )
        results = await self.heuristic.rank(
            context,
            self.settings.recommendation_pool_size,
            include_skill_gaps=include_skill_gaps,
        )
        return self._finalize(results, limit)

    async def analyze_skill_gaps(
        self, candidate_id: int, job_ids: Sequence[int]
    ) -> SkillGapReport:
        """Skill gaps across target jobs, provider-authored when one answers."""
        if not job_ids:
            msg = "job_ids must not be empty"
            raise ValidationError(msg)

        context = await load_candidate_context(self._store, candidate_id)
        jobs: list[JobPosting] = []
        for job_id in dict.fromkeys(job_ids):
            job = await self._store.get_job(job_id)
            if job is None:
                msg = f"Job posting {job_id} not found"
                raise NotFoundError(msg)
            jobs.append(job)

        snapshot = context.snapshot
        assert snapshot is not None
        if self.providers:
            prompt = SKILL_GAP_PROMPT.format(
                skills=", ".join(snapshot.skills) or "None listed",
                years_of_experience=_format_years(snapshot.years_of_experience),
                experience_tier=snapshot.experience_tier or "unknown level",
                jobs_block=format_jobs_block(jobs),
            )
            for provider in self.providers:
                payload = await self._attempt(provider, prompt, ProviderSkillGapPayload)
                if payload is not None:
                    logger.info(
                        "skill_gap_analysis_complete",
                        candidate_id=candidate_id,
                        source=provider.name,
                        prompt_version=SKILL_GAP_PROMPT_VERSION,
                    )
                    return self._to_report(payload, jobs, provider.name)

        logger.info("skill_gap_fallback_heuristic", candidate_id=candidate_id)
        return heuristic_skill_gap_report(snapshot, jobs)

    async def _attempt(
        self, provider: TextProvider, prompt: str, payload_model: type[P]
    ) -> P | None:
        """Call one provider once; return None when it is unavailable."""
        timeout = self.settings.provider_timeout_seconds
        start = time.monotonic()
        try:
            text = await asyncio.wait_for(provider.generate(prompt, timeout), timeout=timeout)
            payload = payload_model.model_validate(extract_json_block(text))
        except TimeoutError:
            reason = "timeout"
        except ProviderUnavailableError as e:
            reason = e.reason
        except ValueError as e:
            reason = f"unparseable response: {e}"
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
        else:
            logger.debug(
                "provider_succeeded",
                provider=provider.name,
                duration=round(time.monotonic() - start, 2),
            )
            return payload

        logger.warning(
            "provider_failed",
            provider=provider.name,
            reason=reason,
            duration=round(time.monotonic() - start, 2),
        )
        return None

    def _build_match_prompt(
        self,
        context: CandidateContext,
        pool: Sequence[JobPosting],
        include_skill_gaps: bool,
    ) -> str:
        snapshot = context.snapshot
        assert snapshot is not None
        return SEMANTIC_MATCH_PROMPT.format(
            skills=", ".join(snapshot.skills) or "None listed",
            years_of_experience=_format_years(snapshot.years_of_experience),
            experience_tier=snapshot.experience_tier or "unknown level",
            location=snapshot.location or "Not specified",
            work_arrangement=snapshot.preferred_arrangement or "No preference",
            expected_salary=snapshot.expected_salary or "Not specified",
            jobs_block=format_jobs_block(pool),
            skill_gap_instruction=SKILL_GAP_INSTRUCTION if include_skill_gaps else "",
            skill_gap_schema=SKILL_GAP_SCHEMA if include_skill_gaps else "",
        )

    @staticmethod
    def _to_results(
        payload: ProviderMatchPayload,
        pool: Sequence[JobPosting],
        source: str,
        include_skill_gaps: bool,
    ) -> list[MatchResult]:
        by_id = {job.id: job for job in pool}
        results: dict[int, MatchResult] = {}
        for match in payload.matches:
            job = by_id.get(match.job_id)
            if job is None or match.job_id in results:
                continue
            results[match.job_id] = MatchResult(
                job=job,
                match_score=_clamp_score(match.match_score),
                skills_match=SkillsMatch(
                    matching=match.skills_match.matching,
                    missing=match.skills_match.missing,
                    percentage=min(100.0, max(0.0, match.skills_match.percentage)),
                ),
                experience_match=match.experience_match.to_model(),
                salary_match=match.salary_match.to_model(),
                location_match=match.location_match.to_model(),
                overall_analysis=match.overall_analysis,
                recommendations=match.recommendations,
                skill_gaps=[g.to_model() for g in match.skill_gaps] if include_skill_gaps else [],
                source=source,
            )
        return list(results.values())

    @staticmethod
    def _to_report(
        payload: ProviderSkillGapPayload, jobs: Sequence[JobPosting], source: str
    ) -> SkillGapReport:
        wanted = {str(job.id): job.id for job in jobs}
        per_job: dict[int, list[SkillGap]] = {job.id: [] for job in jobs}
        for key, gaps in payload.job_specific_gaps.items():
            job_id = wanted.get(key.strip())
            if job_id is not None:
                per_job[job_id] = [g.to_model() for g in gaps]
        return SkillGapReport(
            overall_gaps=[g.to_model() for g in payload.overall_gaps],
            per_job_gaps=per_job,
            recommendations=payload.recommendations,
            source=source,
        )

    def _finalize(self, results: list[MatchResult], limit: int) -> list[MatchResult]:
        """Drop weak matches, order best first, newest on ties, and truncate."""
        kept = [r for r in results if r.match_score >= self.settings.min_match_score]
        kept.sort(key=lambda r: (r.match_score, r.job.listed_at, r.job.id), reverse=True)
        return kept[:limit]


def _format_years(years: float | None) -> str:
    return "unknown" if years is None else f"{years:.1f}"
