"""Candidate context loading and skill / experience extraction from CVs."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from job_match_core.constants import EXPERIENCE_TIER_THRESHOLDS, SKILL_VOCABULARY
from job_match_core.exceptions import NotFoundError
from job_match_core.interfaces.store import JobStore
from job_match_core.models.candidate import ApplicationRecord, CandidateProfile, CVDocument
from job_match_core.models.job import ExperienceTier
from job_match_core.models.match import CandidateSnapshot

logger = structlog.get_logger()

_VOCABULARY_RE: dict[str, re.Pattern[str]] = {
    skill: re.compile(rf"(?<![\w.#+]){re.escape(skill)}(?![\w#+])", re.IGNORECASE)
    for skill in SKILL_VOCABULARY
}


@dataclass
class CandidateContext:
    """Everything loaded from the store about one candidate for one request."""

    profile: CandidateProfile
    cvs: list[CVDocument] = field(default_factory=list)
    applications: list[ApplicationRecord] = field(default_factory=list)
    snapshot: CandidateSnapshot | None = None

    @property
    def candidate_id(self) -> int:
        return self.profile.id

    @property
    def applied_job_ids(self) -> set[int]:
        return {app.job_id for app in self.applications}


async def load_candidate_context(
    store: JobStore, candidate_id: int, now: datetime | None = None
) -> CandidateContext:
    """Fetch profile, CVs and applications; raise NotFoundError without a profile."""
    profile = await store.get_candidate_profile(candidate_id)
    if profile is None:
        msg = f"Candidate profile {candidate_id} not found"
        raise NotFoundError(msg)

    cvs = await store.list_cvs(candidate_id)
    applications = await store.list_applications(candidate_id)
    context = CandidateContext(profile=profile, cvs=cvs, applications=applications)
    context.snapshot = build_snapshot(profile, cvs, now or datetime.now(UTC))
    return context


def _dedupe(skills: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for skill in skills:
        key = skill.strip().lower()
        if key and key not in seen:
            seen.add(key)
            result.append(skill.strip())
    return result


def extract_cv_skills(cvs: list[CVDocument]) -> list[str]:
    """Skills listed in CVs plus vocabulary terms found in experience descriptions."""
    found: list[str] = []
    for cv in cvs:
        found.extend(cv.skills)
        for entry in cv.experience:
            if not entry.description:
                continue
            found.extend(
                skill
                for skill, pattern in _VOCABULARY_RE.items()
                if pattern.search(entry.description)
            )
    return _dedupe(found)


def _parse_date(value: str | None, now: datetime) -> datetime | None:
    if not value:
        return None
    if value.strip().lower() == "present":
        return now
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        logger.debug("cv_date_unparseable", value=value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def cv_experience_years(cvs: list[CVDocument], now: datetime) -> float:
    """Total years covered by dated CV experience entries."""
    total_days = 0.0
    for cv in cvs:
        for entry in cv.experience:
            start = _parse_date(entry.start_date, now)
            end = _parse_date(entry.end_date, now)
            if start is None or end is None or end <= start:
                continue
            total_days += (end - start).total_seconds() / 86400
    return total_days / 365


def infer_experience_tier(years: float | None) -> ExperienceTier | None:
    """Map years of experience onto entry / mid / senior / executive."""
    if years is None:
        return None
    for threshold, tier in EXPERIENCE_TIER_THRESHOLDS:
        if years < threshold:
            return tier  # type: ignore[return-value]
    return "executive"


def build_snapshot(
    profile: CandidateProfile, cvs: list[CVDocument], now: datetime
) -> CandidateSnapshot:
    """Merge profile and CV signals into the scorer's view of a candidate."""
    cv_years = cv_experience_years(cvs, now)
    years = cv_years if cv_years > 0 else profile.years_of_experience
    location = profile.location
    if not location and profile.work_preferences.locations:
        location = profile.work_preferences.locations[0]

    return CandidateSnapshot(
        candidate_id=profile.id,
        skills=_dedupe([*profile.skills, *extract_cv_skills(cvs)]),
        location=location,
        expected_salary=profile.expected_salary,
        preferred_arrangement=profile.work_preferences.work_arrangement,
        experience_tier=infer_experience_tier(years),
        years_of_experience=years,
    )
