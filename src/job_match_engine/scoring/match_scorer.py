"""Deterministic candidate/posting compatibility scorer."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence

from job_match_core.constants import EXPERIENCE_TIERS, MATCH_WEIGHTS, NEUTRAL_SCORE
from job_match_core.models.job import JobPosting
from job_match_core.models.match import CandidateSnapshot, MatchScore, SubScores


def skills_score(
    candidate_skills: Sequence[str], posting_skills: Sequence[str]
) -> tuple[float, list[str], list[str]]:
    """Share of posting skills covered by the candidate.

    A posting skill is covered when any candidate skill contains it, or is
    contained by it, ignoring case. Returns (ratio, matching, missing).
    """
    wanted = [s for s in posting_skills if s.strip()]
    if not wanted:
        return NEUTRAL_SCORE, [], []

    have = [s.strip().lower() for s in candidate_skills if s.strip()]
    matching: list[str] = []
    missing: list[str] = []
    for skill in wanted:
        needle = skill.strip().lower()
        if any(needle in own or own in needle for own in have):
            matching.append(skill)
        else:
            missing.append(skill)
    return min(len(matching) / len(wanted), 1.0), matching, missing


def location_score(candidate_location: str | None, posting_location: str | None) -> float:
    """Exact, same-city, or containment match between two location strings."""
    if not candidate_location or not posting_location:
        return NEUTRAL_SCORE

    mine = candidate_location.strip().lower()
    theirs = posting_location.strip().lower()
    if mine == theirs:
        return 1.0
    if mine.split(",")[0].strip() == theirs.split(",")[0].strip():
        return 0.8
    if mine in theirs or theirs in mine:
        return 0.6
    return 0.0


def salary_score(expected: int | None, salary_min: int | None, salary_max: int | None) -> float:
    """How well an expected salary sits against the advertised range."""
    if not expected or (not salary_min and not salary_max):
        return NEUTRAL_SCORE

    low = salary_min or 0
    high = salary_max or salary_min or 0
    if low <= expected <= high:
        return 1.0

    midpoint = (low + high) / 2
    spread = (high - low) or midpoint * 0.2
    if spread <= 0:
        return NEUTRAL_SCORE
    return max(0.0, 1 - abs(expected - midpoint) / spread)


def experience_score(candidate_tier: str | None, posting_tier: str | None) -> float:
    """Ordinal closeness of two tiers on entry < mid < senior < executive."""
    if candidate_tier not in EXPERIENCE_TIERS or posting_tier not in EXPERIENCE_TIERS:
        return NEUTRAL_SCORE
    distance = abs(EXPERIENCE_TIERS.index(candidate_tier) - EXPERIENCE_TIERS.index(posting_tier))
    return max(0.0, 1 - distance / (len(EXPERIENCE_TIERS) - 1))


def work_arrangement_score(preferred: str | None, offered: str | None) -> float:
    """1.0 when the declared preference matches the posting's arrangement."""
    if preferred is None or offered is None:
        return NEUTRAL_SCORE
    return 1.0 if preferred == offered else 0.0


class MatchScorer:
    """Weighted five-factor scorer producing a 0-100 match score."""

    def __init__(self, weights: Mapping[str, float] | None = None) -> None:
        """Initialize with factor weights, validated to sum to 1.0."""
        resolved = dict(weights if weights is not None else MATCH_WEIGHTS)
        if set(resolved) != set(MATCH_WEIGHTS):
            msg = f"weights must cover exactly {sorted(MATCH_WEIGHTS)}, got {sorted(resolved)}"
            raise ValueError(msg)
        if any(w < 0 for w in resolved.values()):
            msg = "weights cannot be negative"
            raise ValueError(msg)
        total = math.fsum(resolved.values())
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            msg = f"weights must sum to 1.0, got {total}"
            raise ValueError(msg)
        self.weights = resolved

    def sub_scores(
        self,
        candidate: CandidateSnapshot,
        posting: JobPosting,
        skills: float | None = None,
    ) -> SubScores:
        """Compute every factor's sub-score without weighting.

        ``skills`` may carry an already computed skills ratio.
        """
        if skills is None:
            skills, _, _ = skills_score(candidate.skills, posting.required_skills)
        return SubScores(
            skills=skills,
            location=location_score(candidate.location, posting.location),
            salary=salary_score(
                candidate.expected_salary, posting.salary_min, posting.salary_max
            ),
            experience=experience_score(candidate.experience_tier, posting.experience_tier),
            work_arrangement=work_arrangement_score(
                candidate.preferred_arrangement, posting.work_arrangement
            ),
        )

    def score(self, candidate: CandidateSnapshot, posting: JobPosting) -> MatchScore:
        """Score one posting for one candidate."""
        ratio, matching, missing = skills_score(candidate.skills, posting.required_skills)
        subs = self.sub_scores(candidate, posting, skills=ratio)
        weighted = math.fsum(
            self.weights[name] * getattr(subs, name) for name in self.weights
        )
        value = min(100, max(0, round(100 * weighted)))
        return MatchScore(
            match_score=value,
            sub_scores=subs,
            matching_skills=matching,
            missing_skills=missing,
        )
