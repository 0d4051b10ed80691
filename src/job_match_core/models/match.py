"""Match scoring and analysis models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from job_match_core.models.job import ExperienceTier, JobPosting, WorkArrangement

SkillImportance = Literal["critical", "important", "nice-to-have"]


class CandidateSnapshot(BaseModel):
    """Everything the scorer needs to know about a candidate."""

    candidate_id: int = Field(description="Candidate identifier")
    skills: list[str] = Field(default_factory=list, description="Profile and CV skills")
    location: str | None = Field(default=None, description="Current location")
    expected_salary: int | None = Field(default=None, description="Expected salary")
    preferred_arrangement: WorkArrangement | None = Field(
        default=None, description="Declared work arrangement preference"
    )
    experience_tier: ExperienceTier | None = Field(
        default=None, description="Inferred seniority tier"
    )
    years_of_experience: float | None = Field(
        default=None, description="Inferred years of experience"
    )


class SubScores(BaseModel):
    """Per-factor compatibility scores, each in [0, 1]."""

    skills: float = Field(ge=0.0, le=1.0)
    location: float = Field(ge=0.0, le=1.0)
    salary: float = Field(ge=0.0, le=1.0)
    experience: float = Field(ge=0.0, le=1.0)
    work_arrangement: float = Field(ge=0.0, le=1.0)


class MatchScore(BaseModel):
    """Deterministic score for one (candidate, posting) pair."""

    match_score: int = Field(ge=0, le=100, description="Weighted score 0-100")
    sub_scores: SubScores = Field(description="Sub-scores that produced match_score")
    matching_skills: list[str] = Field(
        default_factory=list, description="Required skills the candidate covers"
    )
    missing_skills: list[str] = Field(
        default_factory=list, description="Required skills the candidate lacks"
    )


class SkillsMatch(BaseModel):
    """Skill coverage of a posting."""

    matching: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    percentage: float = Field(ge=0.0, le=100.0)


class FactorAnalysis(BaseModel):
    """Score (0-100) and commentary for one match factor."""

    score: int = Field(ge=0, le=100)
    analysis: str = Field(default="")


class SkillGap(BaseModel):
    """A skill a posting asks for that the candidate lacks."""

    skill: str = Field(description="Skill name")
    importance: SkillImportance = Field(description="How much the gap matters")
    description: str = Field(default="", description="Why the skill matters")
    learning_resources: list[str] = Field(default_factory=list)


class MatchResult(BaseModel):
    """Explainable match between a candidate and one posting."""

    job: JobPosting = Field(description="The matched posting")
    match_score: int = Field(ge=0, le=100, description="Overall score 0-100")
    skills_match: SkillsMatch
    experience_match: FactorAnalysis
    salary_match: FactorAnalysis
    location_match: FactorAnalysis
    overall_analysis: str = Field(default="")
    recommendations: list[str] = Field(default_factory=list)
    skill_gaps: list[SkillGap] = Field(default_factory=list)
    sub_scores: SubScores | None = Field(
        default=None, description="Local sub-scores, absent for provider-authored results"
    )
    source: str = Field(description="Provider name, or 'heuristic'")


class SkillGapReport(BaseModel):
    """Skill gaps across a set of target postings."""

    overall_gaps: list[SkillGap] = Field(default_factory=list)
    per_job_gaps: dict[int, list[SkillGap]] = Field(default_factory=dict)
    recommendations: list[str] = Field(default_factory=list)
    source: str = Field(description="Provider name, or 'heuristic'")
