"""Template-authored explanations for locally computed matches."""

from __future__ import annotations

from collections import Counter

from job_match_core.models.job import JobPosting
from job_match_core.models.match import (
    CandidateSnapshot,
    FactorAnalysis,
    MatchResult,
    MatchScore,
    SkillGap,
    SkillGapReport,
    SkillsMatch,
)
from job_match_engine.scoring.match_scorer import skills_score

HEURISTIC_SOURCE = "heuristic"


def _pct(value: float) -> int:
    return round(value * 100)


def _experience_analysis(candidate: CandidateSnapshot, job: JobPosting, score: float) -> str:
    if candidate.experience_tier is None or job.experience_tier is None:
        return "Experience level could not be compared."
    if score == 1.0:
        return (
            f"Your {candidate.experience_tier}-level experience fits this "
            f"{job.experience_tier} role."
        )
    return (
        f"The role targets {job.experience_tier} level; your experience reads as "
        f"{candidate.experience_tier} level."
    )


def _salary_analysis(candidate: CandidateSnapshot, job: JobPosting, score: float) -> str:
    if not candidate.expected_salary or (not job.salary_min and not job.salary_max):
        return "Salary could not be compared."
    if score == 1.0:
        return "Your expected salary falls within the advertised range."
    return (
        f"Your expected salary of {candidate.expected_salary:,} sits outside the advertised "
        f"range of {job.salary_min or 0:,}-{job.salary_max or job.salary_min or 0:,} "
        f"{job.salary_currency}."
    )


def _location_analysis(candidate: CandidateSnapshot, job: JobPosting, score: float) -> str:
    if not candidate.location or not job.location:
        return "Location could not be compared."
    if score >= 0.8:
        return f"{job.location} matches your location."
    if score > 0:
        return f"{job.location} is in the same region as {candidate.location}."
    return f"{job.location} is away from your location ({candidate.location})."


def _overall_analysis(result: MatchScore, required_count: int) -> str:
    if result.match_score >= 75:
        verdict = "Strong match"
    elif result.match_score >= 50:
        verdict = "Good match"
    elif result.match_score >= 30:
        verdict = "Partial match"
    else:
        verdict = "Weak match"
    if not required_count:
        return f"{verdict}; the posting lists no required skills."
    return (
        f"{verdict}; you cover {len(result.matching_skills)} of {required_count} "
        "required skills."
    )


def _recommendations(result: MatchScore, job: JobPosting) -> list[str]:
    tips = [f"Highlight or build experience with {skill}." for skill in result.missing_skills[:3]]
    if result.sub_scores.location == 0.0 and job.work_arrangement != "remote":
        tips.append(f"Confirm you are open to working in {job.location}.")
    if result.sub_scores.salary < 0.5:
        tips.append("Check the advertised salary range against your expectations.")
    if not tips:
        tips.append("Tailor your CV to emphasise the skills this role asks for.")
    return tips


def job_skill_gaps(candidate: CandidateSnapshot, job: JobPosting) -> list[SkillGap]:
    """Missing required skills (critical) and preferred skills (nice-to-have)."""
    _, _, missing_required = skills_score(candidate.skills, job.required_skills)
    _, _, missing_preferred = skills_score(candidate.skills, job.preferred_skills)
    gaps = [
        SkillGap(
            skill=skill,
            importance="critical",
            description=f"Required for {job.title} at {job.employer}.",
        )
        for skill in missing_required
    ]
    gaps.extend(
        SkillGap(
            skill=skill,
            importance="nice-to-have",
            description=f"Preferred for {job.title} at {job.employer}.",
        )
        for skill in missing_preferred
    )
    return gaps


def build_match_result(
    candidate: CandidateSnapshot,
    job: JobPosting,
    result: MatchScore,
    include_skill_gaps: bool = False,
) -> MatchResult:
    """Wrap a local score into an explainable MatchResult."""
    subs = result.sub_scores
    required_count = len(result.matching_skills) + len(result.missing_skills)
    return MatchResult(
        job=job,
        match_score=result.match_score,
        skills_match=SkillsMatch(
            matching=result.matching_skills,
            missing=result.missing_skills,
            percentage=round(subs.skills * 100, 1),
        ),
        experience_match=FactorAnalysis(
            score=_pct(subs.experience),
            analysis=_experience_analysis(candidate, job, subs.experience),
        ),
        salary_match=FactorAnalysis(
            score=_pct(subs.salary),
            analysis=_salary_analysis(candidate, job, subs.salary),
        ),
        location_match=FactorAnalysis(
            score=_pct(subs.location),
            analysis=_location_analysis(candidate, job, subs.location),
        ),
        overall_analysis=_overall_analysis(result, required_count),
        recommendations=_recommendations(result, job),
        skill_gaps=job_skill_gaps(candidate, job) if include_skill_gaps else [],
        sub_scores=subs,
        source=HEURISTIC_SOURCE,
    )


def heuristic_skill_gap_report(
    candidate: CandidateSnapshot, jobs: list[JobPosting]
) -> SkillGapReport:
    """Aggregate per-job gaps into an overall, frequency-ordered report.

    A skill is critical overall when at least half the target jobs require
    it, important when any job requires it, and nice-to-have otherwise.
    """
    per_job = {job.id: job_skill_gaps(candidate, job) for job in jobs}

    required_counts: Counter[str] = Counter()
    any_counts: Counter[str] = Counter()
    display: dict[str, str] = {}
    for gaps in per_job.values():
        for gap in gaps:
            key = gap.skill.lower()
            display.setdefault(key, gap.skill)
            any_counts[key] += 1
            if gap.importance == "critical":
                required_counts[key] += 1

    overall: list[SkillGap] = []
    for key, count in sorted(any_counts.items(), key=lambda item: (-item[1], item[0])):
        required = required_counts[key]
        if jobs and required * 2 >= len(jobs):
            importance = "critical"
        elif required:
            importance = "important"
        else:
            importance = "nice-to-have"
        overall.append(
            SkillGap(
                skill=display[key],
                importance=importance,
                description=f"Asked for by {count} of {len(jobs)} target jobs.",
            )
        )

    recommendations = [
        f"Prioritise learning {gap.skill}; {required_counts[gap.skill.lower()]} of "
        f"{len(jobs)} target jobs require it."
        for gap in overall
        if gap.importance == "critical"
    ][:5]
    if not recommendations and overall:
        recommendations.append(f"Consider picking up {overall[0].skill} to widen your options.")

    return SkillGapReport(
        overall_gaps=overall,
        per_job_gaps=per_job,
        recommendations=recommendations,
        source=HEURISTIC_SOURCE,
    )
