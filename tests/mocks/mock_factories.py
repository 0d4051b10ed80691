"""Factory functions returning valid domain model instances."""

from __future__ import annotations

import itertools
from datetime import UTC, datetime, timedelta

from job_match_core.models.candidate import (
    ApplicationRecord,
    CandidateProfile,
    CVDocument,
    CVExperience,
    WorkPreferences,
)
from job_match_core.models.job import JobPosting
from job_match_core.models.match import CandidateSnapshot
from job_match_infra.memory_store import InMemoryJobStore

_ids = itertools.count(1000)


def days_ago(days: float) -> datetime:
    """A UTC timestamp ``days`` in the past."""
    return datetime.now(UTC) - timedelta(days=days)


def make_job(**overrides: object) -> JobPosting:
    """Create a published, listed JobPosting."""
    defaults: dict[str, object] = {
        "id": next(_ids),
        "title": "Backend Engineer",
        "description": "Build and operate Python services.",
        "employer": "Acme Corp",
        "location": "Berlin, Germany",
        "work_arrangement": "remote",
        "employment_type": "full-time",
        "experience_tier": "mid",
        "salary_min": 60000,
        "salary_max": 80000,
        "category_id": 1,
        "required_skills": ["Python", "SQL"],
        "preferred_skills": ["Docker"],
        "status": "published",
        "published_at": days_ago(1),
        "created_at": days_ago(2),
    }
    defaults.update(overrides)
    return JobPosting(**defaults)  # type: ignore[arg-type]


def make_profile(**overrides: object) -> CandidateProfile:
    """Create a CandidateProfile with skills, location and preferences."""
    defaults: dict[str, object] = {
        "id": 1,
        "title": "Software Engineer",
        "skills": ["Python", "SQL"],
        "location": "Berlin, Germany",
        "expected_salary": 70000,
        "work_preferences": WorkPreferences(work_arrangement="remote"),
        "years_of_experience": 4.0,
    }
    defaults.update(overrides)
    return CandidateProfile(**defaults)  # type: ignore[arg-type]


def make_cv(**overrides: object) -> CVDocument:
    """Create a CVDocument with one dated experience entry."""
    defaults: dict[str, object] = {
        "id": next(_ids),
        "candidate_id": 1,
        "title": "My CV",
        "skills": ["Python"],
        "experience": [
            CVExperience(
                title="Engineer",
                company="Initech",
                description="Built REST APIs with FastAPI and PostgreSQL.",
                start_date="2020-01-01",
                end_date="2023-01-01",
            )
        ],
    }
    defaults.update(overrides)
    return CVDocument(**defaults)  # type: ignore[arg-type]


def make_application(job_id: int, candidate_id: int = 1, **overrides: object) -> ApplicationRecord:
    """Create an ApplicationRecord for a job."""
    defaults: dict[str, object] = {
        "id": next(_ids),
        "job_id": job_id,
        "candidate_id": candidate_id,
    }
    defaults.update(overrides)
    return ApplicationRecord(**defaults)  # type: ignore[arg-type]


def make_snapshot(**overrides: object) -> CandidateSnapshot:
    """Create a CandidateSnapshot with every factor unknown."""
    defaults: dict[str, object] = {
        "candidate_id": 1,
        "skills": [],
    }
    defaults.update(overrides)
    return CandidateSnapshot(**defaults)  # type: ignore[arg-type]


def make_store(
    jobs: list[JobPosting] | None = None,
    profile: CandidateProfile | None = None,
    cvs: list[CVDocument] | None = None,
    applications: list[ApplicationRecord] | None = None,
) -> InMemoryJobStore:
    """Create an in-memory store holding one candidate and the given jobs."""
    return InMemoryJobStore(
        jobs=jobs or [],
        candidates=[profile or make_profile()],
        cvs=cvs or [],
        applications=applications or [],
    )
