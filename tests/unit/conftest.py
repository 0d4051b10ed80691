"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import pytest

from job_match_core.config.settings import Settings
from job_match_core.models.candidate import CandidateProfile
from job_match_core.models.job import JobPosting
from job_match_infra.memory_store import InMemoryJobStore
from tests.mocks.mock_factories import days_ago, make_job, make_profile, make_store
from tests.mocks.mock_settings import make_settings


@pytest.fixture
def settings() -> Settings:
    """Return Settings with no providers configured."""
    return make_settings()


@pytest.fixture
def sample_profile() -> CandidateProfile:
    """Return a Berlin-based Python candidate preferring remote work."""
    return make_profile()


@pytest.fixture
def sample_jobs() -> list[JobPosting]:
    """Return a small board: three listed postings and two unlisted ones."""
    return [
        make_job(id=1, title="Python Developer", required_skills=["Python", "SQL"]),
        make_job(
            id=2,
            title="Data Engineer",
            employer="Globex",
            required_skills=["Python", "Spark", "AWS"],
            work_arrangement="hybrid",
            published_at=days_ago(3),
        ),
        make_job(
            id=3,
            title="Java Developer",
            employer="Initech",
            location="Munich, Germany",
            required_skills=["Java", "Kotlin"],
            work_arrangement="onsite",
            experience_tier="senior",
            category_id=2,
            published_at=days_ago(5),
        ),
        make_job(id=4, title="Draft Role", status="draft"),
        make_job(id=5, title="Expired Role", expires_at=days_ago(1)),
    ]


@pytest.fixture
def store(sample_jobs: list[JobPosting], sample_profile: CandidateProfile) -> InMemoryJobStore:
    """Return an in-memory store holding the sample board and candidate."""
    return make_store(jobs=sample_jobs, profile=sample_profile)
