"""Tests for domain model validation."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from job_match_core.models.search import JobSearchFilters
from tests.mocks.mock_factories import make_job

NOW = datetime(2026, 1, 15, tzinfo=UTC)


@pytest.mark.unit
class TestJobPosting:
    """Test JobPosting validation and helpers."""

    def test_inverted_salary_rejected(self) -> None:
        """salary_min above salary_max is invalid."""
        with pytest.raises(ValidationError, match="salary_min"):
            make_job(salary_min=90000, salary_max=50000)

    def test_unknown_enum_rejected(self) -> None:
        """Work arrangement is a closed set."""
        with pytest.raises(ValidationError):
            make_job(work_arrangement="moon")

    def test_eligibility(self) -> None:
        """Published and unexpired postings are eligible."""
        assert make_job(expires_at=None).is_eligible(NOW)
        assert make_job(expires_at=NOW + timedelta(days=1)).is_eligible(NOW)
        assert not make_job(expires_at=NOW - timedelta(seconds=1)).is_eligible(NOW)
        assert not make_job(status="closed").is_eligible(NOW)

    def test_naive_timestamps_treated_as_utc(self) -> None:
        """Naive datetimes compare against aware ones."""
        job = make_job(published_at=datetime(2026, 1, 14), expires_at=datetime(2026, 2, 1))
        assert job.listed_at.tzinfo is not None
        assert job.days_since_published(NOW) == pytest.approx(1.0)
        assert job.is_eligible(NOW)


@pytest.mark.unit
class TestJobSearchFilters:
    """Test JobSearchFilters validation."""

    def test_signature_ignores_defaults(self) -> None:
        """Equivalent filters share a signature."""
        assert JobSearchFilters().signature() == JobSearchFilters(sort_by="date").signature()
        assert JobSearchFilters(query="x").signature() != JobSearchFilters().signature()

    def test_negative_bound(self) -> None:
        """Negative salary bounds are invalid."""
        with pytest.raises(ValidationError, match="negative"):
            JobSearchFilters(salary_max=-5)

    def test_unknown_field(self) -> None:
        """Unknown filter keys are rejected."""
        with pytest.raises(ValidationError):
            JobSearchFilters(colour="red")  # type: ignore[call-arg]
