"""Job posting model as published by employers."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

WorkArrangement = Literal["remote", "hybrid", "onsite"]
ExperienceTier = Literal["entry", "mid", "senior", "executive"]
EmploymentType = Literal["full-time", "part-time", "contract", "internship"]
JobStatus = Literal["draft", "published", "paused", "closed", "expired"]


class JobPosting(BaseModel):
    """An employer's open role. Read-only to the engine."""

    id: int = Field(description="Unique job posting identifier")
    title: str = Field(description="Job title")
    description: str = Field(default="", description="Full job description text")
    employer: str = Field(description="Employer / company name")
    location: str | None = Field(default=None, description="Job location")
    work_arrangement: WorkArrangement | None = Field(
        default=None, description="Remote, hybrid or onsite"
    )
    employment_type: EmploymentType | None = Field(
        default=None, description="Full-time, part-time, contract or internship"
    )
    experience_tier: ExperienceTier | None = Field(
        default=None, description="Seniority the role is aimed at"
    )
    salary_min: int | None = Field(default=None, ge=0, description="Minimum salary")
    salary_max: int | None = Field(default=None, ge=0, description="Maximum salary")
    salary_currency: str = Field(default="USD", description="Salary currency")
    category_id: int | None = Field(default=None, description="Job category reference")
    required_skills: list[str] = Field(
        default_factory=list, description="Required skills"
    )
    preferred_skills: list[str] = Field(
        default_factory=list, description="Preferred/nice-to-have skills"
    )
    status: JobStatus = Field(default="draft", description="Publication status")
    is_featured: bool = Field(default=False, description="Promoted by the employer")
    view_count: int = Field(default=0, ge=0, description="Detail page views")
    application_count: int = Field(default=0, ge=0, description="Applications received")
    published_at: datetime | None = Field(default=None, description="When it was published")
    expires_at: datetime | None = Field(default=None, description="When it stops being listed")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When it was created"
    )

    @model_validator(mode="after")
    def validate_salary_range(self) -> JobPosting:
        """Ensure salary_min <= salary_max when both are set."""
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_min > self.salary_max
        ):
            msg = f"salary_min ({self.salary_min}) > salary_max ({self.salary_max})"
            raise ValueError(msg)
        return self

    @property
    def listed_at(self) -> datetime:
        """Timestamp used for recency ordering."""
        return _aware(self.published_at or self.created_at)

    def is_eligible(self, now: datetime) -> bool:
        """Whether the posting may appear in search or recommendations."""
        if self.status != "published":
            return False
        return self.expires_at is None or _aware(self.expires_at) > now

    def days_since_published(self, now: datetime) -> float:
        """Fractional days elapsed since the posting was listed."""
        return (now - self.listed_at).total_seconds() / 86400


def _aware(value: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
