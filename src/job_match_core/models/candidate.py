"""Candidate profile, CV documents and application history."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from job_match_core.models.job import WorkArrangement


class WorkPreferences(BaseModel):
    """Declared work arrangement and location preferences."""

    work_arrangement: WorkArrangement | None = Field(
        default=None, description="Preferred arrangement, None if no preference"
    )
    locations: list[str] = Field(default_factory=list, description="Preferred locations")


class CandidateProfile(BaseModel):
    """A job seeker's durable attributes. Read-only to the engine."""

    id: int = Field(description="Candidate identifier")
    title: str | None = Field(default=None, description="Professional title")
    skills: list[str] = Field(default_factory=list, description="Declared skills")
    location: str | None = Field(default=None, description="Current location")
    expected_salary: int | None = Field(default=None, ge=0, description="Expected salary")
    work_preferences: WorkPreferences = Field(
        default_factory=WorkPreferences, description="Work preferences"
    )
    years_of_experience: float | None = Field(
        default=None, ge=0, description="Total years of professional experience, None if unknown"
    )


class CVExperience(BaseModel):
    """One experience entry of a CV."""

    title: str | None = Field(default=None, description="Role title")
    company: str | None = Field(default=None, description="Employer")
    description: str | None = Field(default=None, description="Freeform description")
    start_date: str | None = Field(default=None, description="ISO start date")
    end_date: str | None = Field(
        default=None, description="ISO end date, or 'Present' for a current role"
    )


class CVDocument(BaseModel):
    """Structured résumé used to enrich the candidate's profile."""

    id: int = Field(description="CV identifier")
    candidate_id: int = Field(description="Owning candidate")
    title: str = Field(default="", description="Document title")
    skills: list[str] = Field(default_factory=list, description="Skills section entries")
    experience: list[CVExperience] = Field(
        default_factory=list, description="Experience section entries"
    )


class ApplicationRecord(BaseModel):
    """A candidate's past application to a posting."""

    id: int = Field(description="Application identifier")
    job_id: int = Field(description="Applied-to job posting")
    candidate_id: int = Field(description="Applying candidate")
    status: str = Field(default="pending", description="Application status")
    applied_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When the application was sent"
    )
