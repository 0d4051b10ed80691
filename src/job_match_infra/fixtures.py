"""JSON fixture format for seeding a store."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from job_match_core.exceptions import ValidationError
from job_match_core.models.candidate import ApplicationRecord, CandidateProfile, CVDocument
from job_match_core.models.job import JobPosting


class FixtureData(BaseModel):
    """Jobs, candidates, CVs and applications in one document."""

    jobs: list[JobPosting] = Field(default_factory=list)
    candidates: list[CandidateProfile] = Field(default_factory=list)
    cvs: list[CVDocument] = Field(default_factory=list)
    applications: list[ApplicationRecord] = Field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {
            "jobs": len(self.jobs),
            "candidates": len(self.candidates),
            "cvs": len(self.cvs),
            "applications": len(self.applications),
        }


def read_fixture(path: Path) -> FixtureData:
    """Parse a fixture file, raising ValidationError on malformed content."""
    try:
        return FixtureData.model_validate_json(path.read_text(encoding="utf-8"))
    except ValueError as e:
        msg = f"Invalid fixture {path}: {e}"
        raise ValidationError(msg) from e
