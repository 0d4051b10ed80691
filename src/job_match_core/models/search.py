"""Search filters, facets and responses."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from job_match_core.models.job import (
    EmploymentType,
    ExperienceTier,
    JobPosting,
    WorkArrangement,
)

PostedWithin = Literal["today", "week", "month"]


class JobSearchFilters(BaseModel):
    """Conjunction of optional search predicates."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    query: str | None = Field(default=None, description="Free text over title/description/employer")
    location: str | None = Field(default=None, description="Location substring")
    work_arrangement: WorkArrangement | None = None
    employment_type: EmploymentType | None = None
    experience_tier: ExperienceTier | None = None
    salary_min: int | None = Field(default=None, description="Salary floor")
    salary_max: int | None = Field(default=None, description="Salary ceiling")
    category_id: int | None = None
    skills: tuple[str, ...] = Field(default=(), description="Any-of skill overlap")
    posted_within: PostedWithin | None = None
    sort_by: Literal["relevance", "date"] = "date"
    sort_order: Literal["asc", "desc"] = "desc"

    @model_validator(mode="after")
    def validate_salary_bounds(self) -> JobSearchFilters:
        """Reject negative or inverted salary bounds."""
        if self.salary_min is not None and self.salary_min < 0:
            msg = f"salary_min ({self.salary_min}) cannot be negative"
            raise ValueError(msg)
        if self.salary_max is not None and self.salary_max < 0:
            msg = f"salary_max ({self.salary_max}) cannot be negative"
            raise ValueError(msg)
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_min > self.salary_max
        ):
            msg = f"salary_min ({self.salary_min}) cannot exceed salary_max ({self.salary_max})"
            raise ValueError(msg)
        return self

    def signature(self) -> str:
        """Stable string identifying this filter combination."""
        return self.model_dump_json(exclude_defaults=True)


class StorePage(BaseModel):
    """A filtered, paginated read from the store."""

    items: list[JobPosting] = Field(default_factory=list)
    total: int = Field(ge=0, description="Filtered count before pagination")


class FacetCount(BaseModel):
    """One value of a facet dimension and how many postings carry it."""

    value: str
    count: int = Field(ge=0)


class SearchFacets(BaseModel):
    """Count-by-value breakdowns for search refinement."""

    locations: list[FacetCount] = Field(default_factory=list)
    work_arrangements: list[FacetCount] = Field(default_factory=list)
    experience_tiers: list[FacetCount] = Field(default_factory=list)
    salary_ranges: list[FacetCount] = Field(default_factory=list)
    categories: list[FacetCount] = Field(default_factory=list)
    employers: list[FacetCount] = Field(default_factory=list)


class SearchHit(BaseModel):
    """A search result, optionally annotated for the searching candidate."""

    job: JobPosting
    match_score: int | None = Field(default=None, ge=0, le=100)
    is_applied: bool = False


class SearchResponse(BaseModel):
    """One page of search results with facets and recommendations."""

    items: list[SearchHit] = Field(default_factory=list)
    total: int = Field(ge=0)
    pages: int = Field(ge=0)
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    facets: SearchFacets
    recommendations: list[JobPosting] = Field(default_factory=list)


class JobDetails(BaseModel):
    """A posting with related postings for a detail view."""

    job: SearchHit
    similar_jobs: list[JobPosting] = Field(default_factory=list)
    employer_jobs: list[JobPosting] = Field(default_factory=list)
