"""Domain models for the job match engine."""

from job_match_core.models.candidate import (
    ApplicationRecord,
    CandidateProfile,
    CVDocument,
    CVExperience,
    WorkPreferences,
)
from job_match_core.models.job import JobPosting
from job_match_core.models.match import (
    CandidateSnapshot,
    FactorAnalysis,
    MatchResult,
    MatchScore,
    SkillGap,
    SkillGapReport,
    SkillsMatch,
    SubScores,
)
from job_match_core.models.search import (
    FacetCount,
    JobDetails,
    JobSearchFilters,
    SearchFacets,
    SearchHit,
    SearchResponse,
    StorePage,
)

__all__ = [
    "ApplicationRecord",
    "CVDocument",
    "CVExperience",
    "CandidateProfile",
    "CandidateSnapshot",
    "FacetCount",
    "FactorAnalysis",
    "JobDetails",
    "JobPosting",
    "JobSearchFilters",
    "MatchResult",
    "MatchScore",
    "SearchFacets",
    "SearchHit",
    "SearchResponse",
    "SkillGap",
    "SkillGapReport",
    "SkillsMatch",
    "StorePage",
    "SubScores",
    "WorkPreferences",
]
