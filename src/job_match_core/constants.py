"""Shared constants for the job match engine."""

from __future__ import annotations

# Prompt versions, increment when prompt templates change
SEMANTIC_MATCH_PROMPT_VERSION = "v1"
SKILL_GAP_PROMPT_VERSION = "v1"

# Match scorer weight dimensions, must sum to 1.0
MATCH_WEIGHTS: dict[str, float] = {
    "skills": 0.40,
    "location": 0.20,
    "salary": 0.20,
    "experience": 0.10,
    "work_arrangement": 0.10,
}

# Neutral sub-score used when either side of a comparison is unknown
NEUTRAL_SCORE = 0.5

EXPERIENCE_TIERS: tuple[str, ...] = ("entry", "mid", "senior", "executive")

# Years of experience at which a candidate moves into the next tier
EXPERIENCE_TIER_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (2.0, "entry"),
    (5.0, "mid"),
    (10.0, "senior"),
)

# Salary facet buckets: (label, lower bound inclusive, upper bound exclusive)
SALARY_BUCKETS: tuple[tuple[str, int, float], ...] = (
    ("0-30k", 0, 30_000),
    ("30k-50k", 30_000, 50_000),
    ("50k-75k", 50_000, 75_000),
    ("75k-100k", 75_000, 100_000),
    ("100k-150k", 100_000, 150_000),
    ("150k+", 150_000, float("inf")),
)

# "posted within" windows in days
POSTED_WITHIN_DAYS: dict[str, int] = {
    "today": 1,
    "week": 7,
    "month": 30,
}

# Trending score coefficients
TRENDING_VIEW_WEIGHT = 0.3
TRENDING_APPLICATION_WEIGHT = 0.5
TRENDING_RECENCY_WEIGHT = 0.2
TRENDING_RECENCY_DAYS = 7

# Relevance weights for free-text query hits
RELEVANCE_FIELD_WEIGHTS: dict[str, int] = {
    "title": 3,
    "employer": 2,
    "description": 1,
}

# Skills looked for in CV experience descriptions
SKILL_VOCABULARY: tuple[str, ...] = (
    "JavaScript",
    "TypeScript",
    "Python",
    "Java",
    "Rust",
    "C#",
    "React",
    "Angular",
    "Vue",
    "Node.js",
    "Django",
    "Flask",
    "FastAPI",
    "SQL",
    "PostgreSQL",
    "MongoDB",
    "Redis",
    "AWS",
    "Azure",
    "GCP",
    "Docker",
    "Kubernetes",
    "Terraform",
    "GraphQL",
    "Machine Learning",
)
