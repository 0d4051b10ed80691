"""Skill gap analysis prompt template (v1)."""

from __future__ import annotations

SKILL_GAP_PROMPT = """\
Analyze skill gaps for this candidate across multiple target jobs.

<candidate>
Skills: {skills}
Experience: {years_of_experience} years ({experience_tier})
</candidate>

<jobs>
{jobs_block}
</jobs>

Provide:
1. Overall skill gaps across all jobs
2. Job-specific gaps for each position, keyed by job id
3. Learning recommendations prioritized by importance

Return ONLY one JSON object in this format:
{{
  "overallGaps": [
    {{"skill": "string", "importance": "critical|important|nice-to-have", \
"description": "string", "learningResources": ["string"]}}
  ],
  "jobSpecificGaps": {{
    "<jobId>": [ skill gap objects as above ]
  }},
  "recommendations": ["string"]
}}
"""
