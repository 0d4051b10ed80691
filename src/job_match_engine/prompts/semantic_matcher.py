"""Semantic job matching prompt template (v1)."""

from __future__ import annotations

SEMANTIC_MATCH_PROMPT = """\
You are a job-candidate match analyst. Analyze how well the candidate fits each job.

<candidate>
Skills: {skills}
Experience: {years_of_experience} years ({experience_tier})
Location: {location}
Work Arrangement Preference: {work_arrangement}
Expected Salary: {expected_salary}
</candidate>

<jobs>
{jobs_block}
</jobs>

<calibration>
- 75-100: strong fit with at most minor gaps.
- 50-74: viable with meaningful gaps.
- 30-49: stretch role.
- Below 30: not a fit.
- Be honest about gaps. Do not inflate scores.
</calibration>

For each job analyze:
1. Skills match (matching vs missing skills, percentage 0-100)
2. Experience match (score 0-100, analysis)
3. Salary match (score 0-100, analysis)
4. Location match (score 0-100, analysis)
5. Overall match score (0-100)
6. Detailed analysis and recommendations
{skill_gap_instruction}
Return ONLY one JSON object in this format:
{{
  "matches": [
    {{
      "jobId": number,
      "matchScore": number,
      "skillsMatch": {{"matching": ["skill"], "missing": ["skill"], "percentage": number}},
      "experienceMatch": {{"score": number, "analysis": "string"}},
      "salaryMatch": {{"score": number, "analysis": "string"}},
      "locationMatch": {{"score": number, "analysis": "string"}},
      "overallAnalysis": "string",
      "recommendations": ["string"]{skill_gap_schema}
    }}
  ]
}}
"""

SKILL_GAP_INSTRUCTION = """\
7. Skill gaps with importance levels (critical, important, nice-to-have) and learning suggestions
"""

SKILL_GAP_SCHEMA = """,
      "skillGaps": [
        {"skill": "string", "importance": "critical|important|nice-to-have", \
"description": "string", "learningResources": ["string"]}
      ]"""

JOB_BLOCK = """\
<job id="{id}">
Title: {title}
Company: {employer}
Location: {location}
Work Arrangement: {work_arrangement}
Experience Level: {experience_tier}
Salary Range: {salary}
Required Skills: {required_skills}
Preferred Skills: {preferred_skills}
Description: {description}
</job>"""
