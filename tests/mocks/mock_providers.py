"""Deterministic stub providers for fallback-chain tests."""

from __future__ import annotations

import asyncio
import json
from typing import Any

from job_match_core.exceptions import ProviderUnavailableError


class StubProvider:
    """TextProvider returning a canned response, raising, or hanging."""

    def __init__(
        self,
        name: str,
        response: str = "",
        error: BaseException | None = None,
        delay: float = 0.0,
    ) -> None:
        self.name = name
        self.response = response
        self.error = error
        self.delay = delay
        self.calls: list[str] = []

    async def generate(self, prompt: str, timeout: float) -> str:
        self.calls.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


def hanging_provider(name: str = "slow") -> StubProvider:
    """A provider that never answers within any test timeout."""
    return StubProvider(name, delay=60)


def malformed_provider(name: str = "garbled") -> StubProvider:
    """A provider that answers prose without any JSON block."""
    return StubProvider(name, response="Sorry, I cannot help with matching today.")


def unavailable_provider(name: str = "down") -> StubProvider:
    """A provider whose transport fails."""
    return StubProvider(name, error=ProviderUnavailableError(name, "HTTP 503"))


def json_provider(name: str, payload: dict[str, Any], prose: bool = True) -> StubProvider:
    """A provider answering ``payload`` as JSON, wrapped in prose by default."""
    body = json.dumps(payload)
    if prose:
        body = f"Here is my analysis:\n```json\n{body}\n```\nLet me know if you need more."
    return StubProvider(name, response=body)


def match_entry(job_id: int, score: float, **overrides: Any) -> dict[str, Any]:
    """One camelCase match entry as a provider would write it."""
    entry: dict[str, Any] = {
        "jobId": job_id,
        "matchScore": score,
        "skillsMatch": {"matching": ["Python"], "missing": [], "percentage": 100},
        "experienceMatch": {"score": 80, "analysis": "Good level fit."},
        "salaryMatch": {"score": 70, "analysis": "Within range."},
        "locationMatch": {"score": 90, "analysis": "Same city."},
        "overallAnalysis": "Strong candidate for this role.",
        "recommendations": ["Highlight your API work."],
    }
    entry.update(overrides)
    return entry
