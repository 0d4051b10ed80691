"""Generative-text provider for OpenAI-compatible chat completion APIs."""

from __future__ import annotations

import time
from typing import Any

import httpx
import structlog

from job_match_core.exceptions import ProviderUnavailableError

logger = structlog.get_logger()


class OpenAICompatibleProvider:
    """POST one chat completion per call over httpx."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "https://api.openai.com/v1",
        max_tokens: int = 4000,
    ) -> None:
        """Initialize with credentials and the API base URL."""
        self._api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.max_tokens = max_tokens

    async def generate(self, prompt: str, timeout: float) -> str:
        """Return the first choice's message content."""
        start = time.monotonic()
        payload: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers={"Authorization": f"Bearer {self._api_key}"},
                    json=payload,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise ProviderUnavailableError(self.name, "timeout") from e
        except httpx.HTTPError as e:
            raise ProviderUnavailableError(self.name, f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise ProviderUnavailableError(self.name, "response body is not JSON") from e

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderUnavailableError(self.name, "unexpected response shape") from e
        if not isinstance(text, str) or not text.strip():
            raise ProviderUnavailableError(self.name, "empty response")

        logger.debug(
            "provider_call_complete",
            provider=self.name,
            model=self.model,
            duration=round(time.monotonic() - start, 2),
        )
        return text
