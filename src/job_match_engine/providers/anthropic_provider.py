"""Generative-text provider backed by the Anthropic Messages API."""

from __future__ import annotations

import time

import anthropic
import structlog
from anthropic import AsyncAnthropic

from job_match_core.exceptions import ProviderUnavailableError

logger = structlog.get_logger()


class AnthropicProvider:
    """Send one prompt per call to a Claude model."""

    name = "anthropic"

    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int = 4000,
        client: AsyncAnthropic | None = None,
    ) -> None:
        """Initialize with credentials; retries are left to the fallback chain."""
        self.model = model
        self.max_tokens = max_tokens
        self._client = client or AsyncAnthropic(api_key=api_key, max_retries=0)

    async def generate(self, prompt: str, timeout: float) -> str:
        """Return the concatenated text blocks of the model's reply."""
        start = time.monotonic()
        try:
            response = await self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
                timeout=timeout,
            )
        except anthropic.APITimeoutError as e:
            raise ProviderUnavailableError(self.name, "timeout") from e
        except anthropic.APIError as e:
            raise ProviderUnavailableError(self.name, f"{type(e).__name__}: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        if not text.strip():
            raise ProviderUnavailableError(self.name, "empty response")

        logger.debug(
            "provider_call_complete",
            provider=self.name,
            model=self.model,
            duration=round(time.monotonic() - start, 2),
            input_tokens=getattr(response.usage, "input_tokens", 0),
            output_tokens=getattr(response.usage, "output_tokens", 0),
        )
        return text
