"""Factory functions for building the provider chain from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from job_match_core.interfaces.provider import TextProvider

if TYPE_CHECKING:
    from job_match_core.config.settings import Settings

logger = structlog.get_logger()


def create_providers(settings: Settings) -> list[TextProvider]:
    """Build providers in ``settings.provider_order``, skipping unconfigured ones.

    An empty list is valid: the semantic matcher then goes straight to the
    heuristic recommender.
    """
    providers: list[TextProvider] = []
    for name in settings.provider_order:
        if name == "anthropic":
            if settings.anthropic_api_key is None:
                logger.info("provider_skipped", provider=name, reason="no api key")
                continue
            from job_match_engine.providers.anthropic_provider import AnthropicProvider

            providers.append(
                AnthropicProvider(
                    api_key=settings.anthropic_api_key.get_secret_value(),
                    model=settings.anthropic_model,
                    max_tokens=settings.provider_max_tokens,
                )
            )
        elif name == "openai":
            if settings.openai_api_key is None:
                logger.info("provider_skipped", provider=name, reason="no api key")
                continue
            from job_match_engine.providers.openai_provider import OpenAICompatibleProvider

            providers.append(
                OpenAICompatibleProvider(
                    api_key=settings.openai_api_key.get_secret_value(),
                    model=settings.openai_model,
                    base_url=settings.openai_base_url,
                    max_tokens=settings.provider_max_tokens,
                )
            )
    return providers
