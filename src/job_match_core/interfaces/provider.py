"""Abstract generative-text provider interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TextProvider(Protocol):
    """A generative-text backend used by the semantic matcher.

    ``generate`` raises ``ProviderUnavailableError`` on transport failures.
    """

    name: str

    async def generate(self, prompt: str, timeout: float) -> str:
        """Send one prompt and return the provider's free-text answer."""
        ...
