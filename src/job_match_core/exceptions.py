"""Custom exception hierarchy for the job match engine."""

from __future__ import annotations


class JobMatchError(Exception):
    """Base exception for all job-match-engine errors."""


class ValidationError(JobMatchError):
    """Raised when a filter, paging argument, or other input is malformed."""


class NotFoundError(JobMatchError):
    """Raised when a referenced candidate or job posting does not exist."""


class StoreError(JobMatchError):
    """Raised when the underlying data store fails."""


class ProviderUnavailableError(JobMatchError):
    """Raised when a generative-text provider times out, fails, or answers garbage.

    Internal only: the semantic matcher always recovers from it by moving on
    to the next provider in its chain.
    """

    def __init__(self, provider: str, reason: str) -> None:
        super().__init__(f"{provider}: {reason}")
        self.provider = provider
        self.reason = reason
