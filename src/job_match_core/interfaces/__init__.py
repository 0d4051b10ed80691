"""Public interface re-exports for job_match_core."""

from job_match_core.interfaces.cache import CacheClient
from job_match_core.interfaces.provider import TextProvider
from job_match_core.interfaces.store import JobStore

__all__ = [
    "CacheClient",
    "JobStore",
    "TextProvider",
]
