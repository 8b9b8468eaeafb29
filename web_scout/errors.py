"""Exception hierarchy for web research.

Core components raise these; the tool façade turns them into structured
failure results using the ``kind`` tag.
"""

from typing import Any, Dict, Optional


class WebScoutError(Exception):
    """Base exception for all web-scout failures."""

    kind = "error"

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context = context or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} (caused by: {type(self.cause).__name__}: {self.cause})"
        return self.message


# === Extraction ===

class FetchFailed(WebScoutError):
    """Non-2xx status, timeout or transport error while fetching a URL."""

    kind = "fetch_failed"


class NoContentFound(WebScoutError):
    """Readability analysis found no article region. Do not retry."""

    kind = "no_content"


# === Search providers ===

class SearchFailed(WebScoutError):
    kind = "search_failed"


class ProviderUnavailable(WebScoutError):
    """Named provider exists but lacks its credential or config."""

    kind = "provider_unavailable"


class UnknownProvider(WebScoutError):
    kind = "unknown_provider"


class NoSearchProvider(WebScoutError):
    """A query was given but only the fetch-only fallback is available."""

    kind = "no_search_provider"


# === Scout worker ===

class WorkerSpawnFailed(WebScoutError):
    kind = "spawn_failed"


class WorkerExitedNonZero(WebScoutError):
    kind = "worker_failed"


class ScoutCancelled(WebScoutError):
    kind = "cancelled"


# === Task validation ===

class TaskUnderspecified(WebScoutError):
    """Neither URLs nor a search query were supplied."""

    kind = "task_underspecified"


class InvalidTask(WebScoutError):
    kind = "invalid_task"
