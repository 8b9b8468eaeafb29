"""Input validation for research tasks and URLs."""

from typing import List, Optional, Tuple
from urllib.parse import urlparse

from web_scout.utils.config import settings

ALLOWED_SCHEMES = ("http", "https")


def validate_url(url: str) -> Tuple[bool, Optional[str]]:
    """Return (is_valid, reason).  Only absolute http(s) URLs pass."""
    if not url or not url.strip():
        return False, "URL is empty."
    parsed = urlparse(url.strip())
    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        return False, f"Unsupported URL scheme: {url}"
    if not parsed.netloc:
        return False, f"URL has no host: {url}"
    return True, None


def validate_task(
    task: str, urls: Optional[List[str]] = None, query: Optional[str] = None
) -> Tuple[bool, Optional[str]]:
    """Validate length and basic sanity of a research request.

    Missing both ``urls`` and ``query`` is not checked here; the research
    flow reports that case as its own error kind.
    """
    if not task or not task.strip():
        return False, "Task is empty."
    if len(task) > settings.max_task_length:
        return False, f"Task exceeds max length ({settings.max_task_length} chars)."
    if query is not None and len(query) > settings.max_task_length:
        return False, f"Query exceeds max length ({settings.max_task_length} chars)."
    urls = urls or []
    if len(urls) > settings.max_urls:
        return False, f"Too many URLs ({len(urls)} > {settings.max_urls})."
    for url in urls:
        ok, reason = validate_url(url)
        if not ok:
            return False, reason
    return True, None
