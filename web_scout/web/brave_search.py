"""Brave Search implementation (REST API, no SDK)."""

import os
from typing import List, Optional

import httpx

from web_scout.errors import SearchFailed
from web_scout.utils.config import settings
from web_scout.utils.logger import get_logger
from web_scout.web.search_provider import (
    SearchOptions,
    SearchProvider,
    SearchResult,
    clamp_count,
)

log = get_logger(__name__)

BRAVE_ENDPOINT = "https://api.search.brave.com/res/v1/web/search"
BRAVE_KEY_ENV = "BRAVE_API_KEY"


class BraveSearch(SearchProvider):
    """Web search via the Brave Search API.

    Gated by ``BRAVE_API_KEY``; the key is read on every call so that it can
    be exported after start-up.
    """

    name = "brave"
    description = "Brave Search API -- web search with optional content extraction"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    def check_availability(self) -> bool:
        return bool(os.environ.get(BRAVE_KEY_ENV))

    async def search(
        self, query: str, options: Optional[SearchOptions] = None
    ) -> List[SearchResult]:
        """Execute a Brave search and normalise results."""
        api_key = os.environ.get(BRAVE_KEY_ENV)
        if not api_key:
            raise SearchFailed(f"{BRAVE_KEY_ENV} not set")

        count = clamp_count(options, settings.default_search_count, settings.max_search_count)
        params = {"q": query, "count": str(count)}
        if options and options.freshness:
            params["freshness"] = options.freshness
        if options and options.country:
            params["country"] = options.country

        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip",
            "X-Subscription-Token": api_key,
        }

        try:
            async with httpx.AsyncClient(
                timeout=settings.search_timeout, transport=self._transport
            ) as client:
                resp = await client.get(BRAVE_ENDPOINT, params=params, headers=headers)
        except httpx.HTTPError as exc:
            log.warning("Brave search failed for query: %s", query)
            raise SearchFailed(f"Brave Search request failed: {exc}", cause=exc) from exc

        if not resp.is_success:
            raise SearchFailed(
                f"Brave Search API error: HTTP {resp.status_code} {resp.reason_phrase}",
                context={"status": resp.status_code},
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise SearchFailed("Brave Search returned a non-JSON body", cause=exc) from exc
        if not isinstance(data, dict):
            raise SearchFailed("Brave Search returned an unexpected payload")

        results: List[SearchResult] = []
        for item in (data.get("web") or {}).get("results", []):
            results.append(
                SearchResult(
                    title=item.get("title", ""),
                    url=item.get("url", ""),
                    snippet=item.get("description", ""),
                )
            )
        log.info("Brave returned %d results for: %s", len(results), query)
        return results
