"""Tavily Search implementation."""

import os
from typing import List, Optional

from tavily import AsyncTavilyClient

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

TAVILY_KEY_ENV = "TAVILY_API_KEY"

# Brave-style freshness codes -> Tavily time_range
_TIME_RANGES = {"pd": "day", "pw": "week", "pm": "month", "py": "year"}


class TavilySearch(SearchProvider):
    """Web search via the Tavily API.

    Tavily returns pre-extracted, LLM-ready content alongside each result,
    which means the scout can often skip the fetch-and-convert step entirely.
    """

    name = "tavily"
    description = "Tavily API -- web search with pre-extracted page content"

    def check_availability(self) -> bool:
        return bool(os.environ.get(TAVILY_KEY_ENV))

    async def search(
        self, query: str, options: Optional[SearchOptions] = None
    ) -> List[SearchResult]:
        """Execute a Tavily search and normalise results."""
        api_key = os.environ.get(TAVILY_KEY_ENV)
        if not api_key:
            raise SearchFailed(f"{TAVILY_KEY_ENV} not set")

        include_content = bool(options and options.include_content)
        kwargs = {
            "query": query,
            "max_results": clamp_count(
                options, settings.default_search_count, settings.max_search_count
            ),
            "include_raw_content": include_content,
        }
        if options and options.freshness in _TIME_RANGES:
            kwargs["time_range"] = _TIME_RANGES[options.freshness]

        client = AsyncTavilyClient(api_key=api_key)
        try:
            raw = await client.search(**kwargs)
        except Exception as exc:
            log.exception("Tavily search failed for query: %s", query)
            raise SearchFailed(f"Tavily search failed: {exc}", cause=exc) from exc

        results: List[SearchResult] = []
        for item in raw.get("results", []):
            results.append(
                SearchResult(
                    title=item.get("title", ""),
                    url=item.get("url", ""),
                    snippet=item.get("content", ""),
                    content=item.get("raw_content") if include_content else None,
                )
            )
        return results
