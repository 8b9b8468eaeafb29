"""The always-available fallback provider."""

from typing import List, Optional

from web_scout.web.search_provider import SearchOptions, SearchProvider, SearchResult

FETCH_ONLY = "fetch-only"


class FetchOnly(SearchProvider):
    """No search at all.

    Its presence tells callers to work from explicit URLs only; ``search``
    returns an empty list instead of failing.
    """

    name = FETCH_ONLY
    description = "No search -- only works with explicit URLs. Always available as fallback."

    def check_availability(self) -> bool:
        return True

    async def search(
        self, query: str, options: Optional[SearchOptions] = None
    ) -> List[SearchResult]:
        return []
