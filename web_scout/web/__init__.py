"""Web module -- search providers, page fetching, content extraction."""

from web_scout.web.brave_search import BraveSearch
from web_scout.web.extractor import ExtractedArticle, extract
from web_scout.web.fetch_only import FETCH_ONLY, FetchOnly
from web_scout.web.fetcher import fetch_url
from web_scout.web.registry import ProviderRegistry
from web_scout.web.search_provider import SearchOptions, SearchProvider, SearchResult
from web_scout.web.tavily_search import TavilySearch

__all__ = [
    "BraveSearch",
    "ExtractedArticle",
    "FETCH_ONLY",
    "FetchOnly",
    "ProviderRegistry",
    "SearchOptions",
    "SearchProvider",
    "SearchResult",
    "TavilySearch",
    "extract",
    "fetch_url",
]
