"""Unit tests for the built-in search providers."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from web_scout.errors import SearchFailed
from web_scout.web.brave_search import BRAVE_ENDPOINT, BraveSearch
from web_scout.web.fetch_only import FetchOnly
from web_scout.web.search_provider import SearchOptions, clamp_count
from web_scout.web.tavily_search import TavilySearch

BRAVE_PAYLOAD = {
    "web": {
        "results": [
            {"title": "httpx docs", "url": "https://www.python-httpx.org/",
             "description": "A next-generation HTTP client."},
            {"title": "httpx on PyPI", "url": "https://pypi.org/project/httpx/",
             "description": "The next generation HTTP client."},
        ]
    }
}


class TestClampCount:
    def test_default_when_unset(self):
        assert clamp_count(None, 5, 20) == 5

    def test_clamped_to_maximum(self):
        assert clamp_count(SearchOptions(count=100), 5, 20) == 20

    def test_at_least_one(self):
        assert clamp_count(SearchOptions(count=-3), 5, 20) == 1


class TestBraveSearch:
    def test_availability_follows_env(self, monkeypatch):
        provider = BraveSearch()
        monkeypatch.delenv("BRAVE_API_KEY", raising=False)
        assert provider.check_availability() is False
        monkeypatch.setenv("BRAVE_API_KEY", "k")
        assert provider.check_availability() is True

    @pytest.mark.asyncio
    async def test_search_maps_results(self, monkeypatch):
        monkeypatch.setenv("BRAVE_API_KEY", "secret")
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=BRAVE_PAYLOAD)

        provider = BraveSearch(transport=httpx.MockTransport(handler))
        results = await provider.search(
            "python http client", SearchOptions(count=2, freshness="pw", country="NL")
        )

        assert [r.title for r in results] == ["httpx docs", "httpx on PyPI"]
        assert results[0].snippet == "A next-generation HTTP client."
        assert results[0].content is None

        request = seen[0]
        assert str(request.url).startswith(BRAVE_ENDPOINT)
        assert request.headers["X-Subscription-Token"] == "secret"
        assert request.url.params["q"] == "python http client"
        assert request.url.params["count"] == "2"
        assert request.url.params["freshness"] == "pw"
        assert request.url.params["country"] == "NL"

    @pytest.mark.asyncio
    async def test_empty_web_section(self, monkeypatch):
        monkeypatch.setenv("BRAVE_API_KEY", "secret")
        provider = BraveSearch(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))
        assert await provider.search("nothing") == []

    @pytest.mark.asyncio
    async def test_http_error_raises(self, monkeypatch):
        monkeypatch.setenv("BRAVE_API_KEY", "secret")
        provider = BraveSearch(
            transport=httpx.MockTransport(lambda r: httpx.Response(429, text="slow down"))
        )
        with pytest.raises(SearchFailed, match="429"):
            await provider.search("python")

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self, monkeypatch):
        monkeypatch.setenv("BRAVE_API_KEY", "secret")
        provider = BraveSearch(
            transport=httpx.MockTransport(lambda r: httpx.Response(200, text="<html>oops</html>"))
        )
        with pytest.raises(SearchFailed, match="non-JSON"):
            await provider.search("python")


class TestTavilySearch:
    def test_availability_follows_env(self, monkeypatch):
        monkeypatch.delenv("TAVILY_API_KEY", raising=False)
        assert TavilySearch().check_availability() is False
        monkeypatch.setenv("TAVILY_API_KEY", "tvly-x")
        assert TavilySearch().check_availability() is True

    @pytest.mark.asyncio
    @patch("web_scout.web.tavily_search.AsyncTavilyClient")
    async def test_search_normalises(self, mock_client_cls, monkeypatch):
        monkeypatch.setenv("TAVILY_API_KEY", "tvly-x")
        mock_client_cls.return_value.search = AsyncMock(return_value={
            "results": [
                {"title": "LangGraph", "url": "https://langchain-ai.github.io/langgraph/",
                 "content": "Build stateful agents.", "raw_content": "Full page text"},
            ]
        })

        results = await TavilySearch().search(
            "langgraph", SearchOptions(count=3, freshness="pm", include_content=True)
        )

        assert len(results) == 1
        assert results[0].snippet == "Build stateful agents."
        assert results[0].content == "Full page text"
        mock_client_cls.assert_called_once_with(api_key="tvly-x")
        kwargs = mock_client_cls.return_value.search.call_args.kwargs
        assert kwargs["max_results"] == 3
        assert kwargs["time_range"] == "month"
        assert kwargs["include_raw_content"] is True

    @pytest.mark.asyncio
    @patch("web_scout.web.tavily_search.AsyncTavilyClient")
    async def test_content_omitted_unless_requested(self, mock_client_cls, monkeypatch):
        monkeypatch.setenv("TAVILY_API_KEY", "tvly-x")
        mock_client_cls.return_value.search = AsyncMock(return_value={
            "results": [{"title": "t", "url": "https://x.test", "content": "s", "raw_content": "r"}]
        })
        results = await TavilySearch().search("q")
        assert results[0].content is None

    @pytest.mark.asyncio
    @patch("web_scout.web.tavily_search.AsyncTavilyClient")
    async def test_api_failure_raises(self, mock_client_cls, monkeypatch):
        monkeypatch.setenv("TAVILY_API_KEY", "tvly-x")
        mock_client_cls.return_value.search = AsyncMock(side_effect=RuntimeError("quota"))
        with pytest.raises(SearchFailed, match="quota"):
            await TavilySearch().search("q")


class TestFetchOnly:
    @pytest.mark.asyncio
    async def test_always_available_and_empty(self):
        provider = FetchOnly()
        assert provider.check_availability() is True
        assert await provider.search("anything") == []
