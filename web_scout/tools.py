"""Host-facing tool façade: fetch_url, web_search, web_research.

Each tool returns a ``ToolResult`` instead of raising; core errors are
mapped to ``is_error=True`` with the error's ``kind`` so the host can
branch on it.
"""

import asyncio
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from web_scout.agent.graph import build_graph
from web_scout.agent.state import ResearchState
from web_scout.errors import WebScoutError
from web_scout.events import EventBus
from web_scout.scout.models import ScoutTask
from web_scout.scout.runner import ScoutRunner
from web_scout.utils.config import settings
from web_scout.utils.logger import get_logger
from web_scout.web.discovery import discover_file_providers
from web_scout.web.fetch_only import FETCH_ONLY
from web_scout.web.fetcher import fetch_url as fetch_article
from web_scout.web.registry import ProviderRegistry, run_search
from web_scout.web.search_provider import SearchOptions

log = get_logger(__name__)

SNIPPET_PREVIEW = 200

SETUP_HINT = (
    "Set BRAVE_API_KEY or TAVILY_API_KEY, or add a provider file under "
    f"{settings.user_provider_dir} or {settings.project_provider_dir}."
)


@dataclass
class ToolResult:
    text: str
    details: Dict[str, Any] = field(default_factory=dict)
    is_error: bool = False
    error_kind: Optional[str] = None

    @classmethod
    def from_error(cls, exc: WebScoutError, text: Optional[str] = None) -> "ToolResult":
        return cls(
            text=text or exc.message,
            details=dict(exc.context),
            is_error=True,
            error_kind=exc.kind,
        )


def _default_extension_path() -> str:
    return settings.scout_extension_path or str(Path(__file__).resolve().parent)


class WebResearchTools:
    """The three web tools plus provider management, sharing one registry."""

    def __init__(
        self,
        registry: Optional[ProviderRegistry] = None,
        runner: Optional[ScoutRunner] = None,
        bus: Optional[EventBus] = None,
    ):
        self.registry = registry or ProviderRegistry()
        self.runner = runner or ScoutRunner()
        self.extension_path = _default_extension_path()
        self.active_provider: Optional[str] = None
        self.bus = bus
        self._graph = build_graph()
        if bus is not None:
            self.registry.attach(bus)

    # -- lifecycle ----------------------------------------------------------

    async def start(self, cwd: str) -> List[str]:
        """Discover file-based providers under *cwd* and register them.

        With a bus attached they are announced on it, so other subscribers
        see them too.
        """
        providers = await asyncio.to_thread(discover_file_providers, cwd)
        for provider in providers:
            if self.bus is not None:
                self.bus.announce_provider(provider)
            else:
                self.registry.register(provider)
        return [p.name for p in providers]

    def set_active_provider(self, name: Optional[str]) -> None:
        self.active_provider = name

    # -- fetch_url ----------------------------------------------------------

    async def fetch_url(
        self,
        url: str,
        selector: Optional[str] = None,
        max_length: Optional[int] = None,
        include_links: bool = False,
    ) -> ToolResult:
        try:
            article = await fetch_article(
                url, selector=selector, max_length=max_length, include_links=include_links
            )
        except WebScoutError as exc:
            return ToolResult.from_error(exc, f"Failed to fetch {url}: {exc.message}")

        header = []
        if article.title:
            header.append(f"# {article.title}")
        if article.byline:
            header.append(f"*{article.byline}*")
        header.append(f"Source: {url}")
        header.append(
            f"Extracted: {len(article.content)} chars from {article.original_length} original"
        )

        return ToolResult(
            text="\n".join(header) + "\n\n---\n\n" + article.content,
            details={
                "url": url,
                "title": article.title,
                "content_length": len(article.content),
                "original_length": article.original_length,
                "selector": selector,
            },
        )

    # -- web_search ---------------------------------------------------------

    async def web_search(
        self,
        query: str,
        provider: Optional[str] = None,
        count: Optional[int] = None,
        freshness: Optional[str] = None,
        country: Optional[str] = None,
    ) -> ToolResult:
        try:
            backend = self.registry.resolve(provider)
        except WebScoutError as exc:
            return ToolResult.from_error(exc, f"{exc.message}\n\n{SETUP_HINT}")

        options = SearchOptions(
            count=count or settings.default_search_count,
            freshness=freshness,
            country=country,
        )
        try:
            results = await run_search(backend, query, options)
        except WebScoutError as exc:
            return ToolResult.from_error(exc, f"Search failed ({backend.name}): {exc.message}")

        details = {"provider": backend.name, "query": query, "result_count": len(results)}
        if not results:
            return ToolResult(text=f'No results for "{query}" ({backend.name}).', details=details)

        lines = [f'Search results for "{query}" via {backend.name}:', ""]
        for i, r in enumerate(results, 1):
            lines.append(f"{i}. {r.title}")
            lines.append(f"   {r.url}")
            if r.snippet:
                lines.append(f"   {r.snippet}")
            if r.content:
                preview = r.content[:SNIPPET_PREVIEW]
                if len(r.content) > SNIPPET_PREVIEW:
                    preview += "..."
                lines.append(f"   Content: {preview}")
            lines.append("")
        return ToolResult(text="\n".join(lines).rstrip(), details=details)

    # -- web_research -------------------------------------------------------

    async def web_research(
        self,
        task: str,
        urls: Optional[List[str]] = None,
        query: Optional[str] = None,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        cwd: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None,
        on_update: Optional[Callable[[str], None]] = None,
    ) -> ToolResult:
        """Delegate a research task to an isolated scout process."""
        scout_task = ScoutTask(
            task_description=task,
            urls=list(urls or []),
            query=query,
            provider_name=provider,
            model_override=model,
        )
        initial_state: ResearchState = {
            "task": scout_task,
            "active_provider": self.active_provider,
            "cwd": cwd or os.getcwd(),
            "run_result": None,
            "error": None,
            "start_time": time.time(),
            "end_time": None,
        }
        final = await self._graph.ainvoke(
            initial_state,
            config={
                "configurable": {
                    "registry": self.registry,
                    "runner": self.runner,
                    "extension_path": self.extension_path,
                    "cancel_event": cancel_event,
                    "on_update": on_update,
                }
            },
        )

        error = final.get("error")
        if error is not None:
            return ToolResult.from_error(error)

        result = final["run_result"]
        model_name = final.get("model", "")
        return ToolResult(
            text=result.final_output_text or "(no output)",
            details={
                "model": model_name,
                "provider": final.get("provider_name"),
                "usage": result.usage.to_dict(),
                "usage_summary": result.usage.summary(model_name),
            },
        )

    # -- provider listing ---------------------------------------------------

    def search_providers(self) -> str:
        """All registered providers with availability and the default marked."""
        default = self.registry.get_default()
        lines = ["Search providers:", ""]
        for p in self.registry.get_all():
            available = p.check_availability()
            mark = "✓" if available else "✗"
            suffix = " (default)" if p.name == default.name else ""
            if p.name == FETCH_ONLY:
                suffix += " (fallback)"
            lines.append(f"  {mark} {p.name}{suffix}: {p.description}")
        if default.name == FETCH_ONLY:
            lines.extend(["", SETUP_HINT])
        return "\n".join(lines)
