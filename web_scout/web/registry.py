"""Search provider registry.

A name -> provider map shared across the process.  Writes take a lock and
swap in a fresh dict; reads grab the current dict and never block, so an
in-flight ``get_default()`` always sees a consistent snapshot.
"""

import inspect
import threading
from typing import Any, Dict, List, Optional

from web_scout.errors import (
    NoSearchProvider,
    ProviderUnavailable,
    SearchFailed,
    UnknownProvider,
    WebScoutError,
)
from web_scout.events import REGISTER_PROVIDER, EventBus
from web_scout.utils.logger import get_logger
from web_scout.web.brave_search import BraveSearch
from web_scout.web.fetch_only import FETCH_ONLY, FetchOnly
from web_scout.web.search_provider import SearchOptions, SearchProvider, SearchResult
from web_scout.web.tavily_search import TavilySearch

log = get_logger(__name__)


def is_provider(obj: Any) -> bool:
    """Duck-type check for objects registered from files or events."""
    return (
        isinstance(getattr(obj, "name", None), str)
        and bool(obj.name)
        and callable(getattr(obj, "search", None))
        and callable(getattr(obj, "check_availability", None))
    )


async def run_search(
    provider: SearchProvider, query: str, options: Optional[SearchOptions] = None
) -> List[SearchResult]:
    """Call ``provider.search``; plain (non-async) providers are accepted too.

    Raises:
        SearchFailed: for any failure inside the provider.
    """
    try:
        result = provider.search(query, options)
        if inspect.isawaitable(result):
            result = await result
        return list(result)
    except WebScoutError:
        raise
    except Exception as exc:
        log.warning("Search provider '%s' failed: %s", provider.name, exc)
        raise SearchFailed(f"{type(exc).__name__}: {exc}", cause=exc) from exc


class ProviderRegistry:
    """Holds named search backends and resolves a default.

    Always contains the ``fetch-only`` fallback, so ``get_default()`` never
    fails.  Built-ins are registered in order: brave, tavily, fetch-only.
    """

    def __init__(self, include_defaults: bool = True):
        self._lock = threading.Lock()
        self._providers: Dict[str, SearchProvider] = {}
        if include_defaults:
            self.register(BraveSearch())
            self.register(TavilySearch())
        self.register(FetchOnly())

    # -- Mutation -----------------------------------------------------------

    def register(self, provider: SearchProvider) -> None:
        """Upsert by name.  An existing entry is replaced silently."""
        if not is_provider(provider):
            raise TypeError(f"Not a search provider: {provider!r}")
        with self._lock:
            updated = dict(self._providers)
            updated[provider.name] = provider
            self._providers = updated
        log.debug("Registered search provider '%s'", provider.name)

    def unregister(self, name: str) -> None:
        if name == FETCH_ONLY:
            log.warning("Refusing to unregister the '%s' fallback", FETCH_ONLY)
            return
        with self._lock:
            if name not in self._providers:
                return
            updated = dict(self._providers)
            del updated[name]
            self._providers = updated

    def attach(self, bus: EventBus) -> None:
        """Accept providers announced on *bus*."""
        bus.subscribe(REGISTER_PROVIDER, self._on_register_event)

    def _on_register_event(self, provider: Any) -> None:
        if isinstance(provider, dict):
            provider = provider.get("provider")
        if not is_provider(provider):
            log.warning("Ignoring malformed provider registration: %r", provider)
            return
        self.register(provider)

    # -- Queries ------------------------------------------------------------

    def get(self, name: str) -> Optional[SearchProvider]:
        return self._providers.get(name)

    def get_all(self) -> List[SearchProvider]:
        """All registered providers regardless of availability."""
        return list(self._providers.values())

    def get_available(self) -> List[SearchProvider]:
        """Providers whose ``check_availability()`` is true right now."""
        return [p for p in self.get_all() if p.check_availability()]

    def get_default(self) -> SearchProvider:
        """First available real search engine, else the fetch-only fallback."""
        snapshot = self._providers
        for provider in snapshot.values():
            if provider.name != FETCH_ONLY and provider.check_availability():
                return provider
        return snapshot[FETCH_ONLY]

    def resolve(self, name: Optional[str] = None) -> SearchProvider:
        """Pick the provider that should answer a real search.

        Raises:
            UnknownProvider: *name* is not registered.
            ProviderUnavailable: *name* is registered but unavailable.
            NoSearchProvider: no name given and only the fallback is available.
        """
        if name:
            provider = self.get(name)
            if provider is None:
                available = ", ".join(p.name for p in self.get_available())
                raise UnknownProvider(
                    f'Unknown provider "{name}". Available: {available}',
                    context={"available": available},
                )
            if not provider.check_availability():
                raise ProviderUnavailable(
                    f'Provider "{name}" is not available. '
                    "Check its configuration (API key, etc.).",
                    context={"provider": name},
                )
            return provider

        provider = self.get_default()
        if provider.name == FETCH_ONLY:
            raise NoSearchProvider("No search provider available.")
        return provider

    def describe(self) -> str:
        """List available providers as text for tool descriptions."""
        available = self.get_available()
        if not available:
            return "No search providers available."
        lines = []
        for p in available:
            status = "(fallback)" if p.name == FETCH_ONLY else "✓"
            lines.append(f"{status} {p.name}: {p.description}")
        return "\n".join(lines)
