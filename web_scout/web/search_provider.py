"""Abstract search interface and shared SearchResult dataclass."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

FRESHNESS_VALUES = ("pd", "pw", "pm", "py")


@dataclass(frozen=True)
class SearchResult:
    """A single web search result."""

    title: str
    url: str
    snippet: str
    content: Optional[str] = None  # pre-fetched page text, when the provider has it


@dataclass
class SearchOptions:
    """Per-call search knobs.  Providers ignore what they cannot honour."""

    count: int = 5
    freshness: Optional[str] = None  # "pd" | "pw" | "pm" | "py"
    country: Optional[str] = None  # two-letter code
    include_content: bool = False


class SearchProvider(ABC):
    """Abstract interface -- swap implementations without touching callers.

    ``check_availability`` must be cheap and side-effect free; the registry
    calls it fresh every time because credentials can appear or vanish
    between calls.  ``search`` is the only method allowed to do network I/O.
    """

    name: str = ""
    description: str = ""

    @abstractmethod
    def check_availability(self) -> bool:
        """Return True when the provider can currently serve searches."""
        ...

    @abstractmethod
    async def search(
        self, query: str, options: Optional[SearchOptions] = None
    ) -> List[SearchResult]:
        """Return a ranked list of search results for *query*."""
        ...

    def describe(self) -> str:
        return f"{self.name}: {self.description}"


def clamp_count(options: Optional[SearchOptions], default: int, maximum: int) -> int:
    """Resolve the requested result count into ``1..maximum``."""
    count = options.count if options and options.count else default
    return max(1, min(int(count), maximum))
