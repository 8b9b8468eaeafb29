"""In-process notifications for search provider registration.

Other components (provider files, host plugins) announce a provider on
``REGISTER_PROVIDER``; the registry subscribes and upserts it.  Delivery is
synchronous and in subscription order.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

from web_scout.utils.logger import get_logger

log = get_logger(__name__)

REGISTER_PROVIDER = "web-research:register-provider"

Handler = Callable[[Any], None]


class EventBus:
    """Topic -> handlers.  A failing handler never blocks the rest."""

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, topic: str, handler: Handler) -> None:
        self._handlers[topic].append(handler)

    def unsubscribe(self, topic: str, handler: Handler) -> None:
        if handler in self._handlers[topic]:
            self._handlers[topic].remove(handler)

    def emit(self, topic: str, payload: Any) -> int:
        """Deliver *payload* to every subscriber; returns how many succeeded."""
        delivered = 0
        for handler in list(self._handlers[topic]):
            try:
                handler(payload)
            except Exception:
                log.exception("Handler for %s failed", topic)
                continue
            delivered += 1
        return delivered

    def announce_provider(self, provider: Any) -> int:
        return self.emit(REGISTER_PROVIDER, provider)


_event_bus: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """Process-wide bus shared by the CLI and host integrations."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus
