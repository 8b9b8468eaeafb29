"""Utils module -- config, logging."""

from web_scout.utils.config import settings
from web_scout.utils.logger import get_logger

__all__ = ["settings", "get_logger"]
