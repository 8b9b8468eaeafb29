"""Configuration management -- reads from environment with sensible defaults."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class Settings:
    """Centralised settings read once from env vars.

    Search credentials (BRAVE_API_KEY, TAVILY_API_KEY) are deliberately not
    stored here: providers read them from the environment on every call.
    """

    # --- Fetching ----------------------------------------------------------
    fetch_timeout: float = field(
        default_factory=lambda: float(os.getenv("FETCH_TIMEOUT", "30"))
    )
    max_content_length: int = field(
        default_factory=lambda: int(os.getenv("MAX_CONTENT_LENGTH", "15000"))
    )
    fetch_user_agent: str = field(
        default_factory=lambda: os.getenv("FETCH_USER_AGENT", DEFAULT_USER_AGENT)
    )

    # --- Search ------------------------------------------------------------
    search_timeout: float = field(
        default_factory=lambda: float(os.getenv("SEARCH_TIMEOUT", "30"))
    )
    default_search_count: int = field(
        default_factory=lambda: int(os.getenv("DEFAULT_SEARCH_COUNT", "5"))
    )
    max_search_count: int = field(
        default_factory=lambda: int(os.getenv("MAX_SEARCH_COUNT", "20"))
    )
    user_provider_dir: str = field(
        default_factory=lambda: os.getenv(
            "USER_PROVIDER_DIR", os.path.join("~", ".web-scout", "search-providers")
        )
    )
    project_provider_dir: str = field(
        default_factory=lambda: os.getenv(
            "PROJECT_PROVIDER_DIR", os.path.join(".web-scout", "search-providers")
        )
    )

    # --- Scout worker ------------------------------------------------------
    scout_command: str = field(default_factory=lambda: os.getenv("SCOUT_COMMAND", "pi"))
    scout_tools: str = field(default_factory=lambda: os.getenv("SCOUT_TOOLS", "read,bash"))
    scout_extension_path: str = field(
        default_factory=lambda: os.getenv("SCOUT_EXTENSION_PATH", "")
    )
    scout_default_model: str = field(
        default_factory=lambda: os.getenv("SCOUT_DEFAULT_MODEL", "claude-haiku-4-5")
    )
    scout_grace_period: float = field(
        default_factory=lambda: float(os.getenv("SCOUT_GRACE_PERIOD", "5"))
    )

    # --- Logging -----------------------------------------------------------
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: os.getenv("LOG_FILE", "logs/web_scout.log"))
    runs_log_file: str = field(
        default_factory=lambda: os.getenv("RUNS_LOG_FILE", "logs/scout_runs.jsonl")
    )

    # --- Guardrails --------------------------------------------------------
    max_task_length: int = field(
        default_factory=lambda: int(os.getenv("MAX_TASK_LENGTH", "4000"))
    )
    max_urls: int = field(default_factory=lambda: int(os.getenv("MAX_URLS", "20")))


# Module-level singleton -- import this everywhere.
settings = Settings()
