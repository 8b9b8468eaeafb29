"""Structured logging and per-run scout accounting."""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Return a configured logger (creates handler only once per name)."""
    from web_scout.utils.config import settings

    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    effective_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    logger.setLevel(effective_level)

    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)

    # Optional file handler
    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setFormatter(logging.Formatter(fmt))
        logger.addHandler(fh)

    return logger


def log_research_run(
    task: str,
    query: Optional[str],
    urls: List[str],
    provider: Optional[str],
    model: str,
    status: str,
    usage: Optional[Dict[str, Any]],
    response_time_ms: float,
) -> None:
    """Append a single research-run record to the JSONL runs file."""
    from web_scout.utils.config import settings

    if not settings.runs_log_file:
        return

    record = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "task": task,
        "query": query,
        "urls": urls,
        "provider": provider,
        "model": model,
        "status": status,
        "usage": usage or {},
        "response_time_ms": round(response_time_ms, 1),
    }

    path = Path(settings.runs_log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(record) + "\n")
