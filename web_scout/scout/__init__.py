"""Scout module -- isolated research worker, its protocol and instructions."""

from web_scout.scout.instructions import (
    SCOUT_MODELS,
    build_system_prompt,
    build_task_text,
    resolve_scout_model,
    scout_tool_names,
)
from web_scout.scout.models import RunStatus, ScoutRunResult, ScoutTask, ScoutUsage
from web_scout.scout.runner import ScoutRunner

__all__ = [
    "RunStatus",
    "SCOUT_MODELS",
    "ScoutRunResult",
    "ScoutRunner",
    "ScoutTask",
    "ScoutUsage",
    "build_system_prompt",
    "build_task_text",
    "resolve_scout_model",
    "scout_tool_names",
]
