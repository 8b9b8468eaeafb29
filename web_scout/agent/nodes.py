"""Node implementations for the research graph.

Each function receives the full ``ResearchState`` and returns a *partial*
dict with only the keys it updates.  Collaborators are read from
``config["configurable"]``; missing ones fall back to process-wide
singletons.
"""

import time
from typing import Any, Dict, Optional

from langchain_core.runnables import RunnableConfig

from web_scout.agent.state import ResearchState
from web_scout.errors import (
    InvalidTask,
    NoSearchProvider,
    ScoutCancelled,
    TaskUnderspecified,
    WorkerExitedNonZero,
    WorkerSpawnFailed,
)
from web_scout.scout.instructions import (
    build_system_prompt,
    build_task_text,
    resolve_scout_model,
)
from web_scout.scout.models import RunStatus
from web_scout.scout.runner import ScoutRunner
from web_scout.security.guardrails import validate_task
from web_scout.utils.config import settings
from web_scout.utils.logger import get_logger, log_research_run
from web_scout.web.fetch_only import FETCH_ONLY
from web_scout.web.registry import ProviderRegistry

log = get_logger(__name__)

# Shared singletons (created on first use so import-time side effects are
# avoided).
_registry: ProviderRegistry | None = None
_runner: ScoutRunner | None = None


def get_registry() -> ProviderRegistry:
    global _registry
    if _registry is None:
        _registry = ProviderRegistry()
    return _registry


def get_runner() -> ScoutRunner:
    global _runner
    if _runner is None:
        _runner = ScoutRunner()
    return _runner


def _configurable(config: Optional[RunnableConfig]) -> Dict[str, Any]:
    return (config or {}).get("configurable", {}) or {}


# ---- Nodes ---------------------------------------------------------------


def validate_task_node(state: ResearchState) -> Dict[str, Any]:
    """Reject bad input before anything is resolved or spawned."""
    task = state["task"]
    ok, reason = validate_task(task.task_description, task.urls, task.query)
    if not ok:
        return {"error": InvalidTask(reason or "Invalid task.")}
    if not task.has_urls and not task.has_query:
        return {"error": TaskUnderspecified("Provide at least `urls` or `query` (or both).")}

    model = resolve_scout_model(task.model_override, state.get("active_provider"))
    log.info("Research task accepted (model=%s)", model)
    return {"model": model}


def route_on_error(state: ResearchState) -> str:
    """Conditional edge: 'fail' once any node has recorded an error."""
    return "fail" if state.get("error") else "continue"


def resolve_search_node(state: ResearchState, config: RunnableConfig) -> Dict[str, Any]:
    """Decide whether the scout gets a search tool, and which provider."""
    task = state["task"]
    if not task.has_query:
        return {"search_available": False, "provider_name": None}

    registry = _configurable(config).get("registry") or get_registry()
    provider = None
    if task.provider_name:
        candidate = registry.get(task.provider_name)
        if candidate is not None and candidate.check_availability():
            provider = candidate
    else:
        candidate = registry.get_default()
        if candidate.name != FETCH_ONLY:
            provider = candidate

    if provider is None:
        return {
            "search_available": False,
            "provider_name": None,
            "error": NoSearchProvider(
                f'No search provider available for query "{task.query}". '
                "Either provide explicit URLs, or configure a search provider "
                "(e.g., set BRAVE_API_KEY or TAVILY_API_KEY)."
            ),
        }
    log.info("Scout will search via '%s'", provider.name)
    return {"search_available": True, "provider_name": provider.name}


def build_instructions_node(state: ResearchState, config: RunnableConfig) -> Dict[str, Any]:
    """Render the scout's system prompt and task text."""
    task = state["task"]
    system_prompt = build_system_prompt(
        task,
        search_available=state.get("search_available", False),
        provider_name=state.get("provider_name"),
    )

    on_update = _configurable(config).get("on_update")
    if on_update is not None:
        parts = []
        if task.has_query:
            parts.append(f'"{task.query}"')
        if task.has_urls:
            parts.append(f"{len(task.urls)} URL(s)")
        on_update(f"Researching {' + '.join(parts)} with {state['model']}...")

    return {"system_prompt": system_prompt, "task_text": build_task_text(task)}


async def run_scout_node(state: ResearchState, config: RunnableConfig) -> Dict[str, Any]:
    """Spawn the scout and translate its outcome into state."""
    conf = _configurable(config)
    runner = conf.get("runner") or get_runner()
    extension_path = conf.get("extension_path") or settings.scout_extension_path

    try:
        result = await runner.run(
            cwd=state.get("cwd") or ".",
            task_text=state["task_text"],
            system_prompt=state["system_prompt"],
            model=state["model"],
            extension_path=extension_path,
            cancel_event=conf.get("cancel_event"),
            on_update=conf.get("on_update"),
        )
    except WorkerSpawnFailed as exc:
        log.error("Scout spawn failed: %s", exc)
        return {"run_result": None, "error": exc}

    error = None
    if result.status == RunStatus.CANCELLED:
        error = ScoutCancelled("Research cancelled.", context={"exit_code": result.exit_code})
    elif result.status == RunStatus.FAILED:
        error = WorkerExitedNonZero(
            f"Research failed: {result.failure_text()}",
            context={"exit_code": result.exit_code},
        )
    return {"run_result": result, "error": error}


def log_run_node(state: ResearchState) -> Dict[str, Any]:
    """Log the run and stamp end_time."""
    end = time.time()
    elapsed_ms = (end - state.get("start_time", end)) * 1000
    task = state["task"]
    result = state.get("run_result")
    error = state.get("error")
    status = error.kind if error is not None else "done"

    log_research_run(
        task=task.task_description,
        query=task.query,
        urls=list(task.urls),
        provider=state.get("provider_name"),
        model=state.get("model", ""),
        status=status,
        usage=result.usage.to_dict() if result is not None else None,
        response_time_ms=elapsed_ms,
    )
    log.info("Research done -- status=%s, time=%.0fms", status, elapsed_ms)
    return {"end_time": end}
