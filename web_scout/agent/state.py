"""Research state schema -- the single TypedDict that flows through every node."""

from typing import Optional, TypedDict

from web_scout.errors import WebScoutError
from web_scout.scout.models import ScoutRunResult, ScoutTask


class ResearchState(TypedDict, total=False):
    """State carried across the research state machine.

    Every node receives the full state and returns a *partial* dict with only
    the keys it wants to update.  Runtime collaborators (registry, runner,
    cancel event, progress callback) travel in the run config instead.
    """

    # Input
    task: ScoutTask
    active_provider: Optional[str]  # host's model provider family
    cwd: str

    # Resolution
    model: str
    search_available: bool
    provider_name: Optional[str]

    # Instructions
    system_prompt: str
    task_text: str

    # Outcome
    run_result: Optional[ScoutRunResult]
    error: Optional[WebScoutError]

    # Observability
    start_time: float
    end_time: Optional[float]
