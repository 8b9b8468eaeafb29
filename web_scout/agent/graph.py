"""LangGraph state machine wiring for a research request.

State flows:

  validate_task -> [route] -> resolve_search -> [route] -> build_instructions
        |                          |                              |
      (fail)                     (fail)                       run_scout
        |                          |                              |
        +-------------+------------+------------------------------+
                      |
                   log_run
                      |
                     END
"""

from langgraph.graph import END, StateGraph

from web_scout.agent.nodes import (
    build_instructions_node,
    log_run_node,
    resolve_search_node,
    route_on_error,
    run_scout_node,
    validate_task_node,
)
from web_scout.agent.state import ResearchState


def build_graph() -> StateGraph:
    """Construct and compile the research graph.  Returns a runnable."""
    g = StateGraph(ResearchState)

    # -- add nodes ----------------------------------------------------------
    g.add_node("validate_task", validate_task_node)
    g.add_node("resolve_search", resolve_search_node)
    g.add_node("build_instructions", build_instructions_node)
    g.add_node("run_scout", run_scout_node)
    g.add_node("log_run", log_run_node)

    # -- edges --------------------------------------------------------------
    g.set_entry_point("validate_task")

    g.add_conditional_edges(
        "validate_task",
        route_on_error,
        {"fail": "log_run", "continue": "resolve_search"},
    )
    g.add_conditional_edges(
        "resolve_search",
        route_on_error,
        {"fail": "log_run", "continue": "build_instructions"},
    )

    g.add_edge("build_instructions", "run_scout")
    g.add_edge("run_scout", "log_run")
    g.add_edge("log_run", END)

    return g.compile()
