"""Agent module -- LangGraph research flow."""

from web_scout.agent.graph import build_graph
from web_scout.agent.state import ResearchState

__all__ = ["build_graph", "ResearchState"]
