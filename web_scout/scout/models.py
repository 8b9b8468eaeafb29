"""Scout task and run-result models."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class RunStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class ScoutTask:
    """What the caller wants researched.

    At least one of ``urls`` or ``query`` must be non-empty; the research
    flow rejects the task before anything is spawned otherwise.
    """

    task_description: str
    urls: List[str] = field(default_factory=list)
    query: Optional[str] = None
    provider_name: Optional[str] = None
    model_override: Optional[str] = None

    @property
    def has_urls(self) -> bool:
        return bool(self.urls)

    @property
    def has_query(self) -> bool:
        return bool(self.query and self.query.strip())


@dataclass
class ScoutUsage:
    """Token, cost and turn accounting aggregated over one scout run."""

    input_tokens: int = 0
    output_tokens: int = 0
    cost_total: float = 0.0
    turn_count: int = 0
    model_used: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def summary(self, fallback_model: str = "") -> str:
        return " | ".join(
            [
                f"{self.turn_count} turns",
                f"↑{self.input_tokens} ↓{self.output_tokens}",
                f"${self.cost_total:.4f}",
                self.model_used or fallback_model,
            ]
        )


@dataclass
class ScoutRunResult:
    """Outcome of one scout process.  Owned by the call that produced it."""

    exit_code: int = 0
    final_output_text: str = ""
    usage: ScoutUsage = field(default_factory=ScoutUsage)
    stderr_text: str = ""
    status: RunStatus = RunStatus.COMPLETED

    @property
    def ok(self) -> bool:
        return self.status == RunStatus.COMPLETED

    def failure_text(self) -> str:
        """Best diagnostic for a failed run: stderr, else the last output."""
        return self.stderr_text.strip() or self.final_output_text or "(no output)"
