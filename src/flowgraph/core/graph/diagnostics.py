"""Diagnostics for non-fatal wiring and traversal conditions.

Conditions such as an unmatched action are reported as Diagnostic objects
through a hook. Nodes and flows accept an ``on_diagnostic`` callback; without
one, the diagnostic is logged as a warning on the graph logger.
"""

from enum import Enum
from typing import Callable, List, Optional
from pydantic import BaseModel, Field

from flowgraph.core.logging import get_logger, LogComponent

logger = get_logger(LogComponent.GRAPH)


class DiagnosticKind(str, Enum):
    """Kinds of non-fatal conditions the engine reports."""
    UNMATCHED_ACTION = "unmatched_action"
    OVERWRITTEN_SUCCESSOR = "overwritten_successor"
    IGNORED_SUCCESSORS = "ignored_successors"


class Diagnostic(BaseModel):
    """A single reported condition."""
    kind: DiagnosticKind
    message: str
    node: str = Field(description="Label of the node the condition concerns")
    action: Optional[str] = None
    registered_actions: List[str] = Field(default_factory=list)


DiagnosticHook = Callable[[Diagnostic], None]


def log_diagnostic(diagnostic: Diagnostic) -> None:
    """Default hook: log the diagnostic as a warning."""
    logger.warning(f"[{diagnostic.node}] {diagnostic.message}")
