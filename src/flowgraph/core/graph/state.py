"""Run-scoped state for the graph system.

This module provides:
1. SharedStore / Params: aliases for the two data channels of a run
2. NodeRun: the per-step state (effective parameters, attempt counter)
3. bind_run / current_run: helpers that expose the active NodeRun to the
   node that owns it while its lifecycle is executing

Nodes are never cloned. Every traversal step creates a fresh NodeRun and binds
it to the current context, so parameters and attempt counters from one run
cannot leak into a concurrent or later run over the same graph.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Callable, Dict, Iterator, MutableMapping, Optional
from pydantic import BaseModel, Field

SharedStore = MutableMapping[Any, Any]
Params = Dict[str, Any]

DEFAULT_ACTION = "default"


class NodeRun(BaseModel):
    """
    State owned by a single execution of a node.

    Attributes:
        node: The node this run belongs to
        params: Effective parameters for this run (a private copy)
        attempt: Zero-based index of the current exec attempt
        on_diagnostic: Hook inherited from the enclosing flow, if any
    """
    node: Any = Field(..., repr=False, exclude=True)
    params: Params = Field(default_factory=dict)
    attempt: int = Field(default=0, ge=0)
    on_diagnostic: Optional[Callable[..., None]] = Field(default=None, repr=False, exclude=True)

    def fork(self) -> "NodeRun":
        """Copy this run for an independently retried item."""
        return NodeRun(node=self.node, params=self.params, on_diagnostic=self.on_diagnostic)


_current_run: "ContextVar[Optional[NodeRun]]" = ContextVar("flowgraph_current_run", default=None)


@contextmanager
def bind_run(run: NodeRun) -> Iterator[NodeRun]:
    """Make ``run`` the active run for the duration of the block."""
    token = _current_run.set(run)
    try:
        yield run
    finally:
        _current_run.reset(token)


def current_run(node: Any) -> Optional[NodeRun]:
    """Return the active run if it belongs to ``node``."""
    run = _current_run.get()
    if run is not None and run.node is node:
        return run
    return None
