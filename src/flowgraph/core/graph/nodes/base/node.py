"""Base node classes for the graph system.

This module defines the Node abstraction for the flow framework. A Node represents
an individual unit of work (e.g., an LLM call, a search, a file read) that can be
executed on its own or as a step inside a Flow. Nodes are validated via Pydantic.

Every node runs a three phase lifecycle:
    - prep(shared): read what the node needs from the shared store
    - exec(prep_res): compute, without touching the shared store
    - post(shared, prep_res, exec_res): write results back and return an action

Typical Usage:
    - Create a subclass of Node
    - Override prep / exec / post
    - Wire transitions with ``a >> b`` or ``a - "action" >> b``
"""

import time
from typing import Any, Dict, Optional, Iterable, List
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from flowgraph.core.logging import get_logger, LogComponent
from flowgraph.core.graph.diagnostics import (
    Diagnostic,
    DiagnosticHook,
    DiagnosticKind,
    log_diagnostic,
)
from flowgraph.core.graph.state import (
    DEFAULT_ACTION,
    NodeRun,
    Params,
    SharedStore,
    bind_run,
    current_run,
)

logger = get_logger(LogComponent.NODES)


class BaseNode(BaseModel):
    """
    Abstract base for everything that can be a step in a flow.

    Attributes:
        id: Optional identifier used in logs and diagnostics
        successors: Mapping of action labels to the next node
        on_diagnostic: Optional hook receiving non-fatal diagnostics
    """
    id: Optional[str] = Field(default=None, description="Identifier for this node")
    successors: Dict[str, "BaseNode"] = Field(default_factory=dict, repr=False)
    on_diagnostic: Optional[DiagnosticHook] = Field(default=None, repr=False, exclude=True)

    _params: Params = PrivateAttr(default_factory=dict)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    # Graphs may be cyclic, so nodes compare by identity.
    __eq__ = object.__eq__
    __hash__ = object.__hash__

    @property
    def label(self) -> str:
        return self.id or type(self).__name__

    @property
    def params(self) -> Params:
        """Parameters of the active run, or those set with set_params()."""
        run = current_run(self)
        return run.params if run is not None else self._params

    def set_params(self, params: Params) -> None:
        self._params = dict(params)

    def next(self, node: "BaseNode", action: str = DEFAULT_ACTION) -> "BaseNode":
        """Add a transition to another node and return that node."""
        if not isinstance(action, str):
            raise TypeError(f"Action must be a string, got {type(action).__name__}")
        if action in self.successors:
            self._diagnose(
                DiagnosticKind.OVERWRITTEN_SUCCESSOR,
                f"Overwriting successor for action '{action}'",
                action=action,
            )
        self.successors[action] = node
        return node

    def prep(self, shared: SharedStore) -> Any:
        pass

    def exec(self, prep_res: Any) -> Any:
        pass

    def post(self, shared: SharedStore, prep_res: Any, exec_res: Any) -> Optional[str]:
        pass

    def _exec(self, prep_res: Any, run: NodeRun) -> Any:
        return self.exec(prep_res)

    def _run(self, shared: SharedStore, run: NodeRun) -> Optional[str]:
        prep_res = self.prep(shared)
        exec_res = self._exec(prep_res, run)
        return self.post(shared, prep_res, exec_res)

    def _step(self, shared: SharedStore, run: NodeRun) -> Optional[str]:
        """Run one lifecycle with ``run`` bound as the active run."""
        with bind_run(run):
            return self._run(shared, run)

    async def _step_async(self, shared: SharedStore, run: NodeRun) -> Optional[str]:
        # Synchronous nodes run inline inside async flows.
        return self._step(shared, run)

    def _new_run(self) -> NodeRun:
        return NodeRun(node=self, params=self._params)

    def run(self, shared: SharedStore) -> Optional[str]:
        """Run this node's lifecycle once, without following successors."""
        if self.successors:
            self._diagnose(
                DiagnosticKind.IGNORED_SUCCESSORS,
                "Node won't run successors. Use Flow.",
            )
        return self._step(shared, self._new_run())

    def _diagnose(
        self,
        kind: DiagnosticKind,
        message: str,
        action: Optional[str] = None,
        subject: Optional["BaseNode"] = None,
        inherited: Optional[DiagnosticHook] = None
    ) -> None:
        """Report a diagnostic about ``subject`` (defaults to this node).

        The hook is this node's own, then ``inherited``, then log_diagnostic.
        """
        subject = subject if subject is not None else self
        diagnostic = Diagnostic(
            kind=kind,
            message=message,
            node=subject.label,
            action=action,
            registered_actions=list(subject.successors),
        )
        (self.on_diagnostic or inherited or log_diagnostic)(diagnostic)

    def __rshift__(self, other: "BaseNode") -> "BaseNode":
        return self.next(other)

    def __sub__(self, action: str) -> "_ConditionalTransition":
        if isinstance(action, str):
            return _ConditionalTransition(self, action)
        raise TypeError("Action must be a string")


class _ConditionalTransition:
    def __init__(self, src: BaseNode, action: str):
        self.src, self.action = src, action

    def __rshift__(self, tgt: BaseNode) -> BaseNode:
        return self.src.next(tgt, self.action)


class Node(BaseNode):
    """
    Node with retry and fallback around exec.

    exec is attempted up to ``max_retries`` times, sleeping ``wait`` seconds
    between attempts. When the last attempt fails, exec_fallback receives the
    prep result and the exception; its return value replaces the exec result.

    Attributes:
        max_retries: Maximum number of exec attempts (1 means no retry)
        wait: Seconds to wait between attempts
    """
    max_retries: int = Field(default=1, ge=1)
    wait: float = Field(default=0, ge=0)

    @property
    def cur_retry(self) -> int:
        """Zero-based index of the exec attempt in progress."""
        run = current_run(self)
        return run.attempt if run is not None else 0

    def exec_fallback(self, prep_res: Any, exc: Exception) -> Any:
        raise exc

    def _exec(self, prep_res: Any, run: NodeRun) -> Any:
        for attempt in range(self.max_retries):
            run.attempt = attempt
            try:
                return self.exec(prep_res)
            except Exception as e:
                if attempt == self.max_retries - 1:
                    logger.info(f"Node {self.label}: retries exhausted, running fallback")
                    return self.exec_fallback(prep_res, e)
                logger.debug(
                    f"Node {self.label}: attempt {attempt + 1}/{self.max_retries} failed: {e}"
                )
                if self.wait > 0:
                    time.sleep(self.wait)


class BatchNode(Node):
    """Node whose exec runs once per item returned by prep.

    post receives the list of per-item results, in input order. Each item is
    retried and falls back on its own.
    """

    def _exec(self, items: Optional[Iterable[Any]], run: NodeRun) -> List[Any]:
        return [super(BatchNode, self)._exec(item, run) for item in (items or [])]


def chain(first: BaseNode, *rest: BaseNode) -> BaseNode:
    """Connect a sequence of nodes with default transitions.

    Returns:
        The first node, ready to be used as a flow's start node
    """
    current = first
    for node in rest:
        current = current.next(node)
    return first


def branch(node: BaseNode, action: str, target: BaseNode) -> BaseNode:
    """Wire ``node`` to ``target`` under ``action`` and return ``node``."""
    node.next(target, action)
    return node
