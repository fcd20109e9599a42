"""Flow Classes

This module defines the orchestrators of the graph system. A Flow is itself a
node: it owns a start node and, when run, walks the graph one node at a time,
using the action each node returns to pick the next one.

Example:
    ```python
    load = LoadData()
    summarize = Summarize()
    load >> summarize

    flow = Flow(start=load)
    shared = {}
    flow.run(shared)
    ```

Batch flows replay the whole graph once per parameter set returned by their
prep phase. Async flows await async nodes and call sync nodes inline; the
parallel batch flow runs all parameter sets concurrently over one shared store,
so per-set writes must go to disjoint keys.
"""

import asyncio
from typing import Any, Dict, List, Optional
from pydantic import Field

from flowgraph.core.logging import (
    FlowLoggingConfig,
    LogComponent,
    get_logger,
    log_verbose,
)
from flowgraph.core.graph.diagnostics import DiagnosticHook, DiagnosticKind
from flowgraph.core.graph.state import (
    DEFAULT_ACTION,
    NodeRun,
    Params,
    SharedStore,
    bind_run,
)
from flowgraph.core.graph.nodes.base.node import BaseNode

logger = get_logger(LogComponent.GRAPH)


class Flow(BaseNode):
    """Orchestrates a graph of nodes starting from ``start_node``.

    The flow's own lifecycle is prep, then a full traversal in place of exec,
    then post. By default post returns the last action produced by the
    traversal.

    A flow's ``on_diagnostic`` hook also receives the diagnostics of nested
    flows that have no hook of their own.

    Attributes:
        start_node: Node at which every traversal begins
        logging_config: Controls logging verbosity
    """
    start_node: Optional[BaseNode] = Field(default=None, repr=False)
    logging_config: FlowLoggingConfig = Field(default_factory=FlowLoggingConfig)

    def __init__(self, start: Optional[BaseNode] = None, **data):
        if start is not None:
            data["start_node"] = start
        super().__init__(**data)

    def start(self, start: BaseNode) -> BaseNode:
        """Set the start node and return it."""
        self.start_node = start
        return start

    def get_next_node(
        self,
        curr: BaseNode,
        action: Optional[str],
        inherited: Optional[DiagnosticHook] = None
    ) -> Optional[BaseNode]:
        """Resolve the successor of ``curr`` for ``action``.

        A node with no successors ends the flow silently. A node with
        successors but none matching ``action`` ends it with a diagnostic
        about ``curr``, sent to this flow's hook or else ``inherited``.
        """
        key = action or DEFAULT_ACTION
        nxt = curr.successors.get(key)
        if nxt is None and curr.successors:
            self._diagnose(
                DiagnosticKind.UNMATCHED_ACTION,
                f"Flow ends: '{key}' not found in {list(curr.successors)}",
                action=str(key),
                subject=curr,
                inherited=inherited,
            )
        elif nxt is not None:
            self._log_transition(curr, key, nxt)
        return nxt

    def _log_transition(self, curr: BaseNode, action: str, nxt: BaseNode) -> None:
        message = f"Transitioning {curr.label} --[{action}]--> {nxt.label}"
        if self.logging_config.show_node_transitions:
            logger.info(message)
        else:
            log_verbose(logger, message)

    def _start_traversal(self, run: NodeRun, params: Optional[Params]) -> Params:
        if self.start_node is None:
            raise ValueError(f"Flow {self.label} has no start node")
        log_verbose(logger, f"Flow {self.label}: starting at node {self.start_node.label}")
        return {**run.params, **(params or {})}

    def _orch(self, shared: SharedStore, run: NodeRun, params: Optional[Params] = None) -> Optional[str]:
        p = self._start_traversal(run, params)
        hook = self.on_diagnostic or run.on_diagnostic
        curr, last_action = self.start_node, None
        while curr is not None:
            last_action = curr._step(shared, NodeRun(node=curr, params=p, on_diagnostic=hook))
            curr = self.get_next_node(curr, last_action, hook)
        log_verbose(logger, f"Flow {self.label}: finished with action {last_action!r}")
        return last_action

    def _run(self, shared: SharedStore, run: NodeRun) -> Optional[str]:
        prep_res = self.prep(shared)
        orch_res = self._orch(shared, run)
        return self.post(shared, prep_res, orch_res)

    def run(self, shared: SharedStore) -> Optional[str]:
        """Run the flow over ``shared`` and return its final action."""
        if self.successors:
            self._diagnose(
                DiagnosticKind.IGNORED_SUCCESSORS,
                "Flow won't run its successors. Nest it in another Flow.",
            )
        return self._step(shared, self._new_run())

    def post(self, shared: SharedStore, prep_res: Any, exec_res: Any) -> Optional[str]:
        return exec_res


class BatchFlow(Flow):
    """Flow that replays its graph once per parameter set returned by prep.

    Each traversal sees the flow's parameters merged with the current
    parameter set (the set wins on conflicts). post receives the list of
    parameter sets and ``None`` as exec result.
    """

    def _run(self, shared: SharedStore, run: NodeRun) -> Optional[str]:
        batch_params: List[Dict[str, Any]] = self.prep(shared) or []
        for bp in batch_params:
            self._orch(shared, run, bp)
        return self.post(shared, batch_params, None)


class AsyncFlow(Flow):
    """Flow with awaitable phases that can mix sync and async nodes.

    Traversal stays sequential: each step needs the previous action.
    """

    async def prep_async(self, shared: SharedStore) -> Any:
        pass

    async def post_async(self, shared: SharedStore, prep_res: Any, exec_res: Any) -> Optional[str]:
        return exec_res

    async def _orch_async(
        self,
        shared: SharedStore,
        run: NodeRun,
        params: Optional[Params] = None
    ) -> Optional[str]:
        p = self._start_traversal(run, params)
        hook = self.on_diagnostic or run.on_diagnostic
        curr, last_action = self.start_node, None
        while curr is not None:
            last_action = await curr._step_async(shared, NodeRun(node=curr, params=p, on_diagnostic=hook))
            curr = self.get_next_node(curr, last_action, hook)
        log_verbose(logger, f"Flow {self.label}: finished with action {last_action!r}")
        return last_action

    async def _run_async(self, shared: SharedStore, run: NodeRun) -> Optional[str]:
        prep_res = await self.prep_async(shared)
        orch_res = await self._orch_async(shared, run)
        return await self.post_async(shared, prep_res, orch_res)

    async def _step_async(self, shared: SharedStore, run: NodeRun) -> Optional[str]:
        with bind_run(run):
            return await self._run_async(shared, run)

    async def run_async(self, shared: SharedStore) -> Optional[str]:
        """Run the flow over ``shared`` and return its final action."""
        if self.successors:
            self._diagnose(
                DiagnosticKind.IGNORED_SUCCESSORS,
                "Flow won't run its successors. Nest it in another AsyncFlow.",
            )
        return await self._step_async(shared, self._new_run())

    def _run(self, shared: SharedStore, run: NodeRun) -> Optional[str]:
        raise RuntimeError("Use run_async.")


class AsyncBatchFlow(AsyncFlow, BatchFlow):
    """Async batch flow; parameter sets are traversed one at a time, in order."""

    async def _run_async(self, shared: SharedStore, run: NodeRun) -> Optional[str]:
        batch_params: List[Dict[str, Any]] = await self.prep_async(shared) or []
        for bp in batch_params:
            await self._orch_async(shared, run, bp)
        return await self.post_async(shared, batch_params, None)


class AsyncParallelBatchFlow(AsyncFlow, BatchFlow):
    """
    Async batch flow that traverses all parameter sets concurrently.

    The engine does not lock the shared store: concurrent traversals must
    write to disjoint keys.

    Attributes:
        max_concurrent: Optional cap on the number of traversals in flight
    """
    max_concurrent: Optional[int] = Field(default=None, ge=1)

    async def _run_async(self, shared: SharedStore, run: NodeRun) -> Optional[str]:
        batch_params: List[Dict[str, Any]] = await self.prep_async(shared) or []
        semaphore = asyncio.Semaphore(self.max_concurrent) if self.max_concurrent else None

        async def orch(bp: Dict[str, Any]) -> Optional[str]:
            if semaphore is None:
                return await self._orch_async(shared, run, bp)
            async with semaphore:
                return await self._orch_async(shared, run, bp)

        await asyncio.gather(*(orch(bp) for bp in batch_params))
        return await self.post_async(shared, batch_params, None)
