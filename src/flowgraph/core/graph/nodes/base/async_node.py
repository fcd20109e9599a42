"""Asynchronous node variants.

AsyncNode mirrors Node with awaitable phases (prep_async, exec_async,
exec_fallback_async, post_async) and a non-blocking wait between retries.
AsyncBatchNode runs items one after another; AsyncParallelBatchNode runs
them concurrently and still returns results in input order.
"""

import asyncio
from typing import Any, Iterable, List, Optional
from pydantic import Field

from flowgraph.core.logging import get_logger, LogComponent
from flowgraph.core.graph.diagnostics import DiagnosticKind
from flowgraph.core.graph.state import NodeRun, SharedStore, bind_run
from flowgraph.core.graph.nodes.base.node import Node, BatchNode

logger = get_logger(LogComponent.NODES)


class AsyncNode(Node):
    """Node whose lifecycle phases are coroutines."""

    async def prep_async(self, shared: SharedStore) -> Any:
        pass

    async def exec_async(self, prep_res: Any) -> Any:
        pass

    async def exec_fallback_async(self, prep_res: Any, exc: Exception) -> Any:
        raise exc

    async def post_async(self, shared: SharedStore, prep_res: Any, exec_res: Any) -> Optional[str]:
        pass

    async def _exec(self, prep_res: Any, run: NodeRun) -> Any:
        for attempt in range(self.max_retries):
            run.attempt = attempt
            try:
                return await self.exec_async(prep_res)
            except Exception as e:
                if attempt == self.max_retries - 1:
                    logger.info(f"Node {self.label}: retries exhausted, running fallback")
                    return await self.exec_fallback_async(prep_res, e)
                logger.debug(
                    f"Node {self.label}: attempt {attempt + 1}/{self.max_retries} failed: {e}"
                )
                if self.wait > 0:
                    await asyncio.sleep(self.wait)

    async def _run_async(self, shared: SharedStore, run: NodeRun) -> Optional[str]:
        prep_res = await self.prep_async(shared)
        exec_res = await self._exec(prep_res, run)
        return await self.post_async(shared, prep_res, exec_res)

    async def _step_async(self, shared: SharedStore, run: NodeRun) -> Optional[str]:
        with bind_run(run):
            return await self._run_async(shared, run)

    async def run_async(self, shared: SharedStore) -> Optional[str]:
        """Run this node's lifecycle once, without following successors."""
        if self.successors:
            self._diagnose(
                DiagnosticKind.IGNORED_SUCCESSORS,
                "Node won't run successors. Use AsyncFlow.",
            )
        return await self._step_async(shared, self._new_run())

    def _run(self, shared: SharedStore, run: NodeRun) -> Optional[str]:
        raise RuntimeError("Use run_async.")


class AsyncBatchNode(AsyncNode, BatchNode):
    """Async batch node that awaits each item before starting the next."""

    async def _exec(self, items: Optional[Iterable[Any]], run: NodeRun) -> List[Any]:
        return [await super(AsyncBatchNode, self)._exec(item, run) for item in (items or [])]


class AsyncParallelBatchNode(AsyncNode, BatchNode):
    """
    Async batch node that runs every item concurrently.

    Each item gets its own run, so ``cur_retry`` and retries are per item.
    A failing item does not cancel its siblings.

    Attributes:
        max_concurrent: Optional cap on the number of items in flight
    """
    max_concurrent: Optional[int] = Field(default=None, ge=1)

    async def _exec(self, items: Optional[Iterable[Any]], run: NodeRun) -> List[Any]:
        semaphore = asyncio.Semaphore(self.max_concurrent) if self.max_concurrent else None

        async def exec_item(item: Any) -> Any:
            item_run = run.fork()
            with bind_run(item_run):
                if semaphore is None:
                    return await super(AsyncParallelBatchNode, self)._exec(item, item_run)
                async with semaphore:
                    return await super(AsyncParallelBatchNode, self)._exec(item, item_run)

        return list(await asyncio.gather(*(exec_item(item) for item in (items or []))))
