"""Node package initialization.

Exposes node types and helpers for building workflows.
"""

from flowgraph.core.graph.nodes.base.node import (
    BaseNode,
    Node,
    BatchNode,
    chain,
    branch,
)
from flowgraph.core.graph.nodes.base.async_node import (
    AsyncNode,
    AsyncBatchNode,
    AsyncParallelBatchNode,
)

__all__ = [
    # Sync node types
    "BaseNode",
    "Node",
    "BatchNode",

    # Async node types
    "AsyncNode",
    "AsyncBatchNode",
    "AsyncParallelBatchNode",

    # Helpers
    "chain",
    "branch",
]
