"""Graph package initialization.

Exposes core node and flow classes and helpers for building workflows.
"""

from flowgraph.core.graph.state import DEFAULT_ACTION, NodeRun, SharedStore, Params
from flowgraph.core.graph.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticHook,
    log_diagnostic,
)
from flowgraph.core.graph.nodes import (
    BaseNode,
    Node,
    BatchNode,
    AsyncNode,
    AsyncBatchNode,
    AsyncParallelBatchNode,
    chain,
    branch,
)
from flowgraph.core.graph.base import (
    Flow,
    BatchFlow,
    AsyncFlow,
    AsyncBatchFlow,
    AsyncParallelBatchFlow,
)
from flowgraph.core.graph.viz import GraphVisualizer

__all__ = [
    # Nodes
    "BaseNode",
    "Node",
    "BatchNode",
    "AsyncNode",
    "AsyncBatchNode",
    "AsyncParallelBatchNode",

    # Flows
    "Flow",
    "BatchFlow",
    "AsyncFlow",
    "AsyncBatchFlow",
    "AsyncParallelBatchFlow",

    # Run state and diagnostics
    "DEFAULT_ACTION",
    "NodeRun",
    "SharedStore",
    "Params",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticHook",
    "log_diagnostic",

    # Helpers
    "chain",
    "branch",
    "GraphVisualizer",
]
