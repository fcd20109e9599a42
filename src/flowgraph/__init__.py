"""flowgraph - minimal graph execution engine for LLM pipelines."""

from flowgraph.core.graph import (
    DEFAULT_ACTION,
    BaseNode,
    Node,
    BatchNode,
    AsyncNode,
    AsyncBatchNode,
    AsyncParallelBatchNode,
    Flow,
    BatchFlow,
    AsyncFlow,
    AsyncBatchFlow,
    AsyncParallelBatchFlow,
    Diagnostic,
    DiagnosticKind,
    chain,
    branch,
)
from flowgraph.core.logging import configure_logging, LogLevel, LogComponent

__all__ = [
    'DEFAULT_ACTION',
    'BaseNode',
    'Node',
    'BatchNode',
    'AsyncNode',
    'AsyncBatchNode',
    'AsyncParallelBatchNode',
    'Flow',
    'BatchFlow',
    'AsyncFlow',
    'AsyncBatchFlow',
    'AsyncParallelBatchFlow',
    'Diagnostic',
    'DiagnosticKind',
    'chain',
    'branch',
    'configure_logging',
    'LogLevel',
    'LogComponent'
]
