"""Core modules for flowgraph."""

from flowgraph.core.logging import configure_logging, LogLevel, LogComponent

__all__ = [
    'configure_logging',
    'LogLevel',
    'LogComponent'
]
