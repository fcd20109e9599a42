"""flowgraph test suite."""
