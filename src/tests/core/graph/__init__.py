"""Test suite for the flowgraph graph engine.

This package contains tests for the node and flow system, organized into the
following structure:

1. Node Tests (nodes/)
   - Node lifecycle, retries and fallbacks
   - Batch nodes
   - Async, async batch and async parallel batch nodes

2. Flow Tests (test_base.py, test_async_flow.py)
   - Traversal and action resolution
   - Batch flows and parameter merging
   - Async and parallel batch flows

3. Run State (test_state.py)

4. Visualization (test_viz.py)
"""
