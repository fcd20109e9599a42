"""Tests for run-scoped state.

This module tests:
- NodeRun initialization and forking
- Binding a run to the current context
- Parameter copies between runs
"""

import asyncio
import pytest
from pydantic import ValidationError

from flowgraph.core.graph import Node
from flowgraph.core.graph.state import NodeRun, bind_run, current_run


@pytest.fixture
def node() -> Node:
    """Fixture providing a plain node."""
    return Node(id="owner")


class TestNodeRun:
    """Test suite for NodeRun."""

    def test_run_init(self, node: Node):
        """Test basic run initialization."""
        run = NodeRun(node=node)
        assert run.node is node
        assert run.params == {}
        assert run.attempt == 0

    def test_params_are_copied(self, node: Node):
        """Test a run never shares the caller's parameter dict."""
        params = {"id": 1}
        run = NodeRun(node=node, params=params)
        run.params["id"] = 2
        assert params == {"id": 1}

    def test_negative_attempt_rejected(self, node: Node):
        """Test the attempt counter cannot be negative."""
        with pytest.raises(ValidationError):
            NodeRun(node=node, attempt=-1)

    def test_fork(self, node: Node):
        """Test fork keeps params and resets the attempt counter."""
        run = NodeRun(node=node, params={"id": 1}, attempt=3)
        forked = run.fork()
        assert forked is not run
        assert forked.node is node
        assert forked.params == {"id": 1}
        assert forked.attempt == 0

    def test_fork_keeps_hook(self, node: Node):
        """Test fork carries the inherited diagnostic hook."""
        seen = []
        forked = NodeRun(node=node, on_diagnostic=seen.append).fork()
        assert forked.on_diagnostic == seen.append

    def test_repr_hides_node(self, node: Node):
        """Test the owning node is left out of the repr."""
        assert "owner" not in repr(NodeRun(node=node))


class TestBinding:
    """Test suite for bind_run and current_run."""

    def test_bind_and_reset(self, node: Node):
        """Test a bound run is only visible inside the block."""
        run = NodeRun(node=node, params={"id": 1})
        assert current_run(node) is None
        with bind_run(run):
            assert current_run(node) is run
            assert node.params == {"id": 1}
        assert current_run(node) is None

    def test_other_node_not_affected(self, node: Node):
        """Test a run only belongs to its own node."""
        other = Node()
        other.set_params({"own": True})
        with bind_run(NodeRun(node=node, params={"id": 1})):
            assert current_run(other) is None
            assert other.params == {"own": True}

    def test_nested_binding(self, node: Node):
        """Test inner bindings restore the outer run on exit."""
        outer = NodeRun(node=node, params={"level": "outer"})
        inner = NodeRun(node=node, params={"level": "inner"})
        with bind_run(outer):
            with bind_run(inner):
                assert node.params["level"] == "inner"
            assert node.params["level"] == "outer"

    def test_cur_retry_follows_run(self, node: Node):
        """Test cur_retry reads the bound run's attempt."""
        with bind_run(NodeRun(node=node, attempt=2)):
            assert node.cur_retry == 2
        assert node.cur_retry == 0

    async def test_tasks_are_isolated(self, node: Node):
        """Test concurrent tasks see their own bound runs."""
        async def read_after_bind(value: int) -> int:
            with bind_run(NodeRun(node=node, params={"value": value})):
                await asyncio.sleep(0.01 * (3 - value))
                return node.params["value"]

        assert await asyncio.gather(*(read_after_bind(v) for v in range(3))) == [0, 1, 2]
