"""Graph visualization tools."""

from collections import deque
from typing import Deque, Dict, List, Optional

from flowgraph.core.graph.nodes.base.node import BaseNode


class GraphVisualizer:
    """Render a node graph as a Mermaid diagram.

    Only reads ``successors`` and ``start_node``; the graph is never modified.
    """

    def __init__(self, root: BaseNode):
        self.root = root

    def render_graph(self) -> str:
        """Return a ``graph LR`` description of everything reachable from root."""
        ids: Dict[int, str] = {}
        lines: List[str] = ["graph LR"]
        queue: Deque[BaseNode] = deque()

        def ref(node: BaseNode) -> str:
            if id(node) not in ids:
                ids[id(node)] = f"N{len(ids) + 1}"
                lines.append(f'    {ids[id(node)]}["{node.label}"]')
                queue.append(node)
            return ids[id(node)]

        ref(self.root)
        while queue:
            node = queue.popleft()
            src = ids[id(node)]
            start: Optional[BaseNode] = getattr(node, "start_node", None)
            if start is not None:
                lines.append(f"    {src} -. start .-> {ref(start)}")
            for action, target in node.successors.items():
                lines.append(f"    {src} -->|{action}| {ref(target)}")
        return "\n".join(lines)
