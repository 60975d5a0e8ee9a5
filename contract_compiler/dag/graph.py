# contract_compiler/dag/graph.py
"""Typed contract graph: a mutable builder and the immutable snapshot it yields.

All nodes and edges are produced once (clause parsing + fact extraction),
assembled with :class:`GraphBuilder` and frozen by :meth:`GraphBuilder.build`.
Reasoning, serialization and reporting only ever see the read-only
:class:`Graph`.

Traversals use explicit stacks; the visit order is the same as the
straightforward recursive depth-first formulation.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from .edge import Edge
from .nodes import Node, node_from_hash


class GraphError(ValueError):
    """Base class for graph construction failures."""


class DuplicateNodeError(GraphError):
    def __init__(self, node_id: str):
        super().__init__(f"Duplicate node id: {node_id}")
        self.node_id = node_id


class UnknownNodeError(GraphError):
    def __init__(self, node_id: str):
        super().__init__(f"Unknown node: {node_id}")
        self.node_id = node_id


class GraphBuilder:
    """Build phase of the graph lifecycle."""

    def __init__(self) -> None:
        self._index: Dict[str, Node] = {}
        self._edges: List[Edge] = []

    @property
    def node_count(self) -> int:
        return len(self._index)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def add_node(self, node: Node) -> Node:
        if node.id in self._index:
            raise DuplicateNodeError(node.id)
        self._index[node.id] = node
        return node

    def add_nodes(self, nodes: Iterable[Node]) -> None:
        for node in nodes:
            self.add_node(node)

    def find_node(self, node_id: str) -> Optional[Node]:
        return self._index.get(node_id)

    def add_edge(self, from_id: str, to_id: str, type: str) -> Edge:
        if from_id not in self._index:
            raise UnknownNodeError(from_id)
        if to_id not in self._index:
            raise UnknownNodeError(to_id)
        edge = Edge(from_id=from_id, to_id=to_id, type=type)
        self._edges.append(edge)
        return edge

    def add_edges(self, edges: Iterable[Edge]) -> None:
        for e in edges:
            self.add_edge(e.from_id, e.to_id, e.type)

    def build(self) -> "Graph":
        logger.debug(
            "graph built: {} nodes, {} edges", len(self._index), len(self._edges)
        )
        return Graph(list(self._index.values()), list(self._edges))


class Graph:
    """Immutable directed multigraph over contract nodes.

    Not guaranteed acyclic: cycles are a detectable condition
    (:meth:`cycle_detect`), not an insertion-time violation.
    """

    def __init__(self, nodes: Sequence[Node], edges: Sequence[Edge]):
        self._nodes: Tuple[Node, ...] = tuple(nodes)
        self._edges: Tuple[Edge, ...] = tuple(edges)
        index: Dict[str, Node] = {}
        for n in self._nodes:
            if n.id in index:
                raise DuplicateNodeError(n.id)
            index[n.id] = n
        self._index: Mapping[str, Node] = MappingProxyType(index)

        out: Dict[str, List[Edge]] = {n.id: [] for n in self._nodes}
        inc: Dict[str, List[Edge]] = {n.id: [] for n in self._nodes}
        for e in self._edges:
            for endpoint in (e.from_id, e.to_id):
                if endpoint not in index:
                    raise UnknownNodeError(endpoint)
            out[e.from_id].append(e)
            inc[e.to_id].append(e)
        self._out: Mapping[str, Tuple[Edge, ...]] = MappingProxyType(
            {k: tuple(v) for k, v in out.items()}
        )
        self._in: Mapping[str, Tuple[Edge, ...]] = MappingProxyType(
            {k: tuple(v) for k, v in inc.items()}
        )

    @classmethod
    def from_hash(cls, data: Mapping[str, Any]) -> "Graph":
        """Rebuild a graph from its :meth:`to_hash` projection."""
        builder = GraphBuilder()
        for raw in data.get("nodes") or []:
            builder.add_node(node_from_hash(raw))
        for raw in data.get("edges") or []:
            builder.add_edge(raw["from"], raw["to"], raw["type"])
        return builder.build()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    @property
    def nodes(self) -> Tuple[Node, ...]:
        return self._nodes

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def find_node(self, node_id: str) -> Optional[Node]:
        return self._index.get(node_id)

    def nodes_of_type(self, kind: str) -> List[Node]:
        return [n for n in self._nodes if n.type == kind]

    def outgoing(self, node_id: str) -> Tuple[Edge, ...]:
        return self._out.get(node_id, ())

    def incoming(self, node_id: str) -> Tuple[Edge, ...]:
        return self._in.get(node_id, ())

    def neighbors(self, node_id: str) -> List[Node]:
        """Direct successors over any outgoing edge, in edge order."""
        return [self._index[e.to_id] for e in self.outgoing(node_id)]

    # ------------------------------------------------------------------
    # Algorithms
    # ------------------------------------------------------------------
    def cycle_detect(self) -> List[List[str]]:
        """Return every cycle met by a DFS from each unvisited node.

        A cycle is the suffix of the current path starting at the re-entered
        node, closed by repeating that node: ``["a", "b", "a"]``. Cycles that
        share nodes are not merged.
        """
        visited: set = set()
        on_path: set = set()
        cycles: List[List[str]] = []

        for root in self._index:
            if root in visited:
                continue
            visited.add(root)
            on_path.add(root)
            path = [root]
            stack: List[Iterator[Edge]] = [iter(self.outgoing(root))]

            while stack:
                edge = next(stack[-1], None)
                if edge is None:
                    stack.pop()
                    on_path.discard(path.pop())
                    continue
                nxt = edge.to_id
                if nxt not in visited:
                    visited.add(nxt)
                    on_path.add(nxt)
                    path.append(nxt)
                    stack.append(iter(self.outgoing(nxt)))
                elif nxt in on_path:
                    start = path.index(nxt)
                    cycles.append(path[start:] + [nxt])

        return cycles

    def topological_sort(self) -> List[Node]:
        """Reverse DFS postorder over the whole graph.

        On a cyclic graph this still yields a total order, but the cyclic
        portion does not satisfy the topological property.
        """
        visited: set = set()
        finished: List[str] = []

        for root in self._index:
            if root in visited:
                continue
            visited.add(root)
            stack: List[Tuple[str, Iterator[Edge]]] = [(root, iter(self.outgoing(root)))]
            while stack:
                node_id, edges = stack[-1]
                edge = next(edges, None)
                if edge is None:
                    stack.pop()
                    finished.append(node_id)
                    continue
                if edge.to_id not in visited:
                    visited.add(edge.to_id)
                    stack.append((edge.to_id, iter(self.outgoing(edge.to_id))))

        return [self._index[i] for i in reversed(finished)]

    def iter_paths(self, from_id: str, to_id: str) -> Iterator[List[str]]:
        """Lazily yield every simple path from ``from_id`` to ``to_id``.

        Worst-case exponential in the number of branching paths; bound it with
        ``itertools.islice`` when the graph may be large.
        """
        if from_id == to_id:
            yield [from_id]
            return

        path = [from_id]
        on_path = {from_id}
        stack: List[Iterator[Edge]] = [iter(self.outgoing(from_id))]
        while stack:
            edge = next(stack[-1], None)
            if edge is None:
                stack.pop()
                on_path.discard(path.pop())
                continue
            nxt = edge.to_id
            if nxt in on_path:
                continue
            if nxt == to_id:
                yield path + [nxt]
                continue
            path.append(nxt)
            on_path.add(nxt)
            stack.append(iter(self.outgoing(nxt)))

    def find_paths(self, from_id: str, to_id: str) -> List[List[str]]:
        return list(self.iter_paths(from_id, to_id))

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_hash(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_hash() for n in self._nodes],
            "edges": [e.to_hash() for e in self._edges],
        }


__all__ = [
    "Graph",
    "GraphBuilder",
    "GraphError",
    "DuplicateNodeError",
    "UnknownNodeError",
]
