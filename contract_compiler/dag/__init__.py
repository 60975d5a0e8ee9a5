"""Typed graph intermediate representation of a contract."""

from .edge import EDGE_TYPES, Edge
from .graph import DuplicateNodeError, Graph, GraphBuilder, GraphError, UnknownNodeError
from .nodes import (
    NODE_TYPES,
    ClauseNode,
    ConditionNode,
    Node,
    ObligationNode,
    RightNode,
    node_from_hash,
)

__all__ = [
    "EDGE_TYPES",
    "Edge",
    "Graph",
    "GraphBuilder",
    "GraphError",
    "DuplicateNodeError",
    "UnknownNodeError",
    "NODE_TYPES",
    "ClauseNode",
    "ObligationNode",
    "RightNode",
    "ConditionNode",
    "Node",
    "node_from_hash",
]
