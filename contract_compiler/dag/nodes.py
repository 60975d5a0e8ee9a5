# contract_compiler/dag/nodes.py
"""Closed node taxonomy of the contract graph.

Four kinds share identity (``id``), a ``type`` tag and an optional provenance
``line``; they differ only in payload. ``Node`` is a discriminated union on
``type`` so consumers can match exhaustively over the kinds.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import ConfigDict, Field, TypeAdapter

from contract_compiler.core.schemas import AppBaseModel

NodeType = Literal["clause", "obligation", "right", "condition"]
NODE_TYPES = ("clause", "obligation", "right", "condition")


class _NodeBase(AppBaseModel):
    # clause bodies carry whole documents when no headings are found
    model_config = ConfigDict(frozen=True, extra="forbid", str_max_length=None)

    id: str
    line: Optional[int] = None

    def to_hash(self) -> Dict[str, Any]:
        """Flat ``{id, type, <kind fields>, line}`` projection."""
        payload = self.model_dump(mode="json", exclude={"id", "type", "line"})
        return {"id": self.id, "type": self.type, **payload, "line": self.line}  # type: ignore[attr-defined]


class ClauseNode(_NodeBase):
    """Titled section of the source document at a given nesting level."""

    type: Literal["clause"] = "clause"
    title: str = ""
    body: str = ""
    level: int = Field(default=1, ge=1)
    parent_id: Optional[str] = None
    number: Optional[str] = None
    body_line: Optional[int] = None


class ObligationNode(_NodeBase):
    type: Literal["obligation"] = "obligation"
    party: Optional[str] = None
    action: str = ""
    target_party: Optional[str] = None
    temporal: Optional[str] = None


class RightNode(_NodeBase):
    type: Literal["right"] = "right"
    party: Optional[str] = None
    entitlement: str = ""
    scope: Optional[str] = None


class ConditionNode(_NodeBase):
    type: Literal["condition"] = "condition"
    trigger: str = ""
    consequence: str = ""
    referenced_clauses: List[str] = Field(default_factory=list)


Node = Annotated[
    Union[ClauseNode, ObligationNode, RightNode, ConditionNode],
    Field(discriminator="type"),
]

_NODE_ADAPTER: TypeAdapter[Node] = TypeAdapter(Node)


def node_from_hash(data: Mapping[str, Any]) -> Node:
    """Rebuild the right node variant from its ``to_hash`` projection."""
    return _NODE_ADAPTER.validate_python(dict(data))


__all__ = [
    "NodeType",
    "NODE_TYPES",
    "ClauseNode",
    "ObligationNode",
    "RightNode",
    "ConditionNode",
    "Node",
    "node_from_hash",
]
