# contract_compiler/dag/edge.py
from __future__ import annotations

from typing import Any, Dict, Literal

from pydantic import ConfigDict, Field, field_validator

from contract_compiler.core.schemas import AppBaseModel

EdgeType = Literal["references", "derived_from", "depends_on", "conflicts_with"]
EDGE_TYPES = ("references", "derived_from", "depends_on", "conflicts_with")


class Edge(AppBaseModel):
    """Directed, typed edge between two node ids.

    Construction fails with ``ValueError`` (pydantic ``ValidationError``) when
    ``type`` is outside the fixed enum. Endpoint existence is checked by the
    graph builder, not here.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    type: str

    @field_validator("type", mode="before")
    @classmethod
    def _check_type(cls, v: Any) -> str:
        if v not in EDGE_TYPES:
            raise ValueError(f"Invalid edge type: {v!r}")
        return v

    def to_hash(self) -> Dict[str, Any]:
        return {"from": self.from_id, "to": self.to_id, "type": self.type}


__all__ = ["Edge", "EdgeType", "EDGE_TYPES"]
