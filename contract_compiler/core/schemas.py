# contract_compiler/core/schemas.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "SCHEMA_VERSION",
    "RISK_ORDER",
    "SEVERITY_ORDER",
    "Severity",
    "AnomalySource",
    "AnomalyType",
    "SYMBOLIC_ANOMALY_TYPES",
    "AI_ANOMALY_TYPES",
    "AppBaseModel",
    "Anomaly",
    "AnalysisMetadata",
    "risk_to_ordinal",
    "sorted_lines",
]

# ============================================================================
# Single Source Of Truth (schema version)
# ============================================================================
SCHEMA_VERSION: str = "1.0"

# ============================================================================
# Severity ordinal helpers
# ============================================================================
Severity = Literal["low", "medium", "high", "critical"]

RISK_ORDER: Dict[str, int] = {
    "low": 0,
    "medium": 1,
    "high": 2,
    "critical": 3,
}

# Report order: most severe first.
SEVERITY_ORDER: List[str] = ["critical", "high", "medium", "low"]


def risk_to_ordinal(r: Severity | str) -> int:
    """
    Return ordinal for severity (unknown -> 1 == 'medium').
    """
    return RISK_ORDER.get(str(r or "").lower(), 1)


def sorted_lines(lines: Any) -> List[int]:
    """Ascending, de-duplicated line numbers; ``None`` entries are dropped."""
    return sorted({int(x) for x in (lines or []) if x is not None})


# ============================================================================
# Base config
# ============================================================================
class AppBaseModel(BaseModel):
    """
    Base model shared by all public DTOs.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        str_max_length=200_000,
    )


# ============================================================================
# Anomalies
# ============================================================================
AnomalySource = Literal["symbolic", "ai"]

SYMBOLIC_ANOMALY_TYPES = (
    "circular_dependency",
    "contradictory_obligations",
    "orphaned_obligation",
    "dangling_condition",
    "missing_reciprocity",
    "unmatched_reference",
)
AI_ANOMALY_TYPES = (
    "ambiguous_language",
    "industry_standard_gap",
    "asymmetric_terms",
    "inconsistent_definitions",
    "hidden_implications",
)

AnomalyType = Literal[
    "circular_dependency",
    "contradictory_obligations",
    "orphaned_obligation",
    "dangling_condition",
    "missing_reciprocity",
    "unmatched_reference",
    "ambiguous_language",
    "industry_standard_gap",
    "asymmetric_terms",
    "inconsistent_definitions",
    "hidden_implications",
]


class Anomaly(AppBaseModel):
    """
    Structured finding describing a defect class in the derived graph.

    Produced by the symbolic reasoner (``source="symbolic"``) and by the
    learned-model pass (``source="ai"``).
    """

    model_config = ConfigDict(frozen=True, str_max_length=None)

    type: AnomalyType
    severity: Severity
    description: str
    involved_nodes: List[str] = Field(default_factory=list)
    lines: List[int] = Field(default_factory=list)
    recommendation: Optional[str] = None
    source: AnomalySource = "symbolic"

    @field_validator("severity", mode="before")
    @classmethod
    def _lower_severity(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("lines", mode="before")
    @classmethod
    def _normalize_lines(cls, v: Any) -> List[int]:
        return sorted_lines(v)

    def to_hash(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class AnalysisMetadata(AppBaseModel):
    """Run metadata carried alongside the anomaly list into reports."""

    source_file: str
    clause_count: int = 0
    party_count: int = 0
