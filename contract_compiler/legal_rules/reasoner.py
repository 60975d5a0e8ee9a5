# contract_compiler/legal_rules/reasoner.py
"""Symbolic reasoner: runs every registered detector over a frozen graph."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Tuple

from loguru import logger

from contract_compiler.core.schemas import Anomaly
from contract_compiler.dag.graph import Graph

from .detectors import (
    check_circular_dependencies,
    check_contradictory_obligations,
    check_dangling_conditions,
    check_missing_reciprocity,
    check_orphaned_obligations,
    check_unmatched_references,
)

Detector = Callable[[Graph, Mapping[str, Any]], List[Anomaly]]

# Canonical detector table: anomaly type -> detector. Output order of
# ``analyze`` follows this table.
DETECTORS: Tuple[Tuple[str, Detector], ...] = (
    ("circular_dependency", check_circular_dependencies),
    ("contradictory_obligations", check_contradictory_obligations),
    ("orphaned_obligation", check_orphaned_obligations),
    ("dangling_condition", check_dangling_conditions),
    ("missing_reciprocity", check_missing_reciprocity),
    ("unmatched_reference", check_unmatched_references),
)


def analyze(graph: Graph, *, exact_references: bool = False) -> List[Anomaly]:
    """Concatenate the findings of all detectors (no cross-detector dedup)."""
    ctx: Dict[str, Any] = {"exact_references": exact_references}
    anomalies: List[Anomaly] = []
    for name, detector in DETECTORS:
        found = detector(graph, ctx)
        if found:
            logger.debug("detector {}: {} anomalies", name, len(found))
        anomalies.extend(found)
    return anomalies


def get_detector(name: str) -> Detector:
    for key, detector in DETECTORS:
        if key == name:
            return detector
    raise KeyError(f"Unknown detector: {name}")


__all__ = ["DETECTORS", "Detector", "analyze", "get_detector"]
