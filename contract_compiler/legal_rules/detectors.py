# contract_compiler/legal_rules/detectors.py
"""Deterministic structural checks over an assembled contract graph.

Every detector is a pure function ``(graph, ctx) -> list[Anomaly]``; none of
them mutates the graph or depends on another detector's output.
"""

from __future__ import annotations

import re
from itertools import combinations
from typing import Any, Dict, Iterable, List, Mapping

from contract_compiler.core.schemas import Anomaly, sorted_lines
from contract_compiler.dag.graph import Graph
from contract_compiler.dag.nodes import ClauseNode, ConditionNode, ObligationNode, RightNode

SIMILARITY_THRESHOLD = 0.5

_LEADING_NOT_RX = re.compile(r"^not\s+")


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def node_lines(graph: Graph, node_ids: Iterable[str]) -> List[int]:
    lines = []
    for nid in node_ids:
        node = graph.find_node(nid)
        if node is not None:
            lines.append(node.line)
    return sorted_lines(lines)


def _party_key(party: Any) -> str:
    return str(party or "").strip().lower()


def _obligations(graph: Graph) -> List[ObligationNode]:
    return [n for n in graph.nodes if isinstance(n, ObligationNode)]


def _conditions(graph: Graph) -> List[ConditionNode]:
    return [n for n in graph.nodes if isinstance(n, ConditionNode)]


def _strip_negation(action: str) -> str:
    return _LEADING_NOT_RX.sub("", (action or "").strip().lower())


def jaccard(a: str, b: str) -> float:
    """Jaccard similarity of whitespace-tokenized words."""
    words_a = set(a.split())
    words_b = set(b.split())
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


def _is_negated(action: str) -> bool:
    return "not " in (action or "").lower()


# -----------------------------------------------------------------------------
# Detectors
# -----------------------------------------------------------------------------
def check_circular_dependencies(graph: Graph, ctx: Mapping[str, Any]) -> List[Anomaly]:
    out: List[Anomaly] = []
    for cycle in graph.cycle_detect():
        involved = list(dict.fromkeys(cycle))
        out.append(
            Anomaly(
                type="circular_dependency",
                severity="critical",
                description=f"Circular dependency detected: {' -> '.join(cycle)}",
                involved_nodes=involved,
                lines=node_lines(graph, involved),
            )
        )
    return out


def check_contradictory_obligations(graph: Graph, ctx: Mapping[str, Any]) -> List[Anomaly]:
    out: List[Anomaly] = []
    for o1, o2 in combinations(_obligations(graph), 2):
        if _party_key(o1.party) != _party_key(o2.party):
            continue
        if _is_negated(o1.action) == _is_negated(o2.action):
            continue
        score = jaccard(_strip_negation(o1.action), _strip_negation(o2.action))
        if score <= SIMILARITY_THRESHOLD:
            continue
        out.append(
            Anomaly(
                type="contradictory_obligations",
                severity="critical",
                description=(
                    f"{o1.party} has contradictory obligations: "
                    f"'{o1.action}' vs '{o2.action}'"
                ),
                involved_nodes=[o1.id, o2.id],
                lines=node_lines(graph, [o1.id, o2.id]),
            )
        )
    return out


def check_orphaned_obligations(graph: Graph, ctx: Mapping[str, Any]) -> List[Anomaly]:
    return [
        Anomaly(
            type="orphaned_obligation",
            severity="high",
            description=f"Obligation '{o.action}' has no associated party",
            involved_nodes=[o.id],
            lines=node_lines(graph, [o.id]),
        )
        for o in _obligations(graph)
        if not _party_key(o.party)
    ]


def check_dangling_conditions(graph: Graph, ctx: Mapping[str, Any]) -> List[Anomaly]:
    out: List[Anomaly] = []
    for cond in _conditions(graph):
        if any(e.type != "derived_from" for e in graph.outgoing(cond.id)):
            continue
        if any(e.type == "depends_on" for e in graph.incoming(cond.id)):
            continue
        out.append(
            Anomaly(
                type="dangling_condition",
                severity="medium",
                description=(
                    f"Condition '{cond.trigger}' is defined but never referenced "
                    "by any obligation or right"
                ),
                involved_nodes=[cond.id],
                lines=node_lines(graph, [cond.id]),
            )
        )
    return out


def check_missing_reciprocity(graph: Graph, ctx: Mapping[str, Any]) -> List[Anomaly]:
    holders: Dict[str, List[ObligationNode]] = {}
    for o in _obligations(graph):
        key = _party_key(o.party)
        if key:
            holders.setdefault(key, []).append(o)
    right_holders = {
        _party_key(n.party) for n in graph.nodes if isinstance(n, RightNode)
    }

    out: List[Anomaly] = []
    for key, obls in holders.items():
        if key in right_holders:
            continue
        ids = [o.id for o in obls]
        party = (obls[0].party or "").strip()
        out.append(
            Anomaly(
                type="missing_reciprocity",
                severity="medium",
                description=f"Party '{party}' has obligations but no corresponding rights",
                involved_nodes=ids,
                lines=node_lines(graph, ids),
            )
        )
    return out


def _reference_resolves(ref: str, clauses: List[ClauseNode], exact: bool) -> bool:
    if not exact:
        return any(ref in c.id for c in clauses)
    return any(c.number == ref or c.id.endswith(f"_{ref}") for c in clauses)


def check_unmatched_references(graph: Graph, ctx: Mapping[str, Any]) -> List[Anomaly]:
    # Default matching is substring containment on clause ids, so "1" also
    # resolves against an id containing "12". ``exact_references`` tightens it.
    exact = bool(ctx.get("exact_references"))
    clauses = [n for n in graph.nodes if isinstance(n, ClauseNode)]

    out: List[Anomaly] = []
    for cond in _conditions(graph):
        for ref in cond.referenced_clauses:
            if _reference_resolves(ref, clauses, exact):
                continue
            out.append(
                Anomaly(
                    type="unmatched_reference",
                    severity="high",
                    description=(
                        f"Condition '{cond.trigger}' references clause '{ref}' "
                        "which does not exist"
                    ),
                    involved_nodes=[cond.id],
                    lines=node_lines(graph, [cond.id]),
                )
            )
    return out


__all__ = [
    "SIMILARITY_THRESHOLD",
    "jaccard",
    "node_lines",
    "check_circular_dependencies",
    "check_contradictory_obligations",
    "check_orphaned_obligations",
    "check_dangling_conditions",
    "check_missing_reciprocity",
    "check_unmatched_references",
]
