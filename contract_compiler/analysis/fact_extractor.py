# contract_compiler/analysis/fact_extractor.py
"""Derive obligation / right / condition facts from an ordered clause list."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from contract_compiler.dag.edge import Edge
from contract_compiler.dag.nodes import ClauseNode, Node

from .patterns import FactRule, extract_parties, load_fact_rules

# Length of the matched fragment used to locate its source line.
LINE_PROBE_CHARS = 30


@dataclass(frozen=True)
class ExtractionResult:
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def to_hash(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_hash() for n in self.nodes],
            "edges": [e.to_hash() for e in self.edges],
        }


def _scan_text(clause: ClauseNode) -> Tuple[str, Optional[int]]:
    """Text to scan (body, else title) and the line its first row sits on."""
    body = (clause.body or "").strip()
    if body:
        base = clause.body_line if clause.body_line is not None else clause.line
        return body, base
    return (clause.title or "").strip(), clause.line


def find_match_line(
    clause: ClauseNode, text: str, base: Optional[int], fragment: Optional[str]
) -> Optional[int]:
    """Best-effort source line of ``fragment`` inside ``text``.

    Falls back to the clause's own line; ``None`` when the clause has none.
    """
    if clause.line is None:
        return None
    if not fragment or base is None:
        return clause.line
    probe = fragment[:LINE_PROBE_CHARS].lower()
    for idx, row in enumerate(text.splitlines()):
        if probe in row.lower():
            return base + idx
    return clause.line


def extract(
    clauses: Iterable[ClauseNode], rules: Optional[Sequence[FactRule]] = None
) -> ExtractionResult:
    """Apply the fact rule table to every clause.

    Each match yields one node plus a ``derived_from`` edge from its clause.
    Ids come from per-kind counters starting at 1 and are never reused within
    a call.
    """
    table = tuple(rules) if rules is not None else load_fact_rules()
    counters: Dict[str, int] = {}
    nodes: List[Node] = []
    edges: List[Edge] = []

    for clause in clauses:
        text, base = _scan_text(clause)
        if not text:
            continue
        for rule in table:
            for m in rule.pattern.finditer(text):
                prefix = rule.spec.id_prefix
                counters[prefix] = counters.get(prefix, 0) + 1
                node_id = f"{prefix}_{counters[prefix]}"
                line = find_match_line(clause, text, base, m.group(rule.spec.anchor))
                nodes.append(rule.build(node_id, m, line))
                edges.append(Edge(from_id=clause.id, to_id=node_id, type="derived_from"))

    logger.debug(
        "fact extraction: {} nodes ({})",
        len(nodes),
        ", ".join(f"{k}={v}" for k, v in sorted(counters.items())) or "none",
    )
    return ExtractionResult(nodes=nodes, edges=edges)


__all__ = ["ExtractionResult", "extract", "extract_parties", "find_match_line"]
