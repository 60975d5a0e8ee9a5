# contract_compiler/pipeline.py
"""End-to-end analysis: document -> clauses -> graph -> anomalies."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from loguru import logger

from contract_compiler.analysis import ExtractionResult, extract, extract_parties
from contract_compiler.analysis.patterns import extract_clause_references
from contract_compiler.core.schemas import AnalysisMetadata, Anomaly
from contract_compiler.dag import ClauseNode, Graph, GraphBuilder
from contract_compiler.intake import extract_clauses, load_document
from contract_compiler.legal_rules import analyze
from contract_compiler.llm import LLMAnalyzer, ProviderError


@dataclass
class AnalysisReport:
    metadata: AnalysisMetadata
    graph: Graph
    text: str
    clauses: List[ClauseNode] = field(default_factory=list)
    symbolic: List[Anomaly] = field(default_factory=list)
    ai: List[Anomaly] = field(default_factory=list)

    @property
    def anomalies(self) -> List[Anomaly]:
        return [*self.symbolic, *self.ai]

    def graph_hash(self) -> Dict[str, Any]:
        return self.graph.to_hash()


def _title_rx(title: str) -> Optional[re.Pattern[str]]:
    title = (title or "").strip()
    if not title:
        return None
    return re.compile(rf"(?:clause|section)\s+{re.escape(title)}(?!\w)", re.IGNORECASE)


def reference_pairs(clauses: Sequence[ClauseNode]) -> List[Tuple[str, str]]:
    """(from, to) clause pairs where one clause body cites another.

    A citation is ``clause|section|article <number>`` naming the other
    clause's heading number, or ``clause|section <title>``. Self references
    are ignored and each pair appears once, in clause order.
    """
    by_number: Dict[str, str] = {}
    for c in clauses:
        if c.number and c.number not in by_number:
            by_number[c.number] = c.id
    title_rx = [(c.id, _title_rx(c.title)) for c in clauses]

    pairs: List[Tuple[str, str]] = []
    seen: Set[Tuple[str, str]] = set()
    for clause in clauses:
        body = clause.body or ""
        if not body:
            continue
        targets = [by_number[n] for n in extract_clause_references(body) if n in by_number]
        targets.extend(cid for cid, rx in title_rx if rx is not None and rx.search(body))
        for target in targets:
            pair = (clause.id, target)
            if target == clause.id or pair in seen:
                continue
            seen.add(pair)
            pairs.append(pair)
    return pairs


def build_graph(clauses: Sequence[ClauseNode], extraction: ExtractionResult) -> Graph:
    builder = GraphBuilder()
    builder.add_nodes(clauses)
    builder.add_nodes(extraction.nodes)
    builder.add_edges(extraction.edges)
    for from_id, to_id in reference_pairs(clauses):
        builder.add_edge(from_id, to_id, "references")
    return builder.build()


def run_analysis(
    path: str | Path,
    *,
    use_llm: bool = True,
    analyzer: Optional[LLMAnalyzer] = None,
    exact_references: bool = False,
) -> AnalysisReport:
    """Run every stage on ``path`` and collect the results.

    Loader errors propagate. Provider failures in the learned-model pass are
    logged and leave the report with symbolic anomalies only.
    """
    source = str(path)
    logger.info("Parsing {}...", source)
    text = load_document(path)

    logger.info("Extracting clauses...")
    clauses = extract_clauses(text)

    logger.info("Extracting semantics...")
    extraction = extract(clauses)
    parties = extract_parties(text)

    logger.info("Building DAG...")
    graph = build_graph(clauses, extraction)
    logger.info("DAG: {} nodes, {} edges", len(graph.nodes), len(graph.edges))

    logger.info("Running symbolic reasoner...")
    symbolic = analyze(graph, exact_references=exact_references)

    ai: List[Anomaly] = []
    if use_llm:
        analyzer = analyzer or LLMAnalyzer()
        logger.info("Calling {} analyzer...", analyzer.client.provider)
        try:
            ai = analyzer.analyze(graph.to_hash(), text, symbolic)
        except ProviderError as exc:
            logger.warning("LLM pass failed ({}): {}", exc.provider, exc.detail)

    metadata = AnalysisMetadata(
        source_file=source,
        clause_count=len(clauses),
        party_count=len(parties),
    )
    return AnalysisReport(
        metadata=metadata,
        graph=graph,
        text=text,
        clauses=list(clauses),
        symbolic=symbolic,
        ai=ai,
    )


__all__ = ["AnalysisReport", "build_graph", "reference_pairs", "run_analysis"]
