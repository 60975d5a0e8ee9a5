import pytest

from contract_compiler.dag import ClauseNode, ConditionNode, GraphBuilder, ObligationNode, RightNode
from contract_compiler.legal_rules import DETECTORS, analyze, get_detector
from contract_compiler.legal_rules.detectors import jaccard


def _graph(*nodes, edges=()):
    b = GraphBuilder()
    for n in nodes:
        b.add_node(n)
    for e in edges:
        b.add_edge(*e)
    return b.build()


def _of_type(anomalies, kind):
    return [a for a in anomalies if a.type == kind]


def test_detector_table_order():
    assert [name for name, _ in DETECTORS] == [
        "circular_dependency",
        "contradictory_obligations",
        "orphaned_obligation",
        "dangling_condition",
        "missing_reciprocity",
        "unmatched_reference",
    ]
    with pytest.raises(KeyError):
        get_detector("nope")


def test_circular_dependency():
    g = _graph(
        ClauseNode(id="a", title="A", line=1),
        ClauseNode(id="b", title="B", line=5),
        edges=[("a", "b", "depends_on"), ("b", "a", "depends_on")],
    )
    (found,) = _of_type(analyze(g), "circular_dependency")
    assert found.severity == "critical"
    assert found.description == "Circular dependency detected: a -> b -> a"
    assert found.involved_nodes == ["a", "b"]
    assert found.lines == [1, 5]


def test_contradictory_obligations():
    g = _graph(
        ObligationNode(id="o1", party="Seller", action="deliver goods", line=3),
        ObligationNode(id="o2", party="seller", action="not deliver goods", line=9),
    )
    (found,) = _of_type(analyze(g), "contradictory_obligations")
    assert found.severity == "critical"
    assert found.involved_nodes == ["o1", "o2"]
    assert found.lines == [3, 9]


def test_identical_obligations_are_not_contradictory():
    g = _graph(
        ObligationNode(id="o1", party="Seller", action="deliver goods"),
        ObligationNode(id="o2", party="Seller", action="deliver goods"),
    )
    assert _of_type(analyze(g), "contradictory_obligations") == []


def test_dissimilar_negation_is_not_contradictory():
    g = _graph(
        ObligationNode(id="o1", party="Seller", action="deliver goods on time"),
        ObligationNode(id="o2", party="Seller", action="not assign this agreement"),
    )
    assert _of_type(analyze(g), "contradictory_obligations") == []


def test_jaccard():
    assert jaccard("deliver goods", "deliver goods") == 1.0
    assert jaccard("a b", "b c") == pytest.approx(1 / 3)
    assert jaccard("", "") == 0.0


@pytest.mark.parametrize("party", ["", "   ", None])
def test_orphaned_obligation(party):
    g = _graph(ObligationNode(id="o1", party=party, action="pay"))
    (found,) = _of_type(analyze(g), "orphaned_obligation")
    assert found.severity == "high"
    assert found.involved_nodes == ["o1"]


def test_dangling_condition():
    g = _graph(ConditionNode(id="c1", trigger="late", consequence="fee", line=4))
    (found,) = _of_type(analyze(g), "dangling_condition")
    assert found.severity == "medium"
    assert found.lines == [4]


def test_depends_on_edge_suppresses_dangling():
    g = _graph(
        ConditionNode(id="c1", trigger="late", consequence="fee"),
        ObligationNode(id="o1", party="Buyer", action="pay fee"),
        edges=[("o1", "c1", "depends_on")],
    )
    assert _of_type(analyze(g), "dangling_condition") == []


def test_derived_from_edge_does_not_suppress_dangling():
    g = _graph(
        ClauseNode(id="clause_1", title="T"),
        ConditionNode(id="c1", trigger="late", consequence="fee"),
        edges=[("clause_1", "c1", "derived_from")],
    )
    assert len(_of_type(analyze(g), "dangling_condition")) == 1


def test_outgoing_non_derived_edge_suppresses_dangling():
    g = _graph(
        ClauseNode(id="clause_4", title="T"),
        ConditionNode(id="c1", trigger="late", consequence="see clause 4"),
        edges=[("c1", "clause_4", "references")],
    )
    assert _of_type(analyze(g), "dangling_condition") == []


def test_lines_are_deduplicated_across_involved_nodes():
    g = _graph(
        ObligationNode(id="o1", party="Tenant", action="pay rent", line=3),
        ObligationNode(id="o2", party="Tenant", action="keep the premises clean", line=3),
    )
    (found,) = _of_type(analyze(g), "missing_reciprocity")
    assert found.involved_nodes == ["o1", "o2"]
    assert found.lines == [3]


def test_missing_reciprocity_once_per_party():
    g = _graph(
        ObligationNode(id="o1", party="Seller", action="deliver"),
        ObligationNode(id="o2", party="seller", action="insure"),
        ObligationNode(id="o3", party="Buyer", action="pay"),
        RightNode(id="r1", party="buyer", entitlement="inspect"),
    )
    (found,) = _of_type(analyze(g), "missing_reciprocity")
    assert found.involved_nodes == ["o1", "o2"]
    assert "Seller" in found.description


def test_unmatched_reference_containment_default():
    g = _graph(
        ClauseNode(id="clause_12", title="T", number="12"),
        ConditionNode(id="c1", trigger="t", consequence="c", referenced_clauses=["1", "7"]),
    )
    found = _of_type(analyze(g), "unmatched_reference")
    assert len(found) == 1
    assert "'7'" in found[0].description
    assert found[0].severity == "high"


def test_unmatched_reference_exact_mode():
    g = _graph(
        ClauseNode(id="clause_12", title="T", number="12"),
        ConditionNode(id="c1", trigger="t", consequence="c", referenced_clauses=["1", "12"]),
    )
    found = _of_type(analyze(g, exact_references=True), "unmatched_reference")
    assert len(found) == 1
    assert "'1'" in found[0].description


def test_analyze_is_deterministic(sample_contract_path):
    from contract_compiler.pipeline import run_analysis

    graph = run_analysis(sample_contract_path, use_llm=False).graph
    first = analyze(graph)
    assert first == analyze(graph)
    assert [a.type for a in first] == [
        "contradictory_obligations",
        "dangling_condition",
        "missing_reciprocity",
        "unmatched_reference",
    ]
    assert all(a.source == "symbolic" for a in first)
