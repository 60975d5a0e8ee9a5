import pytest
from pydantic import ValidationError

from contract_compiler.dag import (
    ClauseNode,
    ConditionNode,
    Edge,
    ObligationNode,
    RightNode,
    node_from_hash,
)


def test_obligation_to_hash_is_flat():
    node = ObligationNode(
        id="obl_1", party="Seller", action="deliver goods", temporal="within 5 days", line=4
    )
    assert node.to_hash() == {
        "id": "obl_1",
        "type": "obligation",
        "party": "Seller",
        "action": "deliver goods",
        "target_party": None,
        "temporal": "within 5 days",
        "line": 4,
    }


def test_clause_hash_round_trips_to_same_variant():
    clause = ClauseNode(id="clause_2", title="Payment", body="Pay.", level=1, number="2", line=7)
    back = node_from_hash(clause.to_hash())
    assert isinstance(back, ClauseNode)
    assert back == clause


@pytest.mark.parametrize(
    "node",
    [
        RightNode(id="right_1", party="Buyer", entitlement="inspect goods"),
        ConditionNode(id="cond_1", trigger="late", consequence="fee", referenced_clauses=["4"]),
    ],
)
def test_node_from_hash_dispatches_on_type(node):
    assert type(node_from_hash(node.to_hash())) is type(node)


def test_nodes_are_frozen():
    node = RightNode(id="right_1", party="Buyer", entitlement="inspect")
    with pytest.raises(ValidationError):
        node.party = "Seller"


def test_clause_level_must_be_positive():
    with pytest.raises(ValidationError):
        ClauseNode(id="c", title="t", level=0)


def test_unknown_node_type_rejected():
    with pytest.raises(ValidationError):
        node_from_hash({"id": "x", "type": "penalty"})


def test_edge_rejects_unknown_type():
    with pytest.raises(ValueError):
        Edge(from_id="a", to_id="b", type="invalid_type")


def test_edge_accepts_wire_aliases():
    edge = Edge(**{"from": "a", "to": "b", "type": "depends_on"})
    assert edge.from_id == "a"
    assert edge.to_hash() == {"from": "a", "to": "b", "type": "depends_on"}
