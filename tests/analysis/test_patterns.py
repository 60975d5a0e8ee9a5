import pytest

from contract_compiler.analysis.patterns import (
    PARTY_ROLES,
    clean_phrase,
    detect_target_party,
    detect_temporal,
    extract_clause_references,
    load_fact_rules,
)


def test_default_rule_table_order():
    assert [r.kind for r in load_fact_rules()] == ["obligation", "right", "condition"]
    assert load_fact_rules() is load_fact_rules()


def test_role_list_is_closed():
    assert len(PARTY_ROLES) == 18
    assert PARTY_ROLES[0] == "Seller" and PARTY_ROLES[-1] == "Lender"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("pay within 14 days", "within 14 days"),
        ("notify no later than 5 business days", "no later than 5 business"),
        ("deliver after 2 weeks of notice", "after 2 weeks"),
        ("deliver promptly", None),
    ],
)
def test_detect_temporal(text, expected):
    assert detect_temporal(text) == expected


def test_target_party_uses_list_order_not_text_order():
    assert detect_target_party("invoice the Customer and the Buyer") == "Buyer"
    assert detect_target_party("pay the Sellers") is None


def test_clause_references_are_verbatim():
    text = "as set out in Clause 3.1 and Article 7, not section 99.2.1"
    assert extract_clause_references(text) == ["3.1", "7", "99.2.1"]


def test_clean_phrase_strips_trailing_punctuation():
    assert clean_phrase("  deliver goods.; ") == "deliver goods"
    assert clean_phrase(None) == ""


def test_custom_rule_file(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text(
        "- kind: obligation\n"
        "  pattern: '(?P<party>\\w+)\\s+undertakes\\s+to\\s+(?P<action>[^.]+)'\n",
        encoding="utf-8",
    )
    (rule,) = load_fact_rules(path)
    assert rule.kind == "obligation"
    assert rule.pattern.search("The Vendor undertakes to repair").group("party") == "Vendor"


def test_unknown_kind_rejected(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("- kind: penalty\n  pattern: 'x'\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_fact_rules(path)


def test_missing_named_group_rejected(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("- kind: right\n  pattern: '(?P<party>\\w+) may'\n", encoding="utf-8")
    with pytest.raises(ValueError, match="entitlement"):
        load_fact_rules(path)
