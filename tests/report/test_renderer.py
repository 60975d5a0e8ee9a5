import json

from contract_compiler.core.schemas import SCHEMA_VERSION, AnalysisMetadata, Anomaly
from contract_compiler.report import count_by_severity, format_json, format_location, format_text

META = AnalysisMetadata(source_file="deal.txt", clause_count=4, party_count=2)


def _anomaly(severity, description, lines=(), recommendation=None, type="dangling_condition"):
    return Anomaly(
        type=type,
        severity=severity,
        description=description,
        lines=list(lines),
        recommendation=recommendation,
    )


def test_format_location():
    assert format_location("deal.txt", [3, 9]) == "deal.txt:3: deal.txt:9:"
    assert format_location("deal.txt", []) == "deal.txt:"


def test_text_report_groups_by_severity():
    anomalies = [
        _anomaly("medium", "Condition dangles", lines=[7]),
        _anomaly("critical", "Cycle found", lines=[1, 4], recommendation="Break the cycle"),
        _anomaly("medium", "Party lacks rights"),
        _anomaly("low", "Vague wording", type="ambiguous_language"),
    ]
    expected = "\n".join(
        [
            "Contract Analysis Report",
            "=" * 60,
            "Source: deal.txt (4 clauses, 2 parties)",
            "",
            "CRITICAL (1)",
            "  deal.txt:1: deal.txt:4: [C1] Cycle found",
            "       Recommendation: Break the cycle",
            "",
            "MEDIUM (2)",
            "  deal.txt:7: [M1] Condition dangles",
            "  deal.txt: [M2] Party lacks rights",
            "",
            "LOW (1)",
            "  deal.txt: [L1] Vague wording",
            "",
            "Summary: 1 critical/high, 2 medium, 1 low anomalies found.",
        ]
    )
    assert format_text(anomalies, META) == expected


def test_text_report_without_anomalies():
    text = format_text([], {"source_file": "empty.txt", "clause_count": 0, "party_count": 0})
    assert text.splitlines()[-2:] == ["", "Summary: 0 critical/high, 0 medium, 0 low anomalies found."]


def test_json_report_structure():
    anomalies = [_anomaly("high", "Missing clause 9"), _anomaly("high", "Another"), _anomaly("low", "x")]
    graph = {"nodes": [], "edges": []}
    data = json.loads(format_json(anomalies, META, graph))
    assert data["schema_version"] == SCHEMA_VERSION
    assert data["metadata"] == {"source_file": "deal.txt", "clause_count": 4, "party_count": 2}
    assert data["graph"] == graph
    assert data["summary"] == {"total": 3, "by_severity": {"high": 2, "low": 1}}
    assert data["anomalies"][0]["source"] == "symbolic"
    assert "recommendation" not in data["anomalies"][0]


def test_count_by_severity_orders_most_severe_first():
    counts = count_by_severity([{"severity": "low"}, {"severity": "critical"}, {"severity": "low"}])
    assert list(counts.items()) == [("critical", 1), ("low", 2)]
