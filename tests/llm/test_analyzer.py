import json

from contract_compiler.core.schemas import Anomaly
from contract_compiler.llm import LLMAnalyzer, LLMConfig
from contract_compiler.llm.clients.mock_client import MockClient


def test_analyzer_sends_prompt_and_parses_reply():
    reply = json.dumps(
        {
            "anomalies": [
                {
                    "type": "industry_standard_gap",
                    "severity": "low",
                    "description": "No governing law clause",
                    "involved_clauses": [],
                    "recommendation": "Add a governing law clause",
                }
            ]
        }
    )
    client = MockClient("mock-static", response=reply)
    analyzer = LLMAnalyzer(client=client, cfg=LLMConfig())
    prior = Anomaly(type="orphaned_obligation", severity="high", description="no party")

    found = analyzer.analyze({"nodes": [], "edges": []}, "1. Terms", [prior])

    assert [a.type for a in found] == ["industry_standard_gap"]
    assert found[0].source == "ai"
    (call,) = client.calls
    assert "Hidden implications" in call["system"]
    assert '"type": "orphaned_obligation"' in call["prompt"]


def test_analyzer_defaults_to_configured_mock():
    analyzer = LLMAnalyzer()
    assert analyzer.client.provider == "mock"
    assert analyzer.analyze({"nodes": [], "edges": []}, "", []) == []
