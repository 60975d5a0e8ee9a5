from contract_compiler.core.schemas import AI_ANOMALY_TYPES, Anomaly
from contract_compiler.llm import build_prompt, system_prompt


GRAPH = {"nodes": [{"id": "clause_1", "type": "clause", "title": "Fees", "line": 1}], "edges": []}


def test_system_prompt_names_every_ai_category():
    text = system_prompt()
    for category in AI_ANOMALY_TYPES:
        assert category in text
    assert "involved_clauses" in text


def test_prompt_sections_without_prior_anomalies():
    prompt = build_prompt(GRAPH, "1. Fees\nThe Buyer shall pay.", [])
    assert prompt.startswith("## Contract Text\n\n1. Fees\nThe Buyer shall pay.")
    assert "## Contract DAG Structure\n\n```json\n{" in prompt
    assert '"id": "clause_1"' in prompt
    assert "## Already Detected Anomalies (by symbolic reasoner)\n\nNone\n" in prompt
    assert prompt.rstrip().endswith(
        "Please analyze this contract and return any additional anomalies you find."
    )


def test_prompt_lists_symbolic_anomalies():
    found = Anomaly(
        type="dangling_condition",
        severity="medium",
        description="Condition 'late' is defined but never referenced",
        involved_nodes=["cond_1"],
        lines=[4],
    )
    prompt = build_prompt(GRAPH, "text", [found])
    assert "None" not in prompt.split("(by symbolic reasoner)")[1]
    assert '"type": "dangling_condition"' in prompt


def test_placeholders_inside_contract_text_are_left_alone():
    prompt = build_prompt(GRAPH, "Refer to {graph_json} literally.", [])
    assert "Refer to {graph_json} literally." in prompt
