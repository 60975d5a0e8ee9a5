from __future__ import annotations

import json
import pkgutil
import re
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Union

from contract_compiler.core.schemas import Anomaly

# single pass so placeholder-like text inside the contract is left alone
_PLACEHOLDER_RX = re.compile(r"\{(original_text|graph_json|anomalies_json)\}")


@lru_cache(maxsize=None)
def read_prompt(name: str) -> str:
    data = pkgutil.get_data("contract_compiler.llm", f"prompts/{name}.txt")
    if not data:
        return ""
    return data.decode("utf-8")


def system_prompt() -> str:
    return read_prompt("anomaly_system")


def _anomaly_payload(item: Union[Anomaly, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(item, Anomaly):
        return item.to_hash()
    return dict(item)


def build_prompt(
    graph_hash: Dict[str, Any],
    original_text: str,
    symbolic_anomalies: Iterable[Union[Anomaly, Dict[str, Any]]],
) -> str:
    """Assemble the user message: contract text, graph JSON and known anomalies."""
    found: List[Dict[str, Any]] = [_anomaly_payload(a) for a in symbolic_anomalies]
    values = {
        "original_text": original_text or "",
        "graph_json": json.dumps(graph_hash, indent=2, ensure_ascii=False),
        "anomalies_json": json.dumps(found, indent=2, ensure_ascii=False) if found else "None",
    }
    return _PLACEHOLDER_RX.sub(lambda m: values[m.group(1)], read_prompt("anomaly_user"))


__all__ = ["build_prompt", "read_prompt", "system_prompt"]
