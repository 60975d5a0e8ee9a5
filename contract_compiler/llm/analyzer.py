from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional, Union

from loguru import logger
from pydantic import ValidationError

from contract_compiler.core.schemas import Anomaly

from .config import LLMConfig, load_llm_config
from .interfaces import BaseClient
from .prompt_builder import build_prompt, system_prompt
from .service import get_client


def _strip_fences(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text


def _as_lines(value: Any) -> List[int]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, int) and not isinstance(v, bool)]


def parse_response(raw: Any) -> List[Anomaly]:
    """Convert a model reply into anomalies; never raises.

    Anything that is not a JSON object with an ``anomalies`` list yields an
    empty result. Entries that fail validation are skipped one by one.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if not isinstance(raw, str) or not raw.strip():
        return []
    try:
        data = json.loads(_strip_fences(raw))
    except ValueError:
        logger.warning("LLM response is not valid JSON ({} chars)", len(raw))
        return []
    if not isinstance(data, dict):
        return []
    items = data.get("anomalies")
    if not isinstance(items, list):
        return []

    out: List[Anomaly] = []
    dropped = 0
    for item in items:
        if not isinstance(item, dict):
            dropped += 1
            continue
        involved = item.get("involved_clauses")
        try:
            out.append(
                Anomaly(
                    type=item.get("type"),
                    severity=item.get("severity"),
                    description=str(item.get("description") or ""),
                    involved_nodes=[str(x) for x in involved] if isinstance(involved, list) else [],
                    lines=_as_lines(item.get("lines")),
                    recommendation=item.get("recommendation") or None,
                    source="ai",
                )
            )
        except ValidationError as exc:
            dropped += 1
            logger.debug("skipping LLM anomaly {!r}: {}", item.get("type"), exc.errors()[:1])
    if dropped:
        logger.debug("dropped {} of {} LLM anomalies (unknown type or invalid fields)", dropped, len(items))
    return out


class LLMAnalyzer:
    """Second-pass anomaly finder backed by a chat-completion client."""

    def __init__(self, client: Optional[BaseClient] = None, cfg: Optional[LLMConfig] = None):
        self.cfg = cfg or load_llm_config()
        self.client: BaseClient = client or get_client(self.cfg)

    def analyze(
        self,
        graph_hash: Dict[str, Any],
        original_text: str,
        symbolic_anomalies: Iterable[Union[Anomaly, Dict[str, Any]]],
    ) -> List[Anomaly]:
        prompt = build_prompt(graph_hash, original_text, symbolic_anomalies)
        result = self.client.complete(
            system_prompt(),
            prompt,
            max_tokens=self.cfg.max_tokens,
            temperature=self.cfg.temperature,
            timeout=self.cfg.timeout_s,
        )
        anomalies = parse_response(result.text)
        logger.info(
            "LLM pass via {}:{} returned {} anomalies",
            self.client.provider,
            self.client.model,
            len(anomalies),
        )
        return anomalies


__all__ = ["LLMAnalyzer", "parse_response"]
