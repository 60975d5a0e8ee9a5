# contract_compiler/report/renderer.py
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from jinja2 import Environment, FileSystemLoader
from loguru import logger

from contract_compiler.core.schemas import SCHEMA_VERSION, SEVERITY_ORDER, AnalysisMetadata, Anomaly

from .metrics import count_by_severity, summarize_severities

SEVERITY_PREFIX = {"critical": "C", "high": "H", "medium": "M", "low": "L"}

AnomalyLike = Union[Anomaly, Dict[str, Any]]
MetadataLike = Union[AnalysisMetadata, Dict[str, Any]]


@lru_cache(maxsize=1)
def _build_env() -> Environment:
    package_templates = Path(__file__).parent / "templates"
    logger.debug("Jinja2 search path: {}", package_templates)
    return Environment(
        loader=FileSystemLoader(str(package_templates)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _anomaly_hash(a: AnomalyLike) -> Dict[str, Any]:
    if isinstance(a, Anomaly):
        return a.to_hash()
    return dict(a)


def _metadata_hash(metadata: MetadataLike) -> Dict[str, Any]:
    if isinstance(metadata, AnalysisMetadata):
        return metadata.model_dump(mode="json")
    return dict(metadata)


def format_location(source_file: str, lines: Iterable[int] | None) -> str:
    """``file:12: file:14:`` for known lines, bare ``file:`` otherwise."""
    lines = list(lines or [])
    if lines:
        return " ".join(f"{source_file}:{n}:" for n in lines)
    return f"{source_file}:"


def _to_view_model(anomalies: List[Dict[str, Any]], source_file: str) -> List[Dict[str, Any]]:
    groups = []
    for sev in SEVERITY_ORDER:
        items = [a for a in anomalies if str(a.get("severity") or "").lower() == sev]
        if not items:
            continue
        groups.append(
            {
                "label": sev.upper(),
                "items": [
                    {
                        "location": format_location(source_file, a.get("lines")),
                        "tag": f"{SEVERITY_PREFIX[sev]}{i}",
                        "description": a.get("description") or "",
                        "recommendation": a.get("recommendation"),
                    }
                    for i, a in enumerate(items, start=1)
                ],
            }
        )
    return groups


def format_text(anomalies: Iterable[AnomalyLike], metadata: MetadataLike) -> str:
    """Human-readable report grouped by severity, most severe first."""
    items = [_anomaly_hash(a) for a in anomalies]
    meta = _metadata_hash(metadata)
    template = _build_env().get_template("report.txt.j2")
    return template.render(
        metadata=meta,
        groups=_to_view_model(items, meta.get("source_file", "")),
        metrics=summarize_severities(items),
    )


def format_json(
    anomalies: Iterable[AnomalyLike],
    metadata: MetadataLike,
    graph_hash: Dict[str, Any],
) -> str:
    items = [_anomaly_hash(a) for a in anomalies]
    payload = {
        "schema_version": SCHEMA_VERSION,
        "metadata": _metadata_hash(metadata),
        "graph": graph_hash,
        "anomalies": items,
        "summary": {
            "total": len(items),
            "by_severity": count_by_severity(items),
        },
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


__all__ = ["format_text", "format_json", "format_location", "SEVERITY_PREFIX"]
