from __future__ import annotations
from typing import Any, Dict, Iterable

from contract_compiler.core.schemas import SEVERITY_ORDER


def _severity(a: Any) -> str:
    sev = a.get("severity") if isinstance(a, dict) else getattr(a, "severity", None)
    return str(sev or "").lower()


def count_by_severity(anomalies: Iterable[Any]) -> Dict[str, int]:
    """Counts per severity, most severe first; absent severities are omitted."""
    counts: Dict[str, int] = {}
    for a in anomalies:
        sev = _severity(a)
        counts[sev] = counts.get(sev, 0) + 1
    ordered = {s: counts.pop(s) for s in SEVERITY_ORDER if s in counts}
    ordered.update(counts)
    return ordered


def summarize_severities(anomalies: Iterable[Any]) -> Dict[str, int]:
    counts = count_by_severity(anomalies)
    critical = counts.get("critical", 0)
    high = counts.get("high", 0)
    return {
        "total": sum(counts.values()),
        "critical": critical,
        "high": high,
        "critical_high": critical + high,
        "medium": counts.get("medium", 0),
        "low": counts.get("low", 0),
    }
