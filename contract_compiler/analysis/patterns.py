# contract_compiler/analysis/patterns.py
"""Static extraction configuration: fact rules, role nouns, derived-field regexes.

The fact rule table is ordered data (pattern -> node constructor). New fact
categories are added by registering a builder in ``NODE_BUILDERS`` and listing
patterns for it in ``fact_patterns.yaml``; detector logic is untouched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Tuple

import yaml
from loguru import logger
from pydantic import BaseModel, ValidationError, field_validator

from contract_compiler.dag.nodes import ConditionNode, Node, ObligationNode, RightNode

PATTERNS_FILE = Path(__file__).resolve().with_name("fact_patterns.yaml")

# Closed list of common contractual role nouns; order matters for target-party
# detection and for the party roster.
PARTY_ROLES: Tuple[str, ...] = (
    "Seller",
    "Buyer",
    "Company",
    "Employee",
    "Contractor",
    "Client",
    "Landlord",
    "Tenant",
    "Licensor",
    "Licensee",
    "Provider",
    "Customer",
    "Vendor",
    "Supplier",
    "Lessee",
    "Lessor",
    "Borrower",
    "Lender",
)

_ROLE_RX: Dict[str, re.Pattern[str]] = {
    role: re.compile(rf"\b{re.escape(role)}\b", re.IGNORECASE) for role in PARTY_ROLES
}

TEMPORAL_RX = re.compile(
    r"\b(?:within|before|after|no\s+later\s+than)\s+\d+\s+\w+", re.IGNORECASE
)
CLAUSE_REF_RX = re.compile(r"\b(?:clause|section|article)\s+(\d+(?:\.\d+)*)", re.IGNORECASE)

_TRAILING_PUNCT = ".;"


# ---------------------------------------------------------------------------
# Derived-field helpers
# ---------------------------------------------------------------------------
def clean_phrase(s: Optional[str]) -> str:
    return (s or "").strip().rstrip(_TRAILING_PUNCT).rstrip()


def detect_temporal(text: str) -> Optional[str]:
    m = TEMPORAL_RX.search(text or "")
    return m.group(0) if m else None


def detect_target_party(text: str) -> Optional[str]:
    for role in PARTY_ROLES:
        if _ROLE_RX[role].search(text or ""):
            return role
    return None


def extract_clause_references(text: str) -> List[str]:
    return [m.group(1) for m in CLAUSE_REF_RX.finditer(text or "")]


def extract_parties(text: str) -> List[str]:
    """Role nouns present anywhere in ``text`` (whole word, any case), list order."""
    return [role for role in PARTY_ROLES if _ROLE_RX[role].search(text or "")]


# ---------------------------------------------------------------------------
# Node constructors
# ---------------------------------------------------------------------------
NodeBuild = Callable[[str, Mapping[str, str], Optional[int]], Node]


def _build_obligation(node_id: str, groups: Mapping[str, str], line: Optional[int]) -> Node:
    action = clean_phrase(groups.get("action"))
    return ObligationNode(
        id=node_id,
        party=clean_phrase(groups.get("party")),
        action=action,
        target_party=detect_target_party(action),
        temporal=detect_temporal(action),
        line=line,
    )


def _build_right(node_id: str, groups: Mapping[str, str], line: Optional[int]) -> Node:
    return RightNode(
        id=node_id,
        party=clean_phrase(groups.get("party")),
        entitlement=clean_phrase(groups.get("entitlement")),
        line=line,
    )


def _build_condition(node_id: str, groups: Mapping[str, str], line: Optional[int]) -> Node:
    trigger = clean_phrase(groups.get("trigger"))
    consequence = clean_phrase(groups.get("consequence"))
    return ConditionNode(
        id=node_id,
        trigger=trigger,
        consequence=consequence,
        referenced_clauses=extract_clause_references(f"{trigger} {consequence}"),
        line=line,
    )


@dataclass(frozen=True)
class NodeKindSpec:
    id_prefix: str
    anchor: str  # group whose text locates the provenance line
    groups: Tuple[str, ...]
    build: NodeBuild


NODE_BUILDERS: Dict[str, NodeKindSpec] = {
    "obligation": NodeKindSpec("obl", "action", ("party", "action"), _build_obligation),
    "right": NodeKindSpec("right", "entitlement", ("party", "entitlement"), _build_right),
    "condition": NodeKindSpec("cond", "trigger", ("trigger", "consequence"), _build_condition),
}


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class FactRule:
    kind: str
    pattern: re.Pattern[str]
    spec: NodeKindSpec

    def build(self, node_id: str, match: re.Match[str], line: Optional[int]) -> Node:
        return self.spec.build(node_id, match.groupdict(default=""), line)


class FactPatternSchema(BaseModel):
    """One entry of ``fact_patterns.yaml``."""

    kind: str
    pattern: str

    @field_validator("kind")
    @classmethod
    def _kind_known(cls, v: str) -> str:
        val = str(v or "").strip().lower()
        if val not in NODE_BUILDERS:
            raise ValueError(f"unknown fact kind: {v!r}")
        return val


def compile_rule(kind: str, pattern: str) -> FactRule:
    spec = NODE_BUILDERS[kind]
    rx = re.compile(pattern, re.IGNORECASE | re.MULTILINE)
    missing = [g for g in spec.groups if g not in rx.groupindex]
    if missing:
        raise ValueError(f"{kind} pattern lacks named groups: {missing}")
    return FactRule(kind=kind, pattern=rx, spec=spec)


def load_fact_rules(path: Path | str | None = None) -> Tuple[FactRule, ...]:
    """Load and compile the fact rule table; the default file is cached."""
    if path is None:
        return _default_rules()
    return _load(Path(path))


@lru_cache(maxsize=1)
def _default_rules() -> Tuple[FactRule, ...]:
    return _load(PATTERNS_FILE)


def _load(path: Path) -> Tuple[FactRule, ...]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or []
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a list of fact patterns")
    rules: List[FactRule] = []
    for idx, item in enumerate(raw):
        try:
            entry = FactPatternSchema.model_validate(item)
        except ValidationError as exc:
            raise ValueError(f"{path}: invalid fact pattern #{idx}: {exc}") from exc
        rules.append(compile_rule(entry.kind, entry.pattern))
    logger.debug("loaded {} fact rules from {}", len(rules), path)
    return tuple(rules)


__all__ = [
    "PARTY_ROLES",
    "TEMPORAL_RX",
    "CLAUSE_REF_RX",
    "NODE_BUILDERS",
    "NodeKindSpec",
    "FactRule",
    "FactPatternSchema",
    "clean_phrase",
    "compile_rule",
    "detect_temporal",
    "detect_target_party",
    "extract_clause_references",
    "extract_parties",
    "load_fact_rules",
]
