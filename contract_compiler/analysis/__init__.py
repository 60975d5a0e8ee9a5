"""Fact extraction helpers and exports."""

from .fact_extractor import ExtractionResult, extract, extract_parties
from .patterns import PARTY_ROLES, FactRule, load_fact_rules

__all__ = [
    "ExtractionResult",
    "extract",
    "extract_parties",
    "PARTY_ROLES",
    "FactRule",
    "load_fact_rules",
]
