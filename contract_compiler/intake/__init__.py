from .clause_extractor import extract_clauses
from .loader import (
    DocumentLoadError,
    UnsupportedDocumentError,
    load_document,
)

__all__ = [
    "extract_clauses",
    "load_document",
    "DocumentLoadError",
    "UnsupportedDocumentError",
]
