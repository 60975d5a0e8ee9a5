from .metrics import count_by_severity, summarize_severities
from .renderer import format_json, format_location, format_text

__all__ = [
    "format_text",
    "format_json",
    "format_location",
    "count_by_severity",
    "summarize_severities",
]
