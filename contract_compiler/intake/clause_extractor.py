"""Segment contract text into hierarchical clause nodes.

Headings recognised (one per line):
  ``1. Title`` / ``1.2. Title``   numbered section, level = dots + 1
  ``1.2 Title``                   sub-section without trailing dot
  ``Article IV: Title``           article, level 1

Text without any heading falls back to blank-line separated paragraphs
(``Section N``). Every clause records the 1-based line of its heading and of
its first non-blank body line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from loguru import logger

from contract_compiler.dag.nodes import ClauseNode

NUMBERED_SECTION_RX = re.compile(r"^(\d+(?:\.\d+)*)\.\s+(.+)$")
SUBSECTION_RX = re.compile(r"^(\d+\.\d+(?:\.\d+)*)\s+(.+)$")
ARTICLE_RX = re.compile(r"^(Article\s+[IVXLCDM\d]+)[:.\s]*(.*)$", re.IGNORECASE)

_SLUG_RX = re.compile(r"[^a-z0-9.]+")


@dataclass
class _Section:
    number: str
    title: str
    level: int
    line: int
    body: List[Tuple[int, str]] = field(default_factory=list)

    def body_text(self) -> str:
        return "\n".join(row for _, row in self.body).strip()

    def body_line(self) -> Optional[int]:
        for lineno, row in self.body:
            if row.strip():
                return lineno
        return None


def _match_heading(row: str) -> Optional[Tuple[str, str, int]]:
    m = NUMBERED_SECTION_RX.match(row) or SUBSECTION_RX.match(row)
    if m:
        number = m.group(1)
        return number, m.group(2).strip(), number.count(".") + 1
    m = ARTICLE_RX.match(row)
    if m:
        return m.group(1), m.group(2).strip(), 1
    return None


def clause_id_for(number: str) -> str:
    slug = _SLUG_RX.sub("_", number.strip().lower()).strip("_")
    return f"clause_{slug or 'x'}"


def _scan_sections(text: str) -> List[_Section]:
    sections: List[_Section] = []
    current: Optional[_Section] = None
    for lineno, row in enumerate(text.splitlines(), start=1):
        heading = _match_heading(row)
        if heading:
            number, title, level = heading
            current = _Section(number=number, title=title, level=level, line=lineno)
            sections.append(current)
        elif current is not None:
            current.body.append((lineno, row))
    return sections


def _build_clause_nodes(sections: List[_Section]) -> List[ClauseNode]:
    parent_stack: List[Tuple[str, int]] = []
    seen: Dict[str, int] = {}
    clauses: List[ClauseNode] = []

    for sec in sections:
        while parent_stack and parent_stack[-1][1] >= sec.level:
            parent_stack.pop()
        parent_id = parent_stack[-1][0] if parent_stack else None

        base_id = clause_id_for(sec.number)
        seen[base_id] = seen.get(base_id, 0) + 1
        cid = base_id if seen[base_id] == 1 else f"{base_id}_dup{seen[base_id]}"

        parent_stack.append((cid, sec.level))
        clauses.append(
            ClauseNode(
                id=cid,
                title=sec.title,
                body=sec.body_text(),
                level=sec.level,
                parent_id=parent_id,
                number=sec.number,
                line=sec.line,
                body_line=sec.body_line(),
            )
        )
    return clauses


def _paragraph_fallback(text: str) -> List[ClauseNode]:
    paragraphs: List[Tuple[int, List[str]]] = []
    buf: List[str] = []
    start = 0
    for lineno, row in enumerate(text.splitlines(), start=1):
        if row.strip():
            if not buf:
                start = lineno
            buf.append(row)
        elif buf:
            paragraphs.append((start, buf))
            buf = []
    if buf:
        paragraphs.append((start, buf))

    return [
        ClauseNode(
            id=f"clause_{i}",
            title=f"Section {i}",
            body="\n".join(rows).strip(),
            level=1,
            parent_id=None,
            line=first,
            body_line=first,
        )
        for i, (first, rows) in enumerate(paragraphs, start=1)
    ]


def extract_clauses(text: str) -> List[ClauseNode]:
    """Ordered clause nodes for ``text`` (numbered headings, else paragraphs)."""
    if not isinstance(text, str) or not text.strip():
        return []
    clauses = _build_clause_nodes(_scan_sections(text))
    if not clauses:
        clauses = _paragraph_fallback(text)
        logger.debug("no headings found; {} paragraph clauses", len(clauses))
    return clauses


__all__ = ["extract_clauses", "clause_id_for"]
