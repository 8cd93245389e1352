"""Citation addressing: ``file:lines`` references and their line ranges.

A citation's ``lines`` field is either a single 1-based line (``"42"``) or an
inclusive range (``"10-20"``).  The same addressing shows up inline in answer
text (``src/app.py:10-20``), where the panel renders it as a hyperlink.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from rag_chat.errors import CitationParseError

# path-with-extension:start(-end)?
INLINE_CITATION_RE = re.compile(r"([\w/.\-]+\.[A-Za-z]+):([0-9]+)(?:-([0-9]+))?")

_LEADING_INT_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class LineRange:
    """A 1-based inclusive line span; ``end`` is None for a single line."""

    start: int
    end: int | None = None

    @property
    def last(self) -> int:
        return self.start if self.end is None else self.end

    def __str__(self) -> str:
        return str(self.start) if self.end is None else f"{self.start}-{self.end}"


@dataclass(frozen=True)
class InlineCitation:
    """A ``path:lines`` reference found inside free-form text."""

    file: str
    lines: str
    text: str


def _leading_int(text: str) -> int | None:
    match = _LEADING_INT_RE.match(text.strip())
    return int(match.group()) if match else None


def parse_line_range(lines: str) -> LineRange:
    """Parse a citation ``lines`` string into a ``LineRange``.

    Splits on the first ``-``.  Each side is trimmed and read from its leading
    digits.  The start must be present and at least 1.  A missing, invalid, or
    backwards end collapses the range to the start line.

    Raises:
        CitationParseError: If no valid start line can be read.
    """
    head, sep, tail = lines.partition("-")
    start = _leading_int(head)
    if start is None or start < 1:
        msg = f"Invalid line reference: {lines!r}"
        raise CitationParseError(msg)

    end = _leading_int(tail) if sep else None
    if end is not None and end < start:
        end = None
    return LineRange(start=start, end=end)


def find_inline_citations(text: str) -> list[InlineCitation]:
    """Return every ``path:line`` or ``path:start-end`` reference in *text*, in order."""
    found: list[InlineCitation] = []
    for match in INLINE_CITATION_RE.finditer(text):
        path, start, end = match.groups()
        lines = f"{start}-{end}" if end else start
        found.append(InlineCitation(file=path, lines=lines, text=match.group()))
    return found
