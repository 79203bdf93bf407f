"""
Abstract interfaces consumed by the formatting engine.

The passes never reach for a global document; they receive a handle that
satisfies `DocumentAdapter` and a `Highlighter` for code blocks. `Document`
(docmark/document.py) is the in-memory implementation used for Google Docs.
"""

import re
from typing import Any, Protocol, runtime_checkable

from docmark.document import Block, GlyphType, ListItem, Match, Paragraph, Table, Text, TextStyle


@runtime_checkable
class DocumentAdapter(Protocol):
    """Operations the passes need from a host document tree."""

    blocks: list[Block]

    def search(self, pattern: re.Pattern[str], from_match: Match | None = None) -> Match | None:
        """Find the next occurrence of pattern, optionally resuming after a previous match."""
        ...

    def index_of(self, block: Block) -> int:
        """Position of a top-level block."""
        ...

    def get_text(self, element: Text) -> str:
        """Characters of a text node."""
        ...

    def delete_range(self, element: Text, start: int, end: int) -> None:
        """Delete characters start..end inclusive."""
        ...

    def insert_text(self, element: Text, offset: int, text: str) -> None:
        """Insert text at offset."""
        ...

    def set_style(self, element: Text, start: int, end: int, attribute: str, value: Any) -> None:
        """Set one style attribute on characters start..end inclusive."""
        ...

    def set_link(self, element: Text, start: int, end: int, url: str) -> None:
        """Attach a link target to characters start..end inclusive."""
        ...

    def get_style(self, element: Text, offset: int) -> TextStyle:
        """Style of the character at offset."""
        ...

    def remove_block(self, block: Block) -> float | None:
        """Remove a top-level block, returning its line spacing. Fails for the only block."""
        ...

    def insert_paragraph(self, index: int, text: str = "", line_spacing: float | None = None) -> Paragraph:
        """Insert a plain paragraph at a top-level index."""
        ...

    def append_paragraph(self, text: str = "") -> Paragraph:
        """Append a plain paragraph at the end of the body."""
        ...

    def set_heading(self, block: Paragraph, rank: int) -> None:
        """Promote a paragraph to heading rank 1..6 (0 resets to normal text)."""
        ...

    def insert_list_item(
        self, index: int, text: str, glyph: GlyphType, line_spacing: float | None = None
    ) -> ListItem:
        """Insert a list item at a top-level index."""
        ...

    def insert_table(self, index: int) -> Table:
        """Insert an empty table at a top-level index."""
        ...


@runtime_checkable
class Highlighter(Protocol):
    """Syntax highlighting service: source text in, flat highlighted markup out."""

    def highlight(self, code: str, lexer: str) -> str:
        """Return wrapper/pre/span markup for code highlighted with the named lexer."""
        ...
