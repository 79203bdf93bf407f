"""
In-memory rich-text document tree.

This is the host model the formatting passes mutate: an ordered list of
top-level blocks (paragraphs, list items, tables), each paragraph owning a
`Text` node whose characters carry one `TextStyle` apiece. Offsets are
zero-based and, like the Google Docs / Apps Script text APIs this mirrors,
range ends are inclusive.

Any mutation of a `Text` invalidates offsets after the mutation point, so
callers must re-search after each change rather than cache matches.

Example:
    >>> doc = Document.from_lines(["Hello **world**"])
    >>> match = doc.search(re.compile(r"\\*\\*([^*]+)\\*\\*"))
    >>> (match.start, match.end)
    (6, 14)
"""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field, fields, replace
from typing import Any

from core.errors import LastBlockError

logger = logging.getLogger(__name__)


class OffsetError(IndexError):
    """Raised when a character range falls outside a text node."""

    pass


@dataclass(frozen=True)
class TextStyle:
    """Character-level style attributes. None means "inherit the default"."""

    bold: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    strikethrough: bool | None = None
    font_family: str | None = None
    font_size: float | None = None
    foreground: str | None = None
    background: str | None = None
    link: str | None = None

    def is_default(self) -> bool:
        return self == DEFAULT_STYLE

    def as_dict(self) -> dict[str, Any]:
        """Return only the attributes that are set."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


DEFAULT_STYLE = TextStyle()
STYLE_ATTRIBUTES = frozenset(f.name for f in fields(TextStyle))


class BlockType(str, enum.Enum):
    PARAGRAPH = "PARAGRAPH"
    LIST_ITEM = "LIST_ITEM"
    TABLE = "TABLE"


class GlyphType(str, enum.Enum):
    BULLET = "BULLET"
    NUMBER = "NUMBER"


class Text:
    """A run of characters with per-character styles, owned by a block or table cell."""

    def __init__(self, content: str = "", parent: Any = None, style: TextStyle = DEFAULT_STYLE):
        self._chars = content
        self._styles: list[TextStyle] = [style] * len(content)
        self.parent = parent

    def __len__(self) -> int:
        return len(self._chars)

    def __repr__(self) -> str:
        return f"Text({self._chars!r})"

    @property
    def content(self) -> str:
        return self._chars

    def _check_range(self, start: int, end: int) -> None:
        if start < 0 or end < start or end >= len(self._chars):
            raise OffsetError(f"Range [{start}, {end}] outside text of length {len(self._chars)}")

    def style_at(self, offset: int) -> TextStyle:
        if offset < 0 or offset >= len(self._chars):
            raise OffsetError(f"Offset {offset} outside text of length {len(self._chars)}")
        return self._styles[offset]

    def delete(self, start: int, end: int) -> None:
        """Delete characters start..end inclusive."""
        self._check_range(start, end)
        self._chars = self._chars[:start] + self._chars[end + 1 :]
        del self._styles[start : end + 1]

    def insert(self, offset: int, text: str) -> None:
        """Insert text at offset; new characters take the style of the character before them."""
        if offset < 0 or offset > len(self._chars):
            raise OffsetError(f"Insert offset {offset} outside text of length {len(self._chars)}")
        if not text:
            return
        if offset > 0:
            inherited = self._styles[offset - 1]
        elif self._styles:
            inherited = self._styles[0]
        else:
            inherited = DEFAULT_STYLE
        self._chars = self._chars[:offset] + text + self._chars[offset:]
        self._styles[offset:offset] = [inherited] * len(text)

    def set_text(self, text: str) -> None:
        """Replace the whole content, dropping all styles."""
        self._chars = text
        self._styles = [DEFAULT_STYLE] * len(text)

    def set_style(self, start: int, end: int, **attributes: Any) -> None:
        """Set style attributes on characters start..end inclusive."""
        unknown = set(attributes) - STYLE_ATTRIBUTES
        if unknown:
            raise ValueError(f"Unknown style attribute(s): {', '.join(sorted(unknown))}")
        self._check_range(start, end)
        for i in range(start, end + 1):
            self._styles[i] = replace(self._styles[i], **attributes)

    def set_style_all(self, **attributes: Any) -> None:
        if self._chars:
            self.set_style(0, len(self._chars) - 1, **attributes)

    def runs(self) -> Iterator[tuple[int, int, TextStyle]]:
        """Yield maximal (start, end_exclusive, style) runs of identical style."""
        if not self._chars:
            return
        run_start = 0
        for i in range(1, len(self._chars) + 1):
            if i == len(self._chars) or self._styles[i] != self._styles[run_start]:
                yield run_start, i, self._styles[run_start]
                run_start = i


@dataclass
class Paragraph:
    text: Text
    line_spacing: float | None = None
    heading: int = 0

    block_type = BlockType.PARAGRAPH

    def __post_init__(self):
        self.text.parent = self


@dataclass
class ListItem:
    text: Text
    glyph: GlyphType = GlyphType.BULLET
    line_spacing: float | None = None

    block_type = BlockType.LIST_ITEM

    def __post_init__(self):
        self.text.parent = self


@dataclass
class TableCell:
    text: Text = field(default_factory=Text)
    background: str | None = None
    parent: Any = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        self.text.parent = self

    def set_text(self, text: str) -> None:
        self.text.set_text(text)

    def set_background(self, color: str) -> None:
        self.background = color

    def set_font(self, font_family: str) -> None:
        self.text.set_style_all(font_family=font_family)


@dataclass
class TableRow:
    cells: list[TableCell] = field(default_factory=list)
    parent: Any = field(default=None, repr=False, compare=False)

    def append_cell(self, text: str = "") -> TableCell:
        cell = TableCell(Text(text), parent=self)
        self.cells.append(cell)
        return cell


@dataclass
class Table:
    rows: list[TableRow] = field(default_factory=list)
    border_width: float | None = None
    line_spacing: float | None = None

    block_type = BlockType.TABLE

    def append_row(self) -> TableRow:
        row = TableRow(parent=self)
        self.rows.append(row)
        return row

    def cell(self, row: int, column: int) -> TableCell:
        return self.rows[row].cells[column]

    @property
    def column_count(self) -> int:
        return max((len(row.cells) for row in self.rows), default=0)


Block = Paragraph | ListItem | Table


def block_text(block: Block) -> str:
    """Plain text of a block; table cells are joined with newlines."""
    if isinstance(block, Table):
        return "\n".join(cell.text.content for row in block.rows for cell in row.cells)
    return block.text.content


@dataclass
class Match:
    """A located pattern occurrence. `end` is inclusive."""

    element: Text
    start: int
    end: int
    groups: tuple[str, ...] = ()

    @property
    def block(self) -> Any:
        """Walk up from the matched text node to its owning block."""
        node = self.element
        while node is not None and not isinstance(node, (Paragraph, ListItem, Table)):
            node = getattr(node, "parent", None)
        return node

    @property
    def matched_text(self) -> str:
        return self.element.content[self.start : self.end + 1]


class Document:
    """
    Mutable document body: an ordered sequence of top-level blocks.

    Implements the DocumentAdapter protocol consumed by the formatting passes.
    """

    def __init__(self, blocks: list[Block] | None = None, title: str = ""):
        self.blocks: list[Block] = blocks if blocks is not None else []
        self.title = title

    @classmethod
    def from_lines(cls, lines: list[str], line_spacing: float | None = None) -> Document:
        """Build a document with one plain paragraph per line."""
        return cls([Paragraph(Text(line), line_spacing=line_spacing) for line in lines])

    def __len__(self) -> int:
        return len(self.blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def index_of(self, block: Block) -> int:
        for i, candidate in enumerate(self.blocks):
            if candidate is block:
                return i
        raise ValueError(f"Block {block!r} is not part of this document")

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _searchable(self) -> Iterator[Paragraph | ListItem]:
        for block in self.blocks:
            if isinstance(block, (Paragraph, ListItem)):
                yield block

    def search(self, pattern: re.Pattern[str], from_match: Match | None = None) -> Match | None:
        """
        Find the next occurrence of pattern in paragraph and list item text.

        Without from_match the scan starts at the top of the document. With
        from_match it resumes one character past from_match.start in the same
        text, then continues with the following blocks. Table content is not
        searched.
        """
        resume_block = from_match.block if from_match is not None else None
        started = from_match is None
        for block in self._searchable():
            pos = 0
            if not started:
                if block is not resume_block:
                    continue
                started = True
                pos = from_match.start + 1
                if pos > len(block.text):
                    continue
            found = pattern.search(block.text.content, pos)
            if found:
                return Match(block.text, found.start(), found.end() - 1, found.groups())
        if not started:
            logger.debug("search resumed from a match whose block is no longer in the document")
        return None

    # ------------------------------------------------------------------
    # Text operations
    # ------------------------------------------------------------------

    def get_text(self, element: Text) -> str:
        return element.content

    def delete_range(self, element: Text, start: int, end: int) -> None:
        element.delete(start, end)

    def insert_text(self, element: Text, offset: int, text: str) -> None:
        element.insert(offset, text)

    def set_style(self, element: Text, start: int, end: int, attribute: str, value: Any) -> None:
        element.set_style(start, end, **{attribute: value})

    def set_link(self, element: Text, start: int, end: int, url: str) -> None:
        element.set_style(start, end, link=url)

    def get_style(self, element: Text, offset: int) -> TextStyle:
        return element.style_at(offset)

    # ------------------------------------------------------------------
    # Block operations
    # ------------------------------------------------------------------

    def remove_block(self, block: Block) -> float | None:
        """Remove a block and return its line spacing. The only remaining block cannot be removed."""
        index = self.index_of(block)
        if len(self.blocks) == 1:
            raise LastBlockError("Can't remove the last paragraph in a document body")
        del self.blocks[index]
        return getattr(block, "line_spacing", None)

    def insert_paragraph(self, index: int, text: str = "", line_spacing: float | None = None) -> Paragraph:
        paragraph = Paragraph(Text(text), line_spacing=line_spacing)
        self.blocks.insert(index, paragraph)
        return paragraph

    def append_paragraph(self, text: str = "") -> Paragraph:
        return self.insert_paragraph(len(self.blocks), text)

    def set_heading(self, block: Paragraph, rank: int) -> None:
        if not isinstance(block, Paragraph):
            raise TypeError(f"Only paragraphs can become headings, got {type(block).__name__}")
        if not 0 <= rank <= 6:
            raise ValueError(f"Heading rank must be between 0 and 6, got {rank}")
        block.heading = rank

    def insert_list_item(
        self, index: int, text: str, glyph: GlyphType, line_spacing: float | None = None
    ) -> ListItem:
        item = ListItem(Text(text), glyph=glyph, line_spacing=line_spacing)
        self.blocks.insert(index, item)
        return item

    def insert_table(self, index: int) -> Table:
        table = Table()
        self.blocks.insert(index, table)
        return table
