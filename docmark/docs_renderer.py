"""
Document to Google Docs Renderer

Translates a formatted `Document` back into Google Docs API `batchUpdate`
requests. The body is cleared with one `deleteContentRange` and every block is
re-inserted in order, tracking the cursor the same way the insertion indices
shift inside the batch (requests in one batch apply sequentially).

Blocks are rendered into the paragraph that survives the clear:

- paragraphs and list items: `insertText` (text plus a newline unless the
  next block is a table or this is the last block), a text-style reset over
  the inserted range, one `updateTextStyle` per styled run, then
  `updateParagraphStyle` for the named style and line spacing
- consecutive list items with the same glyph share one `createParagraphBullets`
- a paragraph following a list gets `deleteParagraphBullets` so bullets do not
  bleed into it (Docs copies the paragraph style on every split)
- tables: `insertTable` at the cursor, cell `insertText` in row-major order,
  cell text styles, then `updateTableCellStyle` for backgrounds and borders

Table index math, for a table inserted at location L:
    - the API inserts a newline at L, the table starts at L + 1
    - cell (r, c) content starts at L + 4 + r * (2 * cols + 1) + 2 * c,
      plus the length of text already inserted into earlier cells
    - the table consumes 2 + rows * (2 * cols + 1) indices plus its text

Example:
    >>> renderer = DocumentRenderer()
    >>> requests = renderer.render(Document.from_lines(["Hello"]), end_index=8)
    >>> [next(iter(r)) for r in requests][:2]
    ['deleteContentRange', 'deleteParagraphBullets']
"""

from __future__ import annotations

import logging
import re
from typing import Any

from docmark.document import Document, GlyphType, ListItem, Paragraph, Table, Text, TextStyle

logger = logging.getLogger(__name__)

BULLET_PRESET_UNORDERED = "BULLET_DISC_CIRCLE_SQUARE"
BULLET_PRESET_ORDERED = "NUMBERED_DECIMAL_ALPHA_ROMAN"

BULLET_PRESETS: dict[GlyphType, str] = {
    GlyphType.BULLET: BULLET_PRESET_UNORDERED,
    GlyphType.NUMBER: BULLET_PRESET_ORDERED,
}

HEADING_STYLE_MAP: dict[int, str] = {
    0: "NORMAL_TEXT",
    1: "HEADING_1",
    2: "HEADING_2",
    3: "HEADING_3",
    4: "HEADING_4",
    5: "HEADING_5",
    6: "HEADING_6",
}

# Every text style field the engine can produce; used to reset inherited styles.
RESET_TEXT_STYLE_FIELDS = (
    "bold,italic,underline,strikethrough,weightedFontFamily,fontSize,foregroundColor,backgroundColor,link"
)

_HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def hex_to_rgb(color: str) -> dict[str, float]:
    """Convert #rrggbb to a Docs API rgbColor dict with 0..1 channels."""
    found = _HEX_COLOR_RE.match(color)
    if not found:
        raise ValueError(f"Expected a #rrggbb hex string, got {color!r}")
    value = found.group(1)
    return {
        "red": int(value[0:2], 16) / 255,
        "green": int(value[2:4], 16) / 255,
        "blue": int(value[4:6], 16) / 255,
    }


def _color(hex_color: str) -> dict[str, Any]:
    return {"color": {"rgbColor": hex_to_rgb(hex_color)}}


def text_style_to_api(style: TextStyle) -> dict[str, Any]:
    """Map TextStyle onto a Docs API textStyle containing only the set attributes."""
    api: dict[str, Any] = {}
    for name in ("bold", "italic", "underline", "strikethrough"):
        value = getattr(style, name)
        if value is not None:
            api[name] = value
    if style.font_family is not None:
        api["weightedFontFamily"] = {"fontFamily": style.font_family}
    if style.font_size is not None:
        api["fontSize"] = {"magnitude": style.font_size, "unit": "PT"}
    if style.foreground is not None:
        api["foregroundColor"] = _color(style.foreground)
    if style.background is not None:
        api["backgroundColor"] = _color(style.background)
    if style.link is not None:
        api["link"] = {"url": style.link}
    return api


class DocumentRenderer:
    """
    Builds the batchUpdate request list that replaces a document body.

    Attributes:
        requests: Requests generated by the last render() call.
        cursor_index: Insertion point for the next block (1-based body index).
    """

    def __init__(self) -> None:
        self.requests: list[dict] = []
        self.cursor_index: int = 1
        self._list_start_index: int | None = None
        self._list_end_index: int = 1
        self._list_glyph: GlyphType | None = None
        self._just_exited_list: bool = False

    def render(self, doc: Document, end_index: int) -> list[dict]:
        """
        Generate requests replacing the body of a document whose content ends at end_index.

        Args:
            doc: The formatted document.
            end_index: endIndex of the last body element in the fetched document.

        Returns:
            Requests in execution order.
        """
        self.requests = []
        self.cursor_index = 1
        self._list_start_index = None
        self._list_glyph = None
        self._just_exited_list = False

        # The final newline of the body can never be deleted.
        if end_index - 1 > 1:
            self.requests.append({"deleteContentRange": {"range": {"startIndex": 1, "endIndex": end_index - 1}}})
        # The surviving paragraph may still carry the old last paragraph's bullet.
        self.requests.append({"deleteParagraphBullets": {"range": {"startIndex": 1, "endIndex": 2}}})

        blocks = doc.blocks
        for position, block in enumerate(blocks):
            following = blocks[position + 1] if position + 1 < len(blocks) else None
            if isinstance(block, Table):
                self._close_list()
                self._render_table(block)
            else:
                newline = following is not None and not isinstance(following, Table)
                self._render_paragraph(block, newline)
        self._close_list()

        logger.debug(f"Rendered {len(blocks)} block(s) into {len(self.requests)} request(s)")
        return self.requests

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def _insert_text(self, text: str, index: int) -> None:
        if text:
            self.requests.append({"insertText": {"text": text, "location": {"index": index}}})

    def _style_text(self, text: Text, start_index: int) -> None:
        """Reset inherited styles over an inserted text, then apply its own runs."""
        if not len(text):
            return
        self.requests.append(
            {
                "updateTextStyle": {
                    "range": {"startIndex": start_index, "endIndex": start_index + len(text)},
                    "textStyle": {},
                    "fields": RESET_TEXT_STYLE_FIELDS,
                }
            }
        )
        for run_start, run_end, style in text.runs():
            api_style = text_style_to_api(style)
            if not api_style:
                continue
            self.requests.append(
                {
                    "updateTextStyle": {
                        "range": {"startIndex": start_index + run_start, "endIndex": start_index + run_end},
                        "textStyle": api_style,
                        "fields": ",".join(api_style.keys()),
                    }
                }
            )

    # ------------------------------------------------------------------
    # Paragraphs and lists
    # ------------------------------------------------------------------

    def _render_paragraph(self, block: Paragraph | ListItem, newline: bool) -> None:
        start = self.cursor_index
        content = block.text.content
        self._insert_text(content + ("\n" if newline else ""), start)
        self._style_text(block.text, start)

        # An empty paragraph still owns its newline.
        paragraph_range = {"startIndex": start, "endIndex": start + max(len(content), 1)}
        heading = block.heading if isinstance(block, Paragraph) else 0
        paragraph_style: dict[str, Any] = {"namedStyleType": HEADING_STYLE_MAP[heading]}
        if block.line_spacing is not None:
            paragraph_style["lineSpacing"] = block.line_spacing
        self.requests.append(
            {
                "updateParagraphStyle": {
                    "range": paragraph_range,
                    "paragraphStyle": paragraph_style,
                    "fields": ",".join(paragraph_style.keys()),
                }
            }
        )

        self.cursor_index = start + len(content) + (1 if newline else 0)

        if isinstance(block, ListItem):
            if self._list_glyph is not None and self._list_glyph != block.glyph:
                self._close_list()
            if self._list_start_index is None:
                self._list_start_index = start
                self._list_glyph = block.glyph
            self._list_end_index = paragraph_range["endIndex"]
        else:
            self._close_list()
            if self._just_exited_list:
                self.requests.append({"deleteParagraphBullets": {"range": paragraph_range}})
                self._just_exited_list = False
                logger.debug(f"Emitted deleteParagraphBullets for range [{start}, {paragraph_range['endIndex']})")

    def _close_list(self) -> None:
        """Apply bullets to the list run that just ended, if any."""
        if self._list_start_index is None:
            return
        preset = BULLET_PRESETS[self._list_glyph]
        self.requests.append(
            {
                "createParagraphBullets": {
                    "range": {"startIndex": self._list_start_index, "endIndex": self._list_end_index},
                    "bulletPreset": preset,
                }
            }
        )
        logger.debug(f"Applied bullets: preset={preset}, range=[{self._list_start_index}, {self._list_end_index})")
        self._list_start_index = None
        self._list_glyph = None
        self._just_exited_list = True

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def _render_table(self, table: Table) -> None:
        rows = len(table.rows)
        cols = table.column_count
        if rows == 0 or cols == 0:
            logger.warning(f"Skipping table with invalid dimensions {rows}x{cols}")
            return

        location = self.cursor_index
        table_start = location + 1
        self.requests.append({"insertTable": {"location": {"index": location}, "rows": rows, "columns": cols}})

        text_offset = 0
        for r, row in enumerate(table.rows):
            for c, cell in enumerate(row.cells):
                if not len(cell.text):
                    continue
                insertion_index = location + 4 + r * (2 * cols + 1) + c * 2 + text_offset
                self._insert_text(cell.text.content, insertion_index)
                self._style_text(cell.text, insertion_index)
                logger.debug(f"Table cell ({r},{c}): {len(cell.text)} char(s) at index {insertion_index}")
                text_offset += len(cell.text)

        for r, row in enumerate(table.rows):
            for c, cell in enumerate(row.cells):
                if cell.background is None:
                    continue
                self.requests.append(
                    {
                        "updateTableCellStyle": {
                            "tableRange": {
                                "tableCellLocation": {
                                    "tableStartLocation": {"index": table_start},
                                    "rowIndex": r,
                                    "columnIndex": c,
                                },
                                "rowSpan": 1,
                                "columnSpan": 1,
                            },
                            "tableCellStyle": {"backgroundColor": _color(cell.background)},
                            "fields": "backgroundColor",
                        }
                    }
                )

        if table.border_width is not None:
            border = {
                "width": {"magnitude": table.border_width, "unit": "PT"},
                "dashStyle": "SOLID",
                "color": _color("#ffffff"),
            }
            self.requests.append(
                {
                    "updateTableCellStyle": {
                        "tableStartLocation": {"index": table_start},
                        "tableCellStyle": {
                            "borderLeft": border,
                            "borderRight": border,
                            "borderTop": border,
                            "borderBottom": border,
                        },
                        "fields": "borderLeft,borderRight,borderTop,borderBottom",
                    }
                }
            )

        self.cursor_index = location + 2 + rows * (2 * cols + 1) + text_offset
        logger.debug(f"Table complete: {rows}x{cols}, {text_offset} chars inserted, cursor at {self.cursor_index}")


def render_requests(doc: Document, end_index: int) -> list[dict]:
    """Convenience wrapper around DocumentRenderer.render."""
    return DocumentRenderer().render(doc, end_index)


__all__ = [
    "BULLET_PRESET_ORDERED",
    "BULLET_PRESET_UNORDERED",
    "DocumentRenderer",
    "HEADING_STYLE_MAP",
    "hex_to_rgb",
    "render_requests",
    "text_style_to_api",
]
