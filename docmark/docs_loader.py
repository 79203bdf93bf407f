"""
Google Docs Document Loader

Converts a `documents.get` response into the in-memory `Document` the passes
work on. Only content the renderer can write back is accepted; anything else
(images, equations, footnotes, ...) raises UnsupportedContentError so the
document is never rewritten with elements silently dropped.
"""

import logging
from dataclasses import asdict
from typing import Any

from core.errors import UnsupportedContentError
from docmark.document import Document, GlyphType, ListItem, Paragraph, Table, TableCell, Text, TextStyle

logger = logging.getLogger(__name__)

ORDERED_GLYPH_TYPES = frozenset({"DECIMAL", "ZERO_DECIMAL", "UPPER_ALPHA", "ALPHA", "UPPER_ROMAN", "ROMAN"})

UNSUPPORTED_PARAGRAPH_ELEMENTS = (
    "inlineObjectElement",
    "equation",
    "footnoteReference",
    "pageBreak",
    "horizontalRule",
    "columnBreak",
    "person",
    "richLink",
    "autoText",
)


def rgb_to_hex(color: dict[str, Any] | None) -> str | None:
    """Convert a Docs `{"color": {"rgbColor": {...}}}` value to #rrggbb."""
    if not color:
        return None
    rgb = color.get("color", {}).get("rgbColor")
    if rgb is None:
        return None
    channels = (rgb.get("red", 0.0), rgb.get("green", 0.0), rgb.get("blue", 0.0))
    return "#" + "".join(f"{round(channel * 255):02x}" for channel in channels)


def text_style_from_api(style: dict[str, Any]) -> TextStyle:
    """Map a Docs API textStyle onto TextStyle."""
    font = style.get("weightedFontFamily", {}).get("fontFamily")
    size = style.get("fontSize", {}).get("magnitude")
    link = style.get("link", {}).get("url")
    return TextStyle(
        bold=style.get("bold"),
        italic=style.get("italic"),
        underline=style.get("underline"),
        strikethrough=style.get("strikethrough"),
        font_family=font,
        font_size=size,
        foreground=rgb_to_hex(style.get("foregroundColor")),
        background=rgb_to_hex(style.get("backgroundColor")),
        link=link,
    )


class DocsLoader:
    """Builds a Document from Google Docs API JSON."""

    def __init__(self, doc_json: dict[str, Any]):
        self.doc_json = doc_json
        self.lists: dict[str, Any] = doc_json.get("lists", {})
        self._unsupported: set[str] = set()

    def load(self) -> Document:
        content = self.doc_json.get("body", {}).get("content", [])
        document = Document(title=self.doc_json.get("title", ""))

        for position, element in enumerate(content):
            if "sectionBreak" in element:
                if position != 0:
                    self._unsupported.add("sectionBreak")
                continue
            if "paragraph" in element:
                document.blocks.append(self._load_paragraph(element["paragraph"]))
            elif "table" in element:
                document.blocks.append(self._load_table(element["table"]))
            elif "tableOfContents" in element:
                self._unsupported.add("tableOfContents")
            else:
                self._unsupported.add(next(iter(element.keys() - {"startIndex", "endIndex"}), "unknown"))

        if self._unsupported:
            raise UnsupportedContentError(list(self._unsupported))
        if not document.blocks:
            document.append_paragraph("")

        logger.debug(f"Loaded document '{document.title}' with {len(document.blocks)} block(s)")
        return document

    def _load_text(self, paragraph: dict[str, Any]) -> Text:
        text = Text()
        for element in paragraph.get("elements", []):
            for kind in UNSUPPORTED_PARAGRAPH_ELEMENTS:
                if kind in element:
                    self._unsupported.add(kind)
            run = element.get("textRun")
            if run is None:
                continue
            content = run.get("content", "")
            if not content:
                continue
            offset = len(text)
            text.insert(offset, content)
            style = text_style_from_api(run.get("textStyle", {}))
            # Inserted characters inherit the previous run's style; overwrite every attribute.
            text.set_style(offset, offset + len(content) - 1, **asdict(style))
        # Every Docs paragraph ends with a newline that belongs to the paragraph, not its text.
        if text.content.endswith("\n"):
            text.delete(len(text) - 1, len(text) - 1)
        return text

    def _glyph_for(self, bullet: dict[str, Any]) -> GlyphType:
        list_props = self.lists.get(bullet.get("listId", ""), {}).get("listProperties", {})
        levels = list_props.get("nestingLevels", [])
        level = bullet.get("nestingLevel", 0)
        if level < len(levels) and levels[level].get("glyphType") in ORDERED_GLYPH_TYPES:
            return GlyphType.NUMBER
        return GlyphType.BULLET

    def _load_paragraph(self, paragraph: dict[str, Any]) -> Paragraph | ListItem:
        text = self._load_text(paragraph)
        style = paragraph.get("paragraphStyle", {})
        line_spacing = style.get("lineSpacing")
        if "bullet" in paragraph:
            return ListItem(text, glyph=self._glyph_for(paragraph["bullet"]), line_spacing=line_spacing)

        named_style = style.get("namedStyleType", "NORMAL_TEXT")
        heading = int(named_style.rsplit("_", 1)[1]) if named_style.startswith("HEADING_") else 0
        return Paragraph(text, line_spacing=line_spacing, heading=heading)

    def _load_table(self, table: dict[str, Any]) -> Table:
        loaded = Table()
        for row in table.get("tableRows", []):
            loaded_row = loaded.append_row()
            for cell in row.get("tableCells", []):
                paragraphs = [self._load_text(c["paragraph"]) for c in cell.get("content", []) if "paragraph" in c]
                if any("table" in c for c in cell.get("content", [])):
                    self._unsupported.add("nested table")
                merged = Text()
                for i, part in enumerate(paragraphs):
                    if i:
                        merged.insert(len(merged), "\n")
                    start = len(merged)
                    merged.insert(start, part.content)
                    for run_start, run_end, style in part.runs():
                        merged.set_style(start + run_start, start + run_end - 1, **asdict(style))
                background = rgb_to_hex(cell.get("tableCellStyle", {}).get("backgroundColor"))
                loaded_row.cells.append(TableCell(merged, background=background, parent=loaded_row))
        return loaded


def load_document(doc_json: dict[str, Any]) -> Document:
    """Convert a Docs API document resource into a Document."""
    return DocsLoader(doc_json).load()


def body_end_index(doc_json: dict[str, Any]) -> int:
    """End index of the document body (one past the final newline)."""
    content = doc_json.get("body", {}).get("content", [])
    if not content:
        return 1
    return content[-1].get("endIndex", 1)
