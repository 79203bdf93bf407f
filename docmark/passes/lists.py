"""
List Classifier

Paragraphs starting with `*`, `-` or `+` followed by whitespace become bulleted
list items; paragraphs starting with `1.` (any digits) followed by whitespace
become numbered list items.
"""

import logging
import re

from core.config import FormatterConfig
from docmark.document import GlyphType, Paragraph
from docmark.interfaces import DocumentAdapter
from docmark.passes.base import copy_styles, delete_block

logger = logging.getLogger(__name__)

# Tried in order; the first matching marker decides the glyph.
LIST_MARKERS: tuple[tuple[GlyphType, re.Pattern[str]], ...] = (
    (GlyphType.BULLET, re.compile(r"^[*+-]\s+")),
    (GlyphType.NUMBER, re.compile(r"^\d+\.\s+")),
)

INDENTED_LIST_MARKERS: tuple[tuple[GlyphType, re.Pattern[str]], ...] = (
    (GlyphType.BULLET, re.compile(r"^\s*[*+-]\s+")),
    (GlyphType.NUMBER, re.compile(r"^\s*\d+\.\s+")),
)


def format_lists(doc: DocumentAdapter, config: FormatterConfig) -> int:
    """
    Convert paragraphs with a leading list marker into list items.

    Each block is visited once. Headings are left alone. The marker is
    stripped, the remaining text keeps its character styles and the list item
    takes the paragraph's line spacing.

    Returns:
        Number of paragraphs converted.
    """
    markers = INDENTED_LIST_MARKERS if config.allow_indented_list_markers else LIST_MARKERS
    changes = 0
    index = 0
    while index < len(doc.blocks):
        block = doc.blocks[index]
        if isinstance(block, Paragraph) and not block.heading:
            source = block.text
            for glyph, pattern in markers:
                marker = pattern.match(source.content)
                if marker is None:
                    continue
                stripped = source.content[marker.end() :]
                item = doc.insert_list_item(index, stripped, glyph, line_spacing=block.line_spacing)
                copy_styles(doc, source, marker.end(), len(source), item.text)
                delete_block(doc, block)
                changes += 1
                logger.debug(f"Converted block {index} to {glyph.value.lower()} list item")
                break
        index += 1

    logger.info(f"List classifier converted {changes} paragraph(s)")
    return changes
