"""
Paragraph Normalizer

Google Docs keeps Shift+Enter line breaks inside one paragraph (as a vertical
tab in the API, a carriage return in Apps Script). Every later pass assumes one
logical line per paragraph, so those paragraphs are split first.
"""

import logging
import re

from docmark.document import Paragraph
from docmark.interfaces import DocumentAdapter
from docmark.passes.base import copy_styles, delete_block

logger = logging.getLogger(__name__)

LINE_BREAK_RE = re.compile("[\u000b\r]")


def normalize_paragraphs(doc: DocumentAdapter) -> int:
    """
    Split paragraphs containing line-wrap markers into one paragraph per line.

    The new paragraphs are inserted where the original was, keep its line
    spacing, heading level and character styles, and the original is removed.

    Returns:
        Number of paragraphs that were split.
    """
    changes = 0
    index = 0
    while index < len(doc.blocks):
        block = doc.blocks[index]
        if not isinstance(block, Paragraph) or not LINE_BREAK_RE.search(block.text.content):
            index += 1
            continue

        source = block.text
        content = source.content
        segments = []
        seg_start = 0
        for marker in LINE_BREAK_RE.finditer(content):
            segments.append((seg_start, marker.start()))
            seg_start = marker.end()
        segments.append((seg_start, len(content)))

        for offset, (start, end) in enumerate(segments):
            paragraph = doc.insert_paragraph(index + offset, content[start:end], line_spacing=block.line_spacing)
            if block.heading:
                doc.set_heading(paragraph, block.heading)
            copy_styles(doc, source, start, end, paragraph.text)

        delete_block(doc, block)
        logger.debug(f"Split paragraph at index {index} into {len(segments)} paragraphs")
        index += len(segments)
        changes += 1

    logger.info(f"Paragraph normalizer split {changes} paragraph(s)")
    return changes
