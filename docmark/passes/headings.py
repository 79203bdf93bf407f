"""
Heading Classifier

Paragraphs starting with `# `, `## ` or `### ` become HEADING_1..3 and lose
the marker.
"""

import logging
import re

from docmark.document import Paragraph
from docmark.interfaces import DocumentAdapter

logger = logging.getLogger(__name__)

HEADING_MARKERS: tuple[tuple[int, re.Pattern[str]], ...] = (
    (1, re.compile(r"^# ")),
    (2, re.compile(r"^## ")),
    (3, re.compile(r"^### ")),
)


def format_headings(doc: DocumentAdapter) -> int:
    """
    Promote paragraphs with a leading heading marker to the matching heading rank.

    Markers that are not at offset 0, or that sit in list items, are skipped;
    the scan still moves past them.

    Returns:
        Number of paragraphs promoted.
    """
    changes = 0
    for rank, pattern in HEADING_MARKERS:
        match = doc.search(pattern)
        while match is not None:
            block = match.block
            if match.start == 0 and isinstance(block, Paragraph):
                doc.delete_range(match.element, match.start, match.end)
                doc.set_heading(block, rank)
                changes += 1
                logger.debug(f"Promoted paragraph {doc.index_of(block)} to heading {rank}")
            match = doc.search(pattern, from_match=match)

    logger.info(f"Heading classifier promoted {changes} paragraph(s)")
    return changes
