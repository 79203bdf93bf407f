"""Helpers shared by the formatting passes."""

import logging

from core.errors import LastBlockError
from docmark.document import Block, Match, Text
from docmark.interfaces import DocumentAdapter

logger = logging.getLogger(__name__)


def delete_block(doc: DocumentAdapter, block: Block) -> float | None:
    """
    Remove a top-level block and return its line spacing.

    The host refuses to remove the only remaining block, so an empty
    placeholder paragraph is appended first in that case.
    """
    try:
        return doc.remove_block(block)
    except LastBlockError:
        logger.debug("Removing the last block; appending a placeholder paragraph first")
        doc.append_paragraph("")
        return doc.remove_block(block)


def copy_styles(
    doc: DocumentAdapter, source: Text, start: int, end: int, target: Text, target_offset: int = 0
) -> None:
    """Copy character styles of source[start:end] onto target, starting at target_offset."""
    for run_start, run_end, style in source.runs():
        lo = max(run_start, start)
        hi = min(run_end, end)
        if lo >= hi or style.is_default():
            continue
        for attribute, value in style.as_dict().items():
            doc.set_style(target, lo - start + target_offset, hi - start + target_offset - 1, attribute, value)


def strip_delimiters(doc: DocumentAdapter, match: Match, width: int) -> None:
    """Delete `width` delimiter characters from both ends of a match, trailing side first."""
    doc.delete_range(match.element, match.end - width + 1, match.end)
    doc.delete_range(match.element, match.start, match.start + width - 1)
