"""
Code Block Extractor & Highlighter

Turns a fenced region

    ```python
    def foo():
        return 1
    ```

into a single-cell, borderless table whose text is painted with the colors
returned by the highlight service, in a monospace font, on the highlighter's
background color.

The highlight call happens before the fenced blocks are touched; the blocks
are only removed and replaced once highlighted markup has been parsed, so a
failing service leaves the document exactly as it was.
"""

import logging
import re

from core.config import FormatterConfig
from docmark.document import Match, Table, block_text
from docmark.highlight import HighlightedCode, parse_highlight_markup
from docmark.interfaces import DocumentAdapter, Highlighter
from docmark.passes.base import delete_block

logger = logging.getLogger(__name__)

FENCE_RE = re.compile(r"```")


def _find_closing_fence(doc: DocumentAdapter, opening: Match) -> Match | None:
    """Next fence after the opening one that lives in a later block."""
    candidate = doc.search(FENCE_RE, from_match=opening)
    while candidate is not None and candidate.block is opening.block:
        candidate = doc.search(FENCE_RE, from_match=candidate)
    return candidate


def _insert_code_table(doc: DocumentAdapter, index: int, code: HighlightedCode, config: FormatterConfig) -> Table:
    table = doc.insert_table(index)
    table.border_width = 0
    cell = table.append_row().append_cell()
    cell.set_text(code.text)
    for span in code.spans:
        cell.text.set_style(span.start, span.end, foreground=span.color)
    cell.set_background(code.background)
    cell.set_font(config.code_font)
    return table


def format_code_blocks(doc: DocumentAdapter, highlighter: Highlighter, config: FormatterConfig) -> int:
    """
    Replace every fenced code region with a highlighted code table.

    An opening fence without a closing fence stops the pass and is left as-is.
    Highlight service errors propagate to the caller.

    Returns:
        Number of code blocks rendered.
    """
    changes = 0
    while True:
        opening = doc.search(FENCE_RE)
        if opening is None:
            break
        closing = _find_closing_fence(doc, opening)
        if closing is None:
            logger.warning(f"Unterminated code fence in {opening.element.content!r}; leaving it unformatted")
            break

        open_index = doc.index_of(opening.block)
        close_index = doc.index_of(closing.block)
        lexer = opening.element.content[opening.end + 1 :].strip() or config.default_lexer
        fenced = doc.blocks[open_index : close_index + 1]
        code = "\n".join(block_text(block) for block in fenced[1:-1]).strip()

        logger.debug(f"Highlighting code block at blocks [{open_index}, {close_index}] lexer={lexer} chars={len(code)}")
        highlighted = parse_highlight_markup(highlighter.highlight(code, lexer))

        _insert_code_table(doc, open_index, highlighted, config)
        for block in fenced:
            delete_block(doc, block)
        changes += 1

    logger.info(f"Code block pass rendered {changes} block(s)")
    return changes
