"""
Formatting passes.

Each pass takes the document handle explicitly, loops until it finds nothing
more to rewrite, and returns the number of changes it made.
"""

from docmark.passes.code_blocks import format_code_blocks
from docmark.passes.headings import format_headings
from docmark.passes.inline import (
    BACKQUOTE_PASS,
    BOLD_PASS,
    INLINE_PASSES,
    ITALIC_PASS,
    LINK_PASS,
    InlinePass,
    InlineRule,
    run_inline_pass,
)
from docmark.passes.lists import format_lists
from docmark.passes.normalizer import normalize_paragraphs

__all__ = [
    "BACKQUOTE_PASS",
    "BOLD_PASS",
    "INLINE_PASSES",
    "ITALIC_PASS",
    "LINK_PASS",
    "InlinePass",
    "InlineRule",
    "format_code_blocks",
    "format_headings",
    "format_lists",
    "normalize_paragraphs",
    "run_inline_pass",
]
