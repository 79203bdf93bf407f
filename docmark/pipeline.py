"""
Markdown Formatting Pipeline

Runs the passes in their load-bearing order over one document:

    paragraphs -> code_blocks -> backquotes -> bold -> links -> italics -> headings -> lists

and collects the change count of every pass into a `FormatReport` that lives
only as long as the invocation.

Example:
    >>> formatter = MarkdownFormatter(config, highlighter)
    >>> report = formatter.format(Document.from_lines(["# Title", "Some **bold** text"]))
    >>> report.changes
    2
"""

import logging
from dataclasses import dataclass, field

from core.config import FormatterConfig, get_formatter_config
from docmark.highlight import get_highlighter
from docmark.interfaces import DocumentAdapter, Highlighter
from docmark.passes import (
    BACKQUOTE_PASS,
    BOLD_PASS,
    ITALIC_PASS,
    LINK_PASS,
    format_code_blocks,
    format_headings,
    format_lists,
    normalize_paragraphs,
    run_inline_pass,
)

logger = logging.getLogger(__name__)

PASS_LABELS: dict[str, str] = {
    "paragraphs": "Paragraphs split at line breaks",
    "code_blocks": "Code blocks highlighted",
    "backquotes": "Inline code spans",
    "bold": "Bold spans",
    "links": "Links",
    "italics": "Italic spans",
    "headings": "Headings",
    "lists": "List items",
}


@dataclass
class FormatReport:
    """Per-pass change counts for one formatting run, in execution order."""

    counts: dict[str, int] = field(default_factory=dict)

    def record(self, pass_name: str, changes: int) -> None:
        self.counts[pass_name] = self.counts.get(pass_name, 0) + changes

    @property
    def changes(self) -> int:
        return sum(self.counts.values())

    def summary(self) -> str:
        """Human-readable report, one line per pass that changed something."""
        lines = [f"- {PASS_LABELS.get(name, name)}: {count}" for name, count in self.counts.items() if count]
        if not lines:
            return "No Markdown found; the document was not changed."
        return f"Formatted {self.changes} element(s):\n" + "\n".join(lines)

    def to_dict(self) -> dict:
        return {"changes": self.changes, "passes": dict(self.counts)}


class MarkdownFormatter:
    """
    Rewrites Markdown syntax in a document into native styling.

    Args:
        config: Formatter configuration; defaults to the environment-driven global one.
        highlighter: Highlight service client; defaults to the configured backend.
    """

    def __init__(self, config: FormatterConfig | None = None, highlighter: Highlighter | None = None):
        self.config = config or get_formatter_config()
        self.highlighter = highlighter or get_highlighter(self.config)

    def format(self, doc: DocumentAdapter) -> FormatReport:
        """Run every pass over doc in place. Errors propagate with the completed passes applied."""
        report = FormatReport()
        report.record("paragraphs", normalize_paragraphs(doc))
        report.record("code_blocks", format_code_blocks(doc, self.highlighter, self.config))
        for inline_pass in (BACKQUOTE_PASS, BOLD_PASS, LINK_PASS, ITALIC_PASS):
            report.record(inline_pass.name, run_inline_pass(doc, inline_pass, self.config))
        report.record("headings", format_headings(doc))
        report.record("lists", format_lists(doc, self.config))

        logger.info(f"Formatting finished: {report.to_dict()}")
        return report
