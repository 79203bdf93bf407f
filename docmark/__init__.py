"""
docmark: rewrites Markdown typed into a Google Doc as native document styling.

The engine (document model, passes, pipeline) has no Google dependency; the
Docs loader and renderer translate between the API's JSON and the model.
"""

from docmark.document import Document, GlyphType, ListItem, Match, Paragraph, Table, TableCell, Text, TextStyle
from docmark.highlight import HiliteMeHighlighter, PygmentsHighlighter, get_highlighter, parse_highlight_markup
from docmark.pipeline import FormatReport, MarkdownFormatter

__all__ = [
    "Document",
    "FormatReport",
    "get_highlighter",
    "GlyphType",
    "HiliteMeHighlighter",
    "ListItem",
    "MarkdownFormatter",
    "Match",
    "Paragraph",
    "parse_highlight_markup",
    "PygmentsHighlighter",
    "Table",
    "TableCell",
    "Text",
    "TextStyle",
]
