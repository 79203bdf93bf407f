"""End-to-end tests of the formatting pipeline over in-memory documents."""

import pytest

from core.errors import HighlightServiceError
from docmark.document import Document, GlyphType, ListItem, Paragraph, Table, block_text
from docmark.highlight import PygmentsHighlighter
from docmark.pipeline import FormatReport, MarkdownFormatter


@pytest.fixture
def formatter(config, fake_highlighter):
    return MarkdownFormatter(config=config, highlighter=fake_highlighter)


class TestMarkdownFormatter:
    def test_formats_mixed_document(self, formatter):
        doc = Document.from_lines(
            [
                "# Title\rIntro with **bold** and `code`",
                "- first _item_",
                "1. step [one](https://example.com)",
                "```python",
                "print('hi')",
                "```",
            ]
        )

        report = formatter.format(doc)

        assert report.counts == {
            "paragraphs": 1,
            "code_blocks": 1,
            "backquotes": 1,
            "bold": 1,
            "links": 1,
            "italics": 1,
            "headings": 1,
            "lists": 2,
        }
        title, intro, bullet, numbered, code = doc.blocks
        assert isinstance(title, Paragraph) and title.heading == 1 and title.text.content == "Title"
        assert intro.text.content == "Intro with bold and code"
        assert isinstance(bullet, ListItem) and bullet.glyph is GlyphType.BULLET
        assert bullet.text.content == "first item"
        assert bullet.text.style_at(6).italic is True
        assert isinstance(numbered, ListItem) and numbered.glyph is GlyphType.NUMBER
        assert numbered.text.content == "step one"
        assert numbered.text.style_at(5).link == "https://example.com"
        assert isinstance(code, Table)
        assert block_text(code) == "print('hi')"

    def test_is_idempotent(self, formatter):
        doc = Document.from_lines(["# H", "**b** _i_ `c`", "* item", "```", "x", "```"])

        formatter.format(doc)
        snapshot = [(type(b), block_text(b)) for b in doc.blocks]
        second = formatter.format(doc)

        assert second.changes == 0
        assert [(type(b), block_text(b)) for b in doc.blocks] == snapshot

    def test_code_block_content_is_not_reformatted(self, formatter):
        doc = Document.from_lines(["```", "# not a heading", "**kwargs", "- not a list", "```"])

        report = formatter.format(doc)

        assert report.counts["headings"] == 0
        assert report.counts["lists"] == 0
        assert block_text(doc.blocks[0]) == "# not a heading\n**kwargs\n- not a list"

    def test_local_highlighter_accepts_error_tokens(self, config):
        formatter = MarkdownFormatter(config=config, highlighter=PygmentsHighlighter())
        doc = Document.from_lines(["```python", "price = $5", "```"])

        report = formatter.format(doc)

        assert report.counts["code_blocks"] == 1
        assert isinstance(doc.blocks[0], Table)
        assert block_text(doc.blocks[0]) == "price = $5"

    def test_highlight_failure_propagates(self, config, failing_highlighter):
        formatter = MarkdownFormatter(config=config, highlighter=failing_highlighter(HighlightServiceError("down")))
        doc = Document.from_lines(["a\rb", "```", "x", "```"])

        with pytest.raises(HighlightServiceError):
            formatter.format(doc)

        # Passes that finished before the failure stay applied.
        assert [block_text(b) for b in doc.blocks] == ["a", "b", "```", "x", "```"]

    def test_plain_document_reports_no_changes(self, formatter):
        report = formatter.format(Document.from_lines(["nothing to see"]))

        assert report.changes == 0
        assert report.summary() == "No Markdown found; the document was not changed."


class TestFormatReport:
    def test_summary_lists_passes_with_changes(self):
        report = FormatReport()
        report.record("bold", 2)
        report.record("links", 0)
        report.record("headings", 1)

        assert report.summary() == "Formatted 3 element(s):\n- Bold spans: 2\n- Headings: 1"

    def test_to_dict(self):
        report = FormatReport()
        report.record("lists", 4)
        assert report.to_dict() == {"changes": 4, "passes": {"lists": 4}}
