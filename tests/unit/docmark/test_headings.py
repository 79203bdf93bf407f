"""Unit tests for the heading classifier."""

from docmark.document import Document, GlyphType
from docmark.passes.headings import format_headings


class TestFormatHeadings:
    def test_promotes_three_ranks(self):
        doc = Document.from_lines(["# One", "## Two", "### Three", "#### Four"])

        assert format_headings(doc) == 3

        assert [b.heading for b in doc.blocks] == [1, 2, 3, 0]
        assert [b.text.content for b in doc.blocks] == ["One", "Two", "Three", "#### Four"]

    def test_marker_needs_trailing_space(self):
        doc = Document.from_lines(["#hashtag"])
        assert format_headings(doc) == 0

    def test_marker_must_start_the_paragraph(self):
        doc = Document.from_lines(["not # a heading"])
        assert format_headings(doc) == 0

    def test_list_items_are_not_promoted(self):
        doc = Document.from_lines(["x"])
        doc.insert_list_item(0, "# item", GlyphType.BULLET)

        assert format_headings(doc) == 0
        assert doc.blocks[0].text.content == "# item"

    def test_skipped_marker_does_not_stop_the_scan(self):
        doc = Document.from_lines(["x"])
        doc.insert_list_item(0, "# item", GlyphType.BULLET)
        doc.append_paragraph("# real")

        assert format_headings(doc) == 1
        assert doc.blocks[-1].heading == 1

    def test_second_run_finds_nothing(self):
        doc = Document.from_lines(["# Title"])
        format_headings(doc)
        assert format_headings(doc) == 0
