"""Unit tests for the list classifier."""

from docmark.document import Document, GlyphType, ListItem, Paragraph
from docmark.passes.lists import format_lists


class TestFormatLists:
    def test_bullet_markers(self, config):
        doc = Document.from_lines(["- dash", "* star", "+ plus"])

        assert format_lists(doc, config) == 3

        assert all(isinstance(b, ListItem) and b.glyph is GlyphType.BULLET for b in doc.blocks)
        assert [b.text.content for b in doc.blocks] == ["dash", "star", "plus"]

    def test_numbered_markers(self, config):
        doc = Document.from_lines(["1. first", "10. tenth"])

        assert format_lists(doc, config) == 2

        assert [b.glyph for b in doc.blocks] == [GlyphType.NUMBER, GlyphType.NUMBER]
        assert [b.text.content for b in doc.blocks] == ["first", "tenth"]

    def test_marker_without_whitespace_is_plain(self, config):
        doc = Document.from_lines(["-dash", "1.5 million"])
        assert format_lists(doc, config) == 0

    def test_keeps_line_spacing_and_styles(self, config):
        doc = Document.from_lines(["- bold"], line_spacing=200.0)
        doc.blocks[0].text.set_style(2, 5, bold=True)

        format_lists(doc, config)

        item = doc.blocks[0]
        assert item.line_spacing == 200.0
        assert item.text.style_at(0).bold is True
        assert len(doc.blocks) == 1

    def test_headings_are_left_alone(self, config):
        doc = Document.from_lines(["- heading"])
        doc.set_heading(doc.blocks[0], 1)

        assert format_lists(doc, config) == 0
        assert isinstance(doc.blocks[0], Paragraph)

    def test_indented_markers_need_opt_in(self, env_override):
        from core.config import get_formatter_config

        doc = Document.from_lines(["  - nested"])
        assert format_lists(doc, get_formatter_config()) == 0

        env_override(DOCMARK_ALLOW_INDENTED_LIST_MARKERS="true")
        assert format_lists(doc, get_formatter_config()) == 1
        assert doc.blocks[0].text.content == "nested"

    def test_visits_each_block_once(self, config):
        doc = Document.from_lines(["- - double"])

        assert format_lists(doc, config) == 1
        assert doc.blocks[0].text.content == "- double"
