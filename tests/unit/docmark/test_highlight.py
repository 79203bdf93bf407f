"""
Unit tests for highlight markup parsing and the highlight service clients.

The HTTP client is exercised through httpx.MockTransport, so no request leaves
the process.
"""

import httpx
import pytest

from core.errors import HighlightMarkupError, HighlightServiceError
from docmark.highlight import (
    HiliteMeHighlighter,
    PygmentsHighlighter,
    get_highlighter,
    normalize_hex_color,
    parse_highlight_markup,
)

HILITE_SAMPLE = (
    "<!-- HTML generated using hilite.me -->"
    '<div style="background: #ffffff; overflow:auto;width:auto;border:solid gray;padding:.2em .6em;">'
    '<pre style="margin: 0; line-height: 125%">'
    '<span style="color: #008800; font-weight: bold">def</span> '
    '<span style="color: #0066BB; font-weight: bold">foo</span>():\n'
    '    <span style="color: #008800; font-weight: bold">return</span> '
    '<span style="color: #0000DD; font-weight: bold">1</span>\n'
    "</pre></div>"
)


class TestParseHighlightMarkup:
    def test_rebuilds_text_and_background(self):
        code = parse_highlight_markup(HILITE_SAMPLE)

        assert code.text == "def foo():\n    return 1"
        assert code.background == "#ffffff"

    def test_span_ranges_are_inclusive_and_exact(self):
        code = parse_highlight_markup(HILITE_SAMPLE)

        painted = [(code.text[span.start : span.end + 1], span.color) for span in code.spans]
        assert painted == [
            ("def", "#008800"),
            ("foo", "#0066bb"),
            ("return", "#008800"),
            ("1", "#0000dd"),
        ]

    def test_unstyled_span_is_plain_text(self):
        markup = (
            '<div style="background: #eeeeee"><pre>'
            '<span>x = </span><span style="color: #ff0000">1</span></pre></div>'
        )

        code = parse_highlight_markup(markup)

        assert code.text == "x = 1"
        assert len(code.spans) == 1
        assert (code.spans[0].start, code.spans[0].end) == (4, 4)

    def test_leading_whitespace_shifts_spans(self):
        markup = '<div style="background: #ffffff"><pre>\n  <span style="color: #123456">abc</span>\n</pre></div>'

        code = parse_highlight_markup(markup)

        assert code.text == "abc"
        assert (code.spans[0].start, code.spans[0].end) == (0, 2)

    def test_whitespace_only_span_is_dropped_after_trimming(self):
        markup = '<div style="background: #ffffff"><pre>x<span style="color: #123456">\n</span></pre></div>'

        code = parse_highlight_markup(markup)

        assert code.text == "x"
        assert code.spans == []

    def test_html_entities_are_decoded(self):
        markup = '<div style="background: #ffffff"><pre><span style="color: #111111">a &lt; b</span></pre></div>'

        code = parse_highlight_markup(markup)

        assert code.text == "a < b"
        assert code.spans[0].end == 4

    def test_background_color_property_is_accepted(self):
        markup = '<div style="background-color: #FFF"><pre>x</pre></div>'
        assert parse_highlight_markup(markup).background == "#ffffff"

    def test_wrapper_without_background_raises(self):
        with pytest.raises(HighlightMarkupError, match="background"):
            parse_highlight_markup('<div style="border: 1px"><pre>x</pre></div>')

    def test_styled_span_without_color_raises(self):
        markup = '<div style="background: #ffffff"><pre><span style="background-color: #000000">x</span></pre></div>'
        with pytest.raises(HighlightMarkupError, match="foreground"):
            parse_highlight_markup(markup)

    def test_multiple_wrapper_children_raise(self):
        markup = '<div style="background: #ffffff"><pre>a</pre><pre>b</pre></div>'
        with pytest.raises(HighlightMarkupError, match="exactly one"):
            parse_highlight_markup(markup)

    def test_nested_span_raises(self):
        markup = (
            '<div style="background: #ffffff"><pre>'
            '<span style="color: #000000"><span style="color: #111111">x</span></span></pre></div>'
        )
        with pytest.raises(HighlightMarkupError, match="Nested"):
            parse_highlight_markup(markup)

    def test_markup_without_wrapper_raises(self):
        with pytest.raises(HighlightMarkupError):
            parse_highlight_markup("just text")


class TestNormalizeHexColor:
    def test_expands_short_form(self):
        assert normalize_hex_color("#AbC") == "#aabbcc"

    def test_lowercases_long_form(self):
        assert normalize_hex_color("#A0B1C2") == "#a0b1c2"


class TestHiliteMeHighlighter:
    def _client(self, handler):
        return httpx.Client(transport=httpx.MockTransport(handler))

    def test_posts_form_fields(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = request.content.decode()
            return httpx.Response(200, text=HILITE_SAMPLE)

        highlighter = HiliteMeHighlighter("http://hilite.test/api", style="monokai", client=self._client(handler))

        assert highlighter.highlight("x = 1", "python") == HILITE_SAMPLE
        assert "lexer=python" in seen["body"]
        assert "style=monokai" in seen["body"]
        assert "divstyles=" in seen["body"]

    def test_non_200_raises_service_error(self):
        highlighter = HiliteMeHighlighter(
            "http://hilite.test/api", client=self._client(lambda request: httpx.Response(503))
        )

        with pytest.raises(HighlightServiceError) as exc_info:
            highlighter.highlight("x", "python")

        assert exc_info.value.status_code == 503
        assert exc_info.value.lexer == "python"

    def test_transport_error_raises_service_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        highlighter = HiliteMeHighlighter("http://hilite.test/api", client=self._client(handler))

        with pytest.raises(HighlightServiceError, match="request failed"):
            highlighter.highlight("x", "python")


class TestPygmentsHighlighter:
    def test_output_round_trips_through_parser(self):
        markup = PygmentsHighlighter().highlight("def foo():\n    return 1\n", "python")

        code = parse_highlight_markup(markup)

        assert code.text == "def foo():\n    return 1"
        assert code.spans
        assert any(code.text[s.start : s.end + 1] == "def" for s in code.spans)

    def test_unknown_lexer_falls_back(self):
        markup = PygmentsHighlighter(fallback_lexer="text").highlight("plain words", "no-such-language")
        assert parse_highlight_markup(markup).text == "plain words"

    @pytest.mark.parametrize(
        "code, lexer",
        [
            ("price = $5\n", "python"),
            ("x = a ? b : c\n", "python"),
            ("**bold** and _em_ text\n", "markdown"),
        ],
    )
    def test_uncolored_tokens_become_plain_text(self, code, lexer):
        highlighted = parse_highlight_markup(PygmentsHighlighter().highlight(code, lexer))

        assert highlighted.text == code.strip()
        assert all(span.color.startswith("#") and len(span.color) == 7 for span in highlighted.spans)

    def test_markup_spans_only_carry_colors(self):
        markup = PygmentsHighlighter().highlight("x = $y\n", "python")

        assert "border" not in markup
        assert "font-weight" not in markup

    def test_special_characters_are_escaped(self):
        markup = PygmentsHighlighter().highlight("if a < b and c > d: pass\n", "python")
        assert parse_highlight_markup(markup).text == "if a < b and c > d: pass"

    def test_unknown_style_raises_service_error(self):
        with pytest.raises(HighlightServiceError, match="style"):
            PygmentsHighlighter(style="no-such-style").highlight("x", "python")


class TestGetHighlighter:
    def test_defaults_to_hilite(self, config):
        assert isinstance(get_highlighter(config), HiliteMeHighlighter)

    def test_pygments_backend(self, env_override):
        env_override(DOCMARK_HIGHLIGHT_BACKEND="pygments")
        from core.config import get_formatter_config

        assert isinstance(get_highlighter(get_formatter_config()), PygmentsHighlighter)
