"""
Syntax Highlight Service Clients

Code blocks are highlighted outside the engine. Two backends produce the same
markup shape, a wrapper element carrying the background color around a single
`<pre>` whose children are plain text and color-styled `<span>` nodes:

    <div style="background: #ffffff; ..."><pre style="margin: 0">
    <span style="color: #008800; font-weight: bold">def</span> foo():...</pre></div>

- `HiliteMeHighlighter` calls the hilite.me HTTP API.
- `PygmentsHighlighter` renders locally from the Pygments token stream.

`parse_highlight_markup()` turns that markup back into the plain text plus the
colored character ranges that the code block pass paints into a table cell.
"""

import html
import logging
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser

import httpx
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from core.config import FormatterConfig
from core.errors import HighlightMarkupError, HighlightServiceError

logger = logging.getLogger(__name__)

# hilite.me wraps the <pre> in a bordered div; we only keep its background.
HILITE_DIV_STYLES = "background: #ffffff; overflow:auto; width:auto; padding:.2em .6em;"

_HEX_COLOR = r"#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{3})\b"
_BACKGROUND_RE = re.compile(rf"background(?:-color)?\s*:\s*({_HEX_COLOR})")
_COLOR_RE = re.compile(rf"(?<![-\w])color\s*:\s*({_HEX_COLOR})")
_PYGMENTS_COLOR_RE = re.compile(r"^(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


def normalize_hex_color(color: str) -> str:
    """Lower-case a #rgb / #rrggbb color and expand the short form."""
    color = color.lower()
    if len(color) == 4:
        color = "#" + "".join(ch * 2 for ch in color[1:])
    return color


@dataclass
class ColorSpan:
    """A colored range of highlighted text; `end` is inclusive."""

    start: int
    end: int
    color: str


@dataclass
class HighlightedCode:
    """Highlighted code ready to be painted: trimmed text, background and colored ranges."""

    text: str
    background: str
    spans: list[ColorSpan] = field(default_factory=list)


class _HighlightMarkupParser(HTMLParser):
    """
    Walk wrapper > pre > (text | span)* markup, accumulating a running offset.

    Depth 1 is the wrapper, depth 2 its single child, depth 3 the spans.
    """

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.background: str | None = None
        self.pieces: list[str] = []
        self.raw_spans: list[tuple[int, int, str]] = []
        self._offset = 0
        self._depth = 0
        self._wrapper_children = 0
        self._span_color: str | None = None
        self._span_start = 0
        self._in_span = False

    def handle_starttag(self, tag, attrs):
        self._depth += 1
        style = dict(attrs).get("style") or ""
        if self._depth == 1:
            found = _BACKGROUND_RE.search(style)
            if not found:
                raise HighlightMarkupError(f"Highlight wrapper <{tag}> has no background color (style={style!r})")
            self.background = normalize_hex_color(found.group(1))
        elif self._depth == 2:
            self._wrapper_children += 1
            if self._wrapper_children > 1:
                raise HighlightMarkupError("Highlight wrapper must contain exactly one child element")
        elif self._depth == 3:
            if tag != "span":
                raise HighlightMarkupError(f"Unexpected <{tag}> inside highlighted code")
            self._in_span = True
            self._span_start = self._offset
            if style:
                found = _COLOR_RE.search(style)
                if not found:
                    raise HighlightMarkupError(f"Highlighted span has no foreground color (style={style!r})")
                self._span_color = normalize_hex_color(found.group(1))
            else:
                self._span_color = None
        else:
            raise HighlightMarkupError(f"Nested <{tag}> inside a highlighted span is not supported")

    def handle_endtag(self, tag):
        if self._depth == 3 and self._in_span:
            if self._span_color is not None and self._offset > self._span_start:
                self.raw_spans.append((self._span_start, self._offset, self._span_color))
            self._in_span = False
            self._span_color = None
        self._depth -= 1

    def handle_data(self, data):
        if self._depth < 2:
            # Whitespace between the wrapper and its child is not code.
            return
        self.pieces.append(data)
        self._offset += len(data)


def parse_highlight_markup(markup: str) -> HighlightedCode:
    """
    Rebuild highlighted code from flat wrapper/pre/span markup.

    Spans are recorded as half-open ranges over the concatenated text while
    walking the children left to right, then shifted onto the trimmed text and
    converted to inclusive ends. Plain text nodes only advance the offset.

    Raises:
        HighlightMarkupError: if the markup lacks a wrapper background, has more
            than one wrapper child, or a styled span without a color.
    """
    parser = _HighlightMarkupParser()
    parser.feed(markup)
    parser.close()

    if parser.background is None:
        raise HighlightMarkupError("Highlight markup has no wrapper element")

    full_text = "".join(parser.pieces)
    text = full_text.strip()
    lead = len(full_text) - len(full_text.lstrip())

    spans: list[ColorSpan] = []
    for start, end, color in parser.raw_spans:
        start = max(start - lead, 0)
        end = min(end - lead, len(text))
        if end <= start:
            continue
        spans.append(ColorSpan(start, end - 1, color))

    logger.debug(f"Parsed highlight markup: {len(text)} chars, {len(spans)} colored spans, bg={parser.background}")
    return HighlightedCode(text=text, background=parser.background, spans=spans)


class HiliteMeHighlighter:
    """Highlight Service Client for the hilite.me HTTP API."""

    def __init__(self, url: str, style: str = "default", timeout: float = 10.0, client: httpx.Client | None = None):
        self.url = url
        self.style = style
        self.timeout = timeout
        self._client = client

    def highlight(self, code: str, lexer: str) -> str:
        data = {"code": code, "lexer": lexer, "style": self.style, "divstyles": HILITE_DIV_STYLES}
        logger.debug(f"[hilite] POST {self.url} lexer={lexer} chars={len(code)}")
        try:
            if self._client is not None:
                resp = self._client.post(self.url, data=data, timeout=self.timeout)
            else:
                with httpx.Client(follow_redirects=True) as client:
                    resp = client.post(self.url, data=data, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise HighlightServiceError(f"Highlight service request failed: {e}", lexer=lexer) from e

        if resp.status_code != 200:
            raise HighlightServiceError(
                f"Highlight service returned HTTP {resp.status_code} for lexer '{lexer}'",
                lexer=lexer,
                status_code=resp.status_code,
            )
        return resp.text


class PygmentsHighlighter:
    """
    Local highlighter producing hilite.me-shaped markup with Pygments.

    The markup is built from the lexer's tokens rather than HtmlFormatter
    output: styles may give a token only a border, weight or slant, and the
    code pass can only paint foreground colors. Such tokens become plain text.
    """

    def __init__(self, style: str = "default", fallback_lexer: str = "text"):
        self.style = style
        self.fallback_lexer = fallback_lexer

    def highlight(self, code: str, lexer: str) -> str:
        try:
            pygments_lexer = get_lexer_by_name(lexer)
        except ClassNotFound:
            logger.warning(f"Unknown lexer '{lexer}', falling back to '{self.fallback_lexer}'")
            pygments_lexer = get_lexer_by_name(self.fallback_lexer)

        try:
            style = get_style_by_name(self.style)
        except ClassNotFound as e:
            raise HighlightServiceError(f"Unknown highlight style '{self.style}'", lexer=lexer) from e

        pieces = []
        for ttype, value in pygments_lexer.get_tokens(code):
            escaped = html.escape(value, quote=False)
            color = style.style_for_token(ttype)["color"]
            if color and _PYGMENTS_COLOR_RE.match(color):
                pieces.append(f'<span style="color: #{color}">{escaped}</span>')
            else:
                pieces.append(escaped)

        background = style.background_color or "#ffffff"
        return f'<div style="background: {background}"><pre style="margin: 0">{"".join(pieces)}</pre></div>'


def get_highlighter(config: FormatterConfig):
    """Build the highlighter selected by DOCMARK_HIGHLIGHT_BACKEND."""
    if config.highlight_backend == "pygments":
        return PygmentsHighlighter(style=config.highlight_style, fallback_lexer=config.default_lexer)
    return HiliteMeHighlighter(config.hilite_url, style=config.highlight_style, timeout=config.highlight_timeout)
