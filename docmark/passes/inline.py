"""
Inline Markup Rewriter

Four passes share one loop: find the first match of the pass's rules anywhere
in the document, restyle the payload, strip the delimiters (trailing side
first so the leading offsets stay valid), then search again from the top.

| Pass       | Syntax                 | Result                              |
|------------|------------------------|-------------------------------------|
| backquotes | `code`                 | code font, background and color     |
| bold       | **text**               | bold                                |
| links      | [name](scheme://url)   | "name" linked to url                |
| italics    | _text_, then *text*    | italic                              |

Run order matters: bold must run before italics, otherwise the single-star
italic rule would eat the inner half of `**text**`. Bold, link and italic
matches that touch inline code (code font on the inline-code background) are
skipped, which is what keeps code spans from being reinterpreted as emphasis.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import asdict, dataclass

from core.config import FormatterConfig
from docmark.document import Match, TextStyle
from docmark.interfaces import DocumentAdapter
from docmark.passes.base import strip_delimiters

logger = logging.getLogger(__name__)

InlineAction = Callable[[DocumentAdapter, Match, FormatterConfig], None]


@dataclass(frozen=True)
class InlineRule:
    """One delimiter pattern and what to do with its matches."""

    pattern: re.Pattern[str]
    action: InlineAction


@dataclass(frozen=True)
class InlinePass:
    """An ordered list of rules; earlier rules win when several could match."""

    name: str
    rules: tuple[InlineRule, ...]
    skip_inline_code: bool = True


def _is_inline_code(style: TextStyle, config: FormatterConfig) -> bool:
    return style.font_family == config.code_font and style.background == config.inline_code_background


def _overlaps_inline_code(doc: DocumentAdapter, match: Match, config: FormatterConfig) -> bool:
    return any(
        _is_inline_code(doc.get_style(match.element, offset), config) for offset in range(match.start, match.end + 1)
    )


def _apply_code(doc: DocumentAdapter, match: Match, config: FormatterConfig) -> None:
    element, start, end = match.element, match.start + 1, match.end - 1
    doc.set_style(element, start, end, "font_family", config.code_font)
    doc.set_style(element, start, end, "background", config.inline_code_background)
    doc.set_style(element, start, end, "foreground", config.inline_code_color)
    strip_delimiters(doc, match, 1)


def _apply_bold(doc: DocumentAdapter, match: Match, config: FormatterConfig) -> None:
    doc.set_style(match.element, match.start + 2, match.end - 2, "bold", True)
    strip_delimiters(doc, match, 2)


def _apply_italic(doc: DocumentAdapter, match: Match, config: FormatterConfig) -> None:
    doc.set_style(match.element, match.start + 1, match.end - 1, "italic", True)
    strip_delimiters(doc, match, 1)


def _apply_link(doc: DocumentAdapter, match: Match, config: FormatterConfig) -> None:
    name, url = match.groups[0], match.groups[1]
    end = match.start + len(name) - 1
    # Inserted text inherits a neighbour's style; the name keeps the style the markup had.
    style = doc.get_style(match.element, match.start)
    doc.delete_range(match.element, match.start, match.end)
    doc.insert_text(match.element, match.start, name)
    for attribute, value in asdict(style).items():
        doc.set_style(match.element, match.start, end, attribute, value)
    doc.set_link(match.element, match.start, end, url)


# Payloads are never empty, so stripping delimiters can't underflow offsets.
# Emphasis payloads may not start or end with whitespace ("* item" is a list
# marker, not italics) and underscores inside words (snake_case) are literal.
BACKQUOTE_RE = re.compile(r"`([^`]+)`")
BOLD_RE = re.compile(r"\*\*(?!\s)([^*]+?)(?<!\s)\*\*")
LINK_RE = re.compile(r"\[([^\[\]]+)\]\(([A-Za-z][A-Za-z0-9+.-]*://[^\s()]+)\)")
ITALIC_UNDERSCORE_RE = re.compile(r"(?<!\w)_(?!\s)([^_]+?)(?<!\s)_(?!\w)")
ITALIC_STAR_RE = re.compile(r"\*(?!\s)([^*]+?)(?<!\s)\*")

BACKQUOTE_PASS = InlinePass("backquotes", (InlineRule(BACKQUOTE_RE, _apply_code),), skip_inline_code=False)
BOLD_PASS = InlinePass("bold", (InlineRule(BOLD_RE, _apply_bold),))
LINK_PASS = InlinePass("links", (InlineRule(LINK_RE, _apply_link),))
ITALIC_PASS = InlinePass(
    "italics",
    (
        InlineRule(ITALIC_UNDERSCORE_RE, _apply_italic),
        InlineRule(ITALIC_STAR_RE, _apply_italic),
    ),
)

INLINE_PASSES = (BACKQUOTE_PASS, BOLD_PASS, LINK_PASS, ITALIC_PASS)


def _next_match(
    doc: DocumentAdapter, inline_pass: InlinePass, config: FormatterConfig
) -> tuple[InlineRule, Match] | None:
    for rule in inline_pass.rules:
        match = doc.search(rule.pattern)
        while match is not None and inline_pass.skip_inline_code and _overlaps_inline_code(doc, match, config):
            match = doc.search(rule.pattern, from_match=match)
        if match is not None:
            return rule, match
    return None


def run_inline_pass(doc: DocumentAdapter, inline_pass: InlinePass, config: FormatterConfig) -> int:
    """
    Apply one inline pass until no match is left.

    Returns:
        Number of spans rewritten.
    """
    changes = 0
    found = _next_match(doc, inline_pass, config)
    while found is not None:
        rule, match = found
        logger.debug(f"[{inline_pass.name}] rewriting {match.matched_text!r} at [{match.start}, {match.end}]")
        rule.action(doc, match, config)
        changes += 1
        found = _next_match(doc, inline_pass, config)

    logger.info(f"Inline pass '{inline_pass.name}' rewrote {changes} span(s)")
    return changes
