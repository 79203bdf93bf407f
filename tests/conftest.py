"""Shared pytest fixtures for docmark tests."""

import html
import tempfile
from unittest.mock import MagicMock

import pytest

from core.config import get_formatter_config, reset_formatter_config
from core.container import reset_container


class FakeHighlighter:
    """Highlighter returning hilite.me-shaped markup: the whole code as one colored span."""

    def __init__(self, color: str = "#008800", background: str = "#ffffff"):
        self.color = color
        self.background = background
        self.calls: list[tuple[str, str]] = []

    def highlight(self, code: str, lexer: str) -> str:
        self.calls.append((code, lexer))
        return (
            f'<div style="background: {self.background}; overflow:auto;width:auto;">'
            f'<pre style="margin: 0; line-height: 125%">'
            f'<span style="color: {self.color}">{html.escape(code)}</span>\n</pre></div>'
        )


class FailingHighlighter:
    """Highlighter whose service is always down."""

    def __init__(self, error: Exception):
        self.error = error

    def highlight(self, code: str, lexer: str) -> str:
        raise self.error


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Every test starts from default configuration and an empty container."""
    for name in (
        "DOCMARK_HIGHLIGHT_BACKEND",
        "DOCMARK_HILITE_URL",
        "DOCMARK_HIGHLIGHT_STYLE",
        "DOCMARK_HIGHLIGHT_TIMEOUT",
        "DOCMARK_DEFAULT_LEXER",
        "DOCMARK_CODE_FONT",
        "DOCMARK_INLINE_CODE_BACKGROUND",
        "DOCMARK_INLINE_CODE_COLOR",
        "DOCMARK_ALLOW_INDENTED_LIST_MARKERS",
        "DOCMARK_TRANSPORT",
        "DOCMARK_LOG_LEVEL",
        "DOCMARK_CREDENTIALS_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_formatter_config()
    reset_container()
    yield
    reset_formatter_config()
    reset_container()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def config():
    """Default formatter configuration."""
    return get_formatter_config()


@pytest.fixture
def fake_highlighter():
    return FakeHighlighter()


@pytest.fixture
def mock_docs_service():
    """Create a mock Google Docs service."""
    service = MagicMock()
    service.documents.return_value.batchUpdate.return_value.execute.return_value = {"replies": []}
    return service


@pytest.fixture
def env_override(monkeypatch):
    """Helper to override environment variables."""

    def _override(**kwargs):
        for key, value in kwargs.items():
            if value is None:
                monkeypatch.delenv(key, raising=False)
            else:
                monkeypatch.setenv(key, value)
        reset_formatter_config()

    return _override


@pytest.fixture
def failing_highlighter():
    """Factory for a highlighter that raises the given error."""
    return FailingHighlighter
