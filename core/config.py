"""
Configuration Management for docmark.

All settings come from environment variables, with defaults suitable for
running the formatter locally against the public hilite.me service.
"""

import logging
import os
import re

from core.errors import ValidationError

logger = logging.getLogger(__name__)

HIGHLIGHT_BACKENDS = ("hilite", "pygments")
TRANSPORT_MODES = ("stdio", "streamable-http")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_HILITE_URL = "http://hilite.me/api"
DEFAULT_CREDENTIALS_DIR = "~/.config/docmark/credentials"

_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_color(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if not _HEX_COLOR_RE.match(value):
        raise ValidationError(f"{name} must be a #RRGGBB hex color, got '{value}'")
    return value.lower()


class FormatterConfig:
    """
    Centralized configuration for the formatting engine and server.

    Values are read once at construction; use reset_formatter_config() after
    changing the environment (tests do this through monkeypatch).
    """

    def __init__(self):
        # Highlight service
        self.highlight_backend = os.getenv("DOCMARK_HIGHLIGHT_BACKEND", "hilite").strip().lower()
        if self.highlight_backend not in HIGHLIGHT_BACKENDS:
            raise ValidationError(
                f"DOCMARK_HIGHLIGHT_BACKEND must be one of {', '.join(HIGHLIGHT_BACKENDS)}, "
                f"got '{self.highlight_backend}'"
            )
        self.hilite_url = os.getenv("DOCMARK_HILITE_URL", DEFAULT_HILITE_URL)
        self.highlight_style = os.getenv("DOCMARK_HIGHLIGHT_STYLE", "default")
        self.default_lexer = os.getenv("DOCMARK_DEFAULT_LEXER", "text")
        try:
            self.highlight_timeout = float(os.getenv("DOCMARK_HIGHLIGHT_TIMEOUT", "10"))
        except ValueError as e:
            raise ValidationError(f"DOCMARK_HIGHLIGHT_TIMEOUT must be a number: {e}") from e
        if self.highlight_timeout <= 0:
            raise ValidationError("DOCMARK_HIGHLIGHT_TIMEOUT must be positive")

        # Styling applied by the passes
        self.code_font = os.getenv("DOCMARK_CODE_FONT", "Consolas")
        self.inline_code_background = _env_color("DOCMARK_INLINE_CODE_BACKGROUND", "#f5f5f5")
        self.inline_code_color = _env_color("DOCMARK_INLINE_CODE_COLOR", "#c7254e")

        # List markers may be indented when the document was pasted from plain text
        self.allow_indented_list_markers = _env_bool("DOCMARK_ALLOW_INDENTED_LIST_MARKERS", False)

        # Server
        self.transport = os.getenv("DOCMARK_TRANSPORT", "stdio").strip().lower()
        if self.transport not in TRANSPORT_MODES:
            raise ValidationError(
                f"DOCMARK_TRANSPORT must be one of {', '.join(TRANSPORT_MODES)}, got '{self.transport}'"
            )
        self.log_level = os.getenv("DOCMARK_LOG_LEVEL", "INFO").strip().upper()
        if self.log_level not in LOG_LEVELS:
            raise ValidationError(f"DOCMARK_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got '{self.log_level}'")
        self.credentials_dir = os.path.expanduser(os.getenv("DOCMARK_CREDENTIALS_DIR", DEFAULT_CREDENTIALS_DIR))

    def to_dict(self) -> dict:
        """Snapshot of the configuration for diagnostics."""
        return {
            "highlight_backend": self.highlight_backend,
            "hilite_url": self.hilite_url,
            "highlight_style": self.highlight_style,
            "highlight_timeout": self.highlight_timeout,
            "default_lexer": self.default_lexer,
            "code_font": self.code_font,
            "inline_code_background": self.inline_code_background,
            "inline_code_color": self.inline_code_color,
            "allow_indented_list_markers": self.allow_indented_list_markers,
            "transport": self.transport,
            "log_level": self.log_level,
            "credentials_dir": self.credentials_dir,
        }


_formatter_config: FormatterConfig | None = None


def get_formatter_config() -> FormatterConfig:
    """Get the global configuration instance."""
    global _formatter_config
    if _formatter_config is None:
        _formatter_config = FormatterConfig()
        logger.debug(f"Loaded configuration: {_formatter_config.to_dict()}")
    return _formatter_config


def reset_formatter_config() -> None:
    """Drop the cached configuration so the next access re-reads the environment."""
    global _formatter_config
    _formatter_config = None
