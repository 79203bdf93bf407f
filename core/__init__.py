"""Core utilities for docmark: configuration, errors, HTTP error handling and the MCP server."""

from core.config import FormatterConfig, get_formatter_config, reset_formatter_config
from core.errors import (
    APIError,
    AuthenticationError,
    CredentialsNotFoundError,
    DocmarkError,
    FormattingError,
    HighlightMarkupError,
    HighlightServiceError,
    LastBlockError,
    PermissionDeniedError,
    RateLimitError,
    ResourceNotFoundError,
    ScopeMismatchError,
    TokenRefreshError,
    UnsupportedContentError,
    ValidationError,
)
from core.utils import TransientNetworkError, handle_http_errors, validate_document_id, validate_email

__all__ = [
    "APIError",
    "AuthenticationError",
    "CredentialsNotFoundError",
    "DocmarkError",
    "FormatterConfig",
    "FormattingError",
    "get_formatter_config",
    "handle_http_errors",
    "HighlightMarkupError",
    "HighlightServiceError",
    "LastBlockError",
    "PermissionDeniedError",
    "RateLimitError",
    "reset_formatter_config",
    "ResourceNotFoundError",
    "ScopeMismatchError",
    "TokenRefreshError",
    "TransientNetworkError",
    "UnsupportedContentError",
    "validate_document_id",
    "validate_email",
    "ValidationError",
]
