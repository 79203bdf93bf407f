"""
Custom error types for docmark.

Provides user-friendly error messages and structured error handling for the
Google Docs layer and the Markdown formatting engine.
"""

# =============================================================================
# Base Exception Hierarchy
# =============================================================================


class DocmarkError(Exception):
    """Base exception for all docmark errors."""

    pass


# =============================================================================
# Authentication Errors
# =============================================================================


class AuthenticationError(DocmarkError):
    """Raised when authentication fails or credentials are invalid."""

    pass


class CredentialsNotFoundError(AuthenticationError):
    """Raised when no credentials are found for a user."""

    def __init__(self, user_email: str):
        super().__init__(
            f"No credentials found for user: {user_email}. "
            "Store authorized-user credentials in the docmark credentials directory first."
        )
        self.user_email = user_email


class TokenRefreshError(AuthenticationError):
    """Raised when token refresh fails."""

    def __init__(self, user_email: str, reason: str):
        super().__init__(f"Failed to refresh token for {user_email}: {reason}. Please re-authenticate.")
        self.user_email = user_email
        self.reason = reason


class ScopeMismatchError(AuthenticationError):
    """Raised when credentials lack required scopes."""

    def __init__(self, required: list[str], available: list[str]):
        missing = sorted(set(required) - set(available))
        super().__init__(
            f"Missing required OAuth scopes: {', '.join(missing)}. "
            "Please re-authenticate with the required permissions."
        )
        self.required_scopes = required
        self.available_scopes = available
        self.missing_scopes = missing


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(DocmarkError):
    """Raised when input or configuration validation fails."""

    pass


# =============================================================================
# API Errors
# =============================================================================


class APIError(DocmarkError):
    """Raised for general Google API errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ResourceNotFoundError(APIError):
    """Raised when a requested document doesn't exist (404)."""

    pass


class PermissionDeniedError(APIError):
    """Raised when the user lacks permission for an operation (403)."""

    pass


class RateLimitError(APIError):
    """Raised when API rate limits are exceeded (429)."""

    pass


def api_error_for_status(message: str, status_code: int | None) -> APIError:
    """Pick the most specific APIError subclass for an HTTP status."""
    if status_code == 404:
        return ResourceNotFoundError(message, status_code=status_code)
    if status_code == 403:
        return PermissionDeniedError(message, status_code=status_code)
    if status_code == 429:
        return RateLimitError(message, status_code=status_code)
    return APIError(message, status_code=status_code)


# =============================================================================
# Formatting Errors
# =============================================================================


class FormattingError(DocmarkError):
    """Base class for errors raised while rewriting a document."""

    pass


class HighlightServiceError(FormattingError):
    """Raised when the syntax highlighting service cannot be reached or rejects a request."""

    def __init__(self, message: str, lexer: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.lexer = lexer
        self.status_code = status_code


class HighlightMarkupError(FormattingError):
    """Raised when highlighted markup does not have the expected wrapper/span shape."""

    pass


class UnsupportedContentError(FormattingError):
    """Raised when a document holds elements that cannot be rewritten without loss."""

    def __init__(self, kinds: list[str]):
        super().__init__(
            f"Document contains unsupported elements ({', '.join(sorted(kinds))}); "
            "formatting would drop them, so the document was left unchanged."
        )
        self.kinds = sorted(kinds)


class LastBlockError(FormattingError):
    """Raised by the document model when removing its only remaining block."""

    pass
