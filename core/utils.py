import asyncio
import functools
import logging
import re
import ssl

from googleapiclient.errors import HttpError

from core.errors import DocmarkError, ValidationError, api_error_for_status

logger = logging.getLogger(__name__)

_DOC_URL_RE = re.compile(r"/document/(?:u/\d+/)?d/([\w-]+)")


def validate_document_id(document_id: str, param_name: str = "document_id") -> str:
    """Validate a Google Docs document ID, accepting full document URLs too."""
    if not document_id:
        raise ValidationError(f"{param_name} is required")

    document_id = document_id.strip()
    if not document_id:
        raise ValidationError(f"{param_name} cannot be empty")

    url_match = _DOC_URL_RE.search(document_id)
    if url_match:
        document_id = url_match.group(1)

    if not re.match(r"^[\w-]+$", document_id):
        raise ValidationError(f"{param_name} contains invalid characters")

    return document_id


def validate_email(email: str, param_name: str = "user_google_email") -> str:
    """Validate an email address."""
    if not email:
        raise ValidationError(f"{param_name} is required")

    email = email.strip().lower()
    if not re.match(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$", email):
        raise ValidationError(f"{param_name} is not a valid email address")

    return email


def document_link(document_id: str) -> str:
    return f"https://docs.google.com/document/d/{document_id}/edit"


class TransientNetworkError(Exception):
    """Custom exception for transient network errors after retries."""

    pass


def handle_http_errors(tool_name: str, is_read_only: bool = False, service_type: str | None = None):
    """
    A decorator to handle Google API HttpErrors and transient SSL errors in a standardized way.

    It wraps a tool function, catches HttpError, logs a detailed error message,
    and raises an APIError subclass with a user-friendly message. Errors raised
    by docmark itself (validation, authentication, formatting) pass through
    unchanged so the caller sees the original report.

    If is_read_only is True, it will also catch ssl.SSLError and retry with
    exponential backoff. After exhausting retries, it raises a TransientNetworkError.

    Args:
        tool_name (str): The name of the tool being decorated (e.g., 'format_markdown_in_doc').
        is_read_only (bool): If True, the operation is considered safe to retry on
                             transient network errors. Defaults to False.
        service_type (str): Optional. The Google service type (e.g., 'docs').
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            max_retries = 3
            base_delay = 1

            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except ssl.SSLError as e:
                    if is_read_only and attempt < max_retries - 1:
                        delay = base_delay * (2**attempt)
                        logger.warning(
                            f"SSL error in {tool_name} on attempt {attempt + 1}: {e}. Retrying in {delay} seconds..."
                        )
                        await asyncio.sleep(delay)
                    else:
                        logger.error(f"SSL error in {tool_name} on final attempt: {e}. Raising exception.")
                        raise TransientNetworkError(
                            f"A transient SSL error occurred in '{tool_name}' after {attempt + 1} attempt(s). "
                            "This is likely a temporary network or certificate issue. Please try again shortly."
                        ) from e
                except HttpError as error:
                    user_google_email = kwargs.get("user_google_email", "N/A")
                    status = error.resp.status if error.resp is not None else None

                    if status in (401, 403):
                        message = (
                            f"API error in {tool_name}: {error}. "
                            f"You might need to re-authenticate user '{user_google_email}' "
                            f"for the {service_type or 'Google'} API, or ask the owner to share the document."
                        )
                    elif status == 400 and "requiredRevisionId" in str(error):
                        message = (
                            f"API error in {tool_name}: the document changed while it was being formatted. "
                            "Run the tool again to format the latest revision."
                        )
                    else:
                        message = f"API error in {tool_name}: {error}"

                    logger.error(f"API error in {tool_name}: {error}", exc_info=True)
                    raise api_error_for_status(message, status) from error
                except TransientNetworkError:
                    raise
                except DocmarkError as e:
                    logger.warning(f"{tool_name} failed: {e}")
                    raise
                except Exception as e:
                    message = f"An unexpected error occurred in {tool_name}: {e}"
                    logger.exception(message)
                    raise api_error_for_status(message, None) from e

        return wrapper

    return decorator
