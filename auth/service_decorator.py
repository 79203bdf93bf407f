"""
Google service injection for MCP tools.

`require_google_service` resolves credentials for the `user_google_email`
argument, builds the API client and passes it to the tool as its first
argument. The `service` parameter is removed from the public signature so
MCP clients never see it.
"""

import asyncio
import functools
import inspect
import logging
from typing import Any

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from googleapiclient.discovery import build

from auth.scopes import has_required_scopes, resolve_scope_group
from core.container import get_container
from core.errors import CredentialsNotFoundError, ScopeMismatchError, TokenRefreshError
from core.utils import validate_email

logger = logging.getLogger(__name__)

SERVICE_VERSIONS: dict[str, str] = {
    "docs": "v1",
}


def get_authenticated_service(service_type: str, version: str, user_email: str, scopes: list[str]) -> Any:
    """
    Build an authorized Google API client for user_email.

    Raises:
        CredentialsNotFoundError: No stored credentials for the user.
        TokenRefreshError: Credentials expired and could not be refreshed.
        ScopeMismatchError: Credentials lack one of the required scopes.
    """
    store = get_container().credential_store
    credentials = store.get_credential(user_email)
    if credentials is None:
        raise CredentialsNotFoundError(user_email)

    if not has_required_scopes(credentials.scopes, scopes):
        raise ScopeMismatchError(scopes, list(credentials.scopes or []))

    if not credentials.valid:
        if not credentials.refresh_token:
            raise TokenRefreshError(user_email, "no refresh token stored")
        try:
            credentials.refresh(Request())
        except RefreshError as e:
            raise TokenRefreshError(user_email, str(e)) from e
        logger.info(f"Refreshed access token for {user_email}")
        store.store_credential(user_email, credentials)

    return build(service_type, version, credentials=credentials, cache_discovery=False)


def require_google_service(service_type: str, scope_group: str):
    """
    Inject an authenticated `service_type` client as the tool's first argument.

    Args:
        service_type: Discovery name of the API, e.g. "docs".
        scope_group: Scope group from auth.scopes, e.g. "docs_write".
    """
    version = SERVICE_VERSIONS.get(service_type, "v1")
    scopes = resolve_scope_group(scope_group)

    def decorator(func):
        original = inspect.signature(func)
        params = list(original.parameters.values())
        if not params or params[0].name != "service":
            raise TypeError(f"{func.__name__} must take 'service' as its first parameter")
        public_signature = original.replace(parameters=params[1:])

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            bound = public_signature.bind(*args, **kwargs)
            user_email = validate_email(bound.arguments.get("user_google_email", ""))
            service = await asyncio.to_thread(get_authenticated_service, service_type, version, user_email, scopes)
            return await func(service, *args, **kwargs)

        wrapper.__signature__ = public_signature
        return wrapper

    return decorator
