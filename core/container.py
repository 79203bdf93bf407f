"""
Dependency Injection Container for docmark.

Holds the credential store and the highlight service client so tests can
swap either for a fake without patching module globals.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class CredentialStoreProtocol(Protocol):
    """Protocol for credential storage implementations."""

    def get_credential(self, user_email: str) -> Any | None:
        """Get credentials for a user."""
        ...

    def store_credential(self, user_email: str, credentials: Any) -> bool:
        """Store credentials for a user."""
        ...

    def delete_credential(self, user_email: str) -> bool:
        """Delete credentials for a user."""
        ...

    def list_users(self) -> list[str]:
        """List all users with stored credentials."""
        ...


@runtime_checkable
class HighlighterProtocol(Protocol):
    """Protocol for syntax highlight service clients."""

    def highlight(self, code: str, lexer: str) -> str:
        """Return highlighted markup for code."""
        ...


@dataclass
class Container:
    """
    Dependency injection container.

    Missing members are filled with the implementations selected by the
    environment configuration.
    """

    credential_store: CredentialStoreProtocol | None = None
    highlighter: HighlighterProtocol | None = None

    def __post_init__(self) -> None:
        if self.credential_store is None:
            from auth.credential_store import LocalDirectoryCredentialStore

            self.credential_store = LocalDirectoryCredentialStore()

        if self.highlighter is None:
            from core.config import get_formatter_config
            from docmark.highlight import get_highlighter

            self.highlighter = get_highlighter(get_formatter_config())


_container: Container | None = None


def get_container() -> Container:
    """
    Get the global container instance, creating the default one on first use.

    Returns:
        The global Container instance.
    """
    global _container
    if _container is None:
        _container = Container()
        logger.debug("Initialized default dependency container")
    return _container


def set_container(container: Container) -> None:
    """
    Set the global container instance.

    Use this for testing to inject fake implementations.
    """
    global _container
    _container = container
    logger.debug("Set custom dependency container")


def reset_container() -> None:
    """Reset the global container. Use between tests for a clean state."""
    global _container
    _container = None
    logger.debug("Reset dependency container")
