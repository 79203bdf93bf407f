# Public API exports for docmark authentication

from auth.credential_store import CredentialStore, LocalDirectoryCredentialStore
from auth.scopes import DOCS_READONLY_SCOPE, DOCS_WRITE_SCOPE, SCOPE_GROUPS

__all__ = [
    "CredentialStore",
    "DOCS_READONLY_SCOPE",
    "DOCS_WRITE_SCOPE",
    "LocalDirectoryCredentialStore",
    "SCOPE_GROUPS",
]
