"""
Google OAuth scopes used by docmark.

Tools name a scope group rather than raw scope URLs; the service decorator
resolves the group and checks it against the stored credentials.
"""

DOCS_READONLY_SCOPE = "https://www.googleapis.com/auth/documents.readonly"
DOCS_WRITE_SCOPE = "https://www.googleapis.com/auth/documents"

SCOPE_GROUPS: dict[str, list[str]] = {
    "docs_read": [DOCS_READONLY_SCOPE],
    "docs_write": [DOCS_WRITE_SCOPE],
}

# Scopes that imply others: write access covers read-only access.
IMPLIED_SCOPES: dict[str, set[str]] = {
    DOCS_WRITE_SCOPE: {DOCS_READONLY_SCOPE},
}


def resolve_scope_group(group: str) -> list[str]:
    """Scopes for a named group; unknown names are treated as a literal scope URL."""
    return SCOPE_GROUPS.get(group, [group])


def has_required_scopes(available: list[str] | None, required: list[str]) -> bool:
    """True when every required scope is granted directly or implied by a broader one."""
    granted = set(available or [])
    for scope in list(granted):
        granted |= IMPLIED_SCOPES.get(scope, set())
    return set(required) <= granted
