"""
Catalogue of known rights.

Used by administration tooling to offer rights when creating grants. The
engine never consults it: an unregistered right is evaluated like any other.
"""

from collections.abc import Iterable

DEFAULT_RIGHTS: tuple[str, ...] = (
    "rbac:roles:read",
    "rbac:roles:write",
    "rbac:groups:read",
    "rbac:groups:write",
    "rbac:grants:read",
    "rbac:grants:write",
    "rbac:test",
    "experiments:*",
    "experiments:read",
    "experiments:events:write",
    "experiments:admin",
    "file_manager:*",
    "file_manager:access",
    "file_manager:drives:read",
    "file_manager:files:read",
    "file_manager:files:upload",
    "file_manager:files:download",
    "file_manager:files:update",
    "file_manager:files:delete",
    "file_manager:files:share",
    "backoffice:*",
    "backoffice:dashboard:access",
    "admin_panel__login",
    "admin_panel__dashboard",
    "admin_panel__users:read",
    "admin_panel__users:write",
    "admin_panel__rbac:read",
    "admin_panel__rbac:write",
    "admin_panel__organizations:read",
    "admin_panel__organizations:write",
    "admin_panel__notifications:read",
    "admin_panel__notifications:write",
    "*",
)


def list_rights(extra: Iterable[str] | None = None) -> list[str]:
    """
    List known rights, deduplicated and sorted.

    Args:
        extra: Additional application-specific rights to include

    Returns:
        Sorted list of right strings
    """
    rights = set(DEFAULT_RIGHTS)
    if extra:
        rights.update(r.strip() for r in extra if r and r.strip())
    return sorted(rights)
