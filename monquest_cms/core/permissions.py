"""Permission catalogue and role-based access checks.

Permission strings have the form ``resource.action`` and are compared by exact
membership in the permissions assigned to a user's role. The catalogue below is
only used to describe and validate permissions; the checks never consult it.

The check helpers accept anything shaped like a user: an ORM ``User``, a client
``Session`` or a plain mapping with a nested ``role``. Missing data always
evaluates to ``False``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

PANEL_ACCESS = "panel.access"
SUPER_ADMIN_SLUG = "super_admin"


@dataclass(frozen=True)
class PermissionDef:
    key: str
    label: str
    description: str


def _p(key: str, label: str, description: str) -> PermissionDef:
    return PermissionDef(key=key, label=label, description=description)


PERMISSIONS: dict[str, list[PermissionDef]] = {
    "users": [
        _p("users.view", "View Users", "Can view user list and details"),
        _p("users.create", "Create Users", "Can create new users"),
        _p("users.edit", "Edit Users", "Can edit existing users"),
        _p("users.delete", "Delete Users", "Can delete users"),
        _p("users.manage_roles", "Manage User Roles", "Can assign roles to users"),
    ],
    "roles": [
        _p("roles.view", "View Roles", "Can view role list and details"),
        _p("roles.create", "Create Roles", "Can create new roles"),
        _p("roles.edit", "Edit Roles", "Can edit existing roles"),
        _p("roles.delete", "Delete Roles", "Can delete custom roles"),
        _p("roles.assign", "Assign Roles", "Can assign roles to users"),
    ],
    "content": [
        _p("content.view", "View Content", "Can view all content"),
        _p("content.create", "Create Content", "Can create new content"),
        _p("content.edit", "Edit Content", "Can edit existing content"),
        _p("content.delete", "Delete Content", "Can delete content"),
    ],
    "media": [
        _p("media.view", "View Media", "Can view media library"),
        _p("media.upload", "Upload Media", "Can upload new media files"),
        _p("media.delete", "Delete Media", "Can delete media files"),
    ],
    "apiKeys": [
        _p("apiKeys.view", "View API Keys", "Can view API keys"),
        _p("apiKeys.create", "Create API Keys", "Can create new API keys"),
        _p("apiKeys.delete", "Delete API Keys", "Can delete API keys"),
    ],
    "settings": [
        _p("settings.view", "View Settings", "Can view system settings"),
        _p("settings.edit", "Edit Settings", "Can edit system settings"),
    ],
}


def permission_keys(category: str) -> list[str]:
    return [p.key for p in PERMISSIONS[category]]


ALL_PERMISSIONS: list[str] = [PANEL_ACCESS] + [
    p.key for group in PERMISSIONS.values() for p in group
]


def grouped_permissions() -> list[dict[str, Any]]:
    """Catalogue grouped by category, as served to the role editor."""
    return [
        {
            "category": category[:1].upper() + category[1:],
            "permissions": [
                {"key": p.key, "label": p.label, "description": p.description}
                for p in perms
            ],
        }
        for category, perms in PERMISSIONS.items()
    ]


def unknown_permissions(perms: Iterable[str]) -> list[str]:
    known = set(ALL_PERMISSIONS)
    return [p for p in perms if p not in known]


def _get(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _role_of(user: Any) -> Any:
    return _get(user, "role")


def _permissions_of(user: Any) -> Optional[frozenset[str]]:
    perms = _get(_role_of(user), "permissions")
    if not isinstance(perms, (list, tuple, set, frozenset)):
        return None
    return frozenset(p for p in perms if isinstance(p, str))


def has_permission(user: Any, permission: str) -> bool:
    perms = _permissions_of(user)
    return perms is not None and permission in perms


def has_any_permission(user: Any, permissions: Iterable[str]) -> bool:
    perms = _permissions_of(user)
    if perms is None:
        return False
    return any(p in perms for p in permissions)


def has_all_permissions(user: Any, permissions: Iterable[str]) -> bool:
    perms = _permissions_of(user)
    if perms is None:
        return False
    return all(p in perms for p in permissions)


def is_super_admin(user: Any) -> bool:
    """Identity check on the role slug, never inferred from coverage."""
    return _get(_role_of(user), "slug") == SUPER_ADMIN_SLUG


def _is_system(role: Any) -> bool:
    return bool(_get(role, "is_system") or _get(role, "isSystem"))


def can_manage_role(user: Any, target_role: Any) -> bool:
    if user is None:
        return False
    if is_super_admin(user):
        return True
    if _is_system(target_role):
        return False
    return has_permission(user, "roles.edit")


def can_delete_role(user: Any, target_role: Any) -> bool:
    if user is None or _is_system(target_role):
        return False
    return is_super_admin(user) and has_permission(user, "roles.delete")


def can_manage_user(actor: Any, target: Any) -> bool:
    if actor is None:
        return False
    if is_super_admin(actor):
        return True
    if is_super_admin(target):
        return False
    return has_permission(actor, "users.edit")
