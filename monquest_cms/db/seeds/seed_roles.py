"""Seed default roles into the database."""

from sqlalchemy.orm import Session

from monquest_cms.core.permissions import ALL_PERMISSIONS, PANEL_ACCESS, permission_keys
from monquest_cms.models.role import Role


def default_roles() -> list[dict]:
    users_without_admin_ops = [
        p for p in permission_keys("users")
        if p not in ("users.delete", "users.manage_roles")
    ]
    return [
        {
            "id": "role_super_admin",
            "name": "Super Admin",
            "slug": "super_admin",
            "description": "Full system access with all permissions",
            "permissions": list(ALL_PERMISSIONS),
            "is_system": True,
        },
        {
            "id": "role_admin",
            "name": "Admin",
            "slug": "admin",
            "description": "Administrative access with limited permissions",
            "permissions": [
                PANEL_ACCESS,
                *users_without_admin_ops,
                *permission_keys("content"),
                *permission_keys("media"),
                *permission_keys("apiKeys"),
                *permission_keys("settings"),
            ],
            "is_system": True,
        },
        {
            "name": "Editor",
            "slug": "editor",
            "description": "Content management access only",
            "permissions": [PANEL_ACCESS, *permission_keys("content"), *permission_keys("media")],
            "is_system": False,
        },
        {
            "name": "Viewer",
            "slug": "viewer",
            "description": "Read-only access to all content",
            "permissions": [
                PANEL_ACCESS, "users.view", "roles.view", "content.view",
                "media.view", "apiKeys.view", "settings.view",
            ],
            "is_system": False,
        },
        {
            "name": "User",
            "slug": "user",
            "description": "Regular user with no admin panel access - homepage only",
            "permissions": [],
            "is_system": False,
        },
    ]


def seed_roles(db: Session) -> None:
    """Insert default roles; system roles get their permissions refreshed."""
    roles_data = default_roles()

    for role_data in roles_data:
        existing = db.query(Role).filter(Role.slug == role_data["slug"]).first()
        if not existing:
            db.add(Role(**role_data))
        elif existing.is_system:
            existing.permissions = role_data["permissions"]

    db.commit()
    print(f"✅ Seeded {len(roles_data)} roles")
