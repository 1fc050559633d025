"""Role service — CRUD with system-role protection and user reassignment."""

import re
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from monquest_cms.core import permissions as perms
from monquest_cms.core.exceptions import (
    ResourceConflictError, ResourceNotFoundError, SystemRoleError, ValidationError,
)
from monquest_cms.models.role import Role
from monquest_cms.models.user import User

SLUG_RE = re.compile(r"^[a-z0-9_-]+$")


def _validate_name(name: Optional[str]) -> None:
    if not name or not 3 <= len(name) <= 50:
        raise ValidationError("Name must be between 3 and 50 characters")


def _clean_permissions(permissions) -> List[str]:
    if not isinstance(permissions, list):
        raise ValidationError("Permissions must be an array")
    unknown = perms.unknown_permissions(permissions)
    if unknown:
        raise ValidationError(f"Unknown permissions: {', '.join(unknown)}")
    # keep first occurrence; order is not meaningful
    return list(dict.fromkeys(permissions))


class RoleService:
    """Manages permission bundles."""

    @staticmethod
    def user_counts(db: Session) -> dict:
        rows = db.query(User.role_id, func.count(User.id)).group_by(User.role_id).all()
        return {role_id: count for role_id, count in rows}

    @staticmethod
    def list_roles(
        db: Session,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        include_system: bool = True,
    ):
        query = db.query(Role)
        if search:
            query = query.filter(
                or_(
                    Role.name.contains(search),
                    Role.slug.contains(search),
                    Role.description.contains(search),
                )
            )
        if not include_system:
            query = query.filter(Role.is_system.is_(False))

        total = query.count()
        roles = (
            query.order_by(Role.is_system.desc(), Role.created_at.asc(), Role.slug.asc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return {"roles": roles, "total": total, "page": page, "limit": limit}

    @staticmethod
    def get_role(db: Session, role_id: str) -> Role:
        role = db.query(Role).filter(Role.id == role_id).first()
        if not role:
            raise ResourceNotFoundError("Role not found")
        return role

    @staticmethod
    def create_role(
        db: Session,
        name: str,
        slug: str,
        description: Optional[str],
        permissions,
    ) -> Role:
        _validate_name(name)
        if not slug or not SLUG_RE.match(slug):
            raise ValidationError("Slug must be lowercase alphanumeric with hyphens only")
        cleaned = _clean_permissions(permissions)

        if db.query(Role).filter(Role.slug == slug).first():
            raise ResourceConflictError("Role with this slug already exists")

        role = Role(
            name=name,
            slug=slug,
            description=description or None,
            permissions=cleaned,
            is_system=False,
        )
        db.add(role)
        db.commit()
        db.refresh(role)
        return role

    @staticmethod
    def update_role(
        db: Session,
        role_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        permissions=None,
    ) -> Role:
        """Update a role. System roles accept a permission change only."""
        role = RoleService.get_role(db, role_id)

        if role.is_system:
            if name is not None and name != role.name:
                raise SystemRoleError("System roles can only have their permissions changed")
            if description is not None and description != (role.description or ""):
                raise SystemRoleError("System roles can only have their permissions changed")
            if permissions is None:
                raise ValidationError("Permissions must be an array")
            role.permissions = _clean_permissions(permissions)
        else:
            if name is not None:
                _validate_name(name)
                role.name = name
            if description is not None:
                role.description = description or None
            if permissions is not None:
                role.permissions = _clean_permissions(permissions)

        db.commit()
        db.refresh(role)
        return role

    @staticmethod
    def delete_role(db: Session, role_id: str, target_role_id: Optional[str] = None) -> int:
        """Delete a custom role, moving its users to ``target_role_id``.

        Returns the number of reassigned users.
        """
        role = RoleService.get_role(db, role_id)
        if role.is_system:
            raise SystemRoleError("System roles cannot be deleted")

        user_count = db.query(User).filter(User.role_id == role.id).count()
        if user_count > 0:
            if not target_role_id:
                raise ValidationError(
                    "Role has assigned users. Please provide targetRoleId to reassign them.",
                    userCount=user_count,
                )
            if target_role_id == role.id:
                raise ValidationError("Target role must differ from the deleted role")
            target = db.query(Role).filter(Role.id == target_role_id).first()
            if not target:
                raise ResourceNotFoundError("Target role not found")
            db.query(User).filter(User.role_id == role.id).update(
                {"role_id": target.id}, synchronize_session=False
            )

        db.delete(role)
        db.commit()
        return user_count


role_service = RoleService()
