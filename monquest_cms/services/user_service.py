"""User management service — list, create, update, delete, stats."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from monquest_cms.core import permissions as perms
from monquest_cms.core.exceptions import (
    AuthorizationError, ResourceConflictError, ResourceNotFoundError, ValidationError,
)
from monquest_cms.core.security import hash_password
from monquest_cms.models.role import Role
from monquest_cms.models.user import User, UserStatus
from monquest_cms.services.auth_service import validate_email, validate_name, validate_password

SORTABLE_FIELDS = {"createdAt": User.created_at, "name": User.name, "email": User.email,
                   "lastLogin": User.last_login, "status": User.status}


class UserService:
    """CRUD over admin and site users."""

    @staticmethod
    def list_users(
        db: Session,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        role_id: Optional[str] = None,
        status: Optional[str] = None,
    ):
        """List users with search, role/status filters and pagination."""
        query = db.query(User)
        if search:
            query = query.filter(or_(User.name.contains(search), User.email.contains(search)))
        if role_id:
            query = query.filter(User.role_id == role_id)
        if status in (UserStatus.ACTIVE.value, UserStatus.INACTIVE.value):
            query = query.filter(User.status == UserStatus(status))

        column = SORTABLE_FIELDS.get(sort_by, User.created_at)
        order = column.asc() if sort_order == "asc" else column.desc()

        total = query.count()
        users = query.order_by(order).offset((page - 1) * limit).limit(limit).all()
        return {"users": users, "total": total, "page": page, "limit": limit}

    @staticmethod
    def _role(db: Session, role_id: Optional[str]) -> Role:
        if not role_id:
            raise ValidationError("Role is required")
        role = db.query(Role).filter(Role.id == role_id).first()
        if not role:
            raise ValidationError("Invalid role")
        return role

    @staticmethod
    def create_user(
        db: Session,
        email: Optional[str],
        password: Optional[str],
        name: Optional[str],
        role_id: Optional[str],
    ) -> User:
        if not email or not password or not name or not role_id:
            raise ValidationError("Missing required fields")
        validate_email(email)
        validate_password(password)
        validate_name(name)
        role = UserService._role(db, role_id)

        if db.query(User).filter(User.email == email).first():
            raise ValidationError("Email already exists")

        user = User(
            email=email,
            password=hash_password(password),
            name=name.strip(),
            role_id=role.id,
            status=UserStatus.ACTIVE,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def get_user(db: Session, user_id: str) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ResourceNotFoundError("User not found")
        return user

    @staticmethod
    def update_user(
        db: Session,
        actor: User,
        user_id: str,
        email: Optional[str] = None,
        name: Optional[str] = None,
        role_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> User:
        """Update profile, role or status of a user the actor may manage."""
        user = UserService.get_user(db, user_id)
        if not perms.can_manage_user(actor, user):
            raise AuthorizationError("You cannot manage this user")

        if email is not None and email != user.email:
            validate_email(email)
            if db.query(User).filter(User.email == email, User.id != user.id).first():
                raise ResourceConflictError("Email already exists")
            user.email = email
        if name is not None:
            validate_name(name)
            user.name = name.strip()
        if role_id is not None and role_id != user.role_id:
            if not perms.has_any_permission(actor, ["users.manage_roles", "roles.assign"]):
                raise AuthorizationError("You cannot change user roles")
            role = UserService._role(db, role_id)
            if role.slug == perms.SUPER_ADMIN_SLUG and not perms.is_super_admin(actor):
                raise AuthorizationError("Only a super admin can grant the super admin role")
            user.role_id = role.id
        if status is not None:
            try:
                new_status = UserStatus(status)
            except ValueError:
                raise ValidationError("Status must be ACTIVE or INACTIVE")
            if user.id == actor.id and new_status != UserStatus.ACTIVE:
                raise ValidationError("You cannot deactivate your own account")
            user.status = new_status

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def delete_user(db: Session, actor: User, user_id: str) -> Optional[str]:
        """Delete a user and return its email."""
        user = UserService.get_user(db, user_id)
        if user.id == actor.id:
            raise ValidationError("You cannot delete your own account")
        if not perms.can_manage_user(actor, user):
            raise AuthorizationError("You cannot delete this user")
        email = user.email
        db.delete(user)
        db.commit()
        return email

    @staticmethod
    def reset_password(db: Session, actor: User, user_id: str, password: str) -> User:
        user = UserService.get_user(db, user_id)
        if not perms.can_manage_user(actor, user):
            raise AuthorizationError("You cannot manage this user")
        validate_password(password)
        user.password = hash_password(password)
        db.commit()
        return user

    @staticmethod
    def stats(db: Session) -> dict:
        """Counts for the users dashboard widget."""
        since = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(days=7)
        by_role = {
            role.slug: len(role.users)
            for role in db.query(Role).all()
        }
        return {
            "total": db.query(User).count(),
            "active": db.query(User).filter(User.status == UserStatus.ACTIVE).count(),
            "inactive": db.query(User).filter(User.status == UserStatus.INACTIVE).count(),
            "recentLogins": db.query(User).filter(User.last_login >= since).count(),
            "byRole": by_role,
        }


user_service = UserService()
