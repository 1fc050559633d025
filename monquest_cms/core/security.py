"""Password hashing, identity-header auth and permission dependencies.

Requests identify their caller with the ``x-user-id`` header. The header is
trusted as sent: the deployment must put a layer in front of the app (reverse
proxy, session cookie exchange) that stops clients from forging it.
"""

import secrets
import bcrypt
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from monquest_cms.core import permissions as perms
from monquest_cms.core.exceptions import AuthenticationError, AuthorizationError
from monquest_cms.db.session import get_db
from monquest_cms.models.user import User, UserStatus

USER_ID_HEADER = "x-user-id"

API_KEY_PREFIXES = {
    "PRODUCTION": "mk_prod",
    "DEVELOPMENT": "mk_dev",
    "STAGING": "mk_stg",
}


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    pwd_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=10)
    hashed = bcrypt.hashpw(pwd_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its hash."""
    if not hashed_password:
        return False
    pwd_bytes = plain_password.encode("utf-8")
    hashed_bytes = hashed_password.encode("utf-8")
    return bcrypt.checkpw(pwd_bytes, hashed_bytes)


def generate_api_key(environment: str) -> str:
    """Generate a raw API key such as ``mk_prod_<24 chars>``."""
    prefix = API_KEY_PREFIXES.get(environment, "mk_stg")
    return f"{prefix}_{secrets.token_urlsafe(18)[:24]}"


async def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias=USER_ID_HEADER),
) -> str:
    """Extract the caller id from the identity header."""
    if not x_user_id:
        raise AuthenticationError("Not authenticated")
    return x_user_id


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    """Load the calling user with its role."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise AuthenticationError("User not found")
    if user.status != UserStatus.ACTIVE:
        raise AuthorizationError("Account is inactive. Please contact administrator.")
    return user


class RequirePermission:
    """Dependency that checks the caller's role for permission strings."""

    def __init__(self, *required: str, require_all: bool = True):
        self.required = list(required)
        self.require_all = require_all

    async def __call__(self, user: User = Depends(get_current_user)) -> User:
        if self.require_all:
            ok = perms.has_all_permissions(user, self.required)
        else:
            ok = perms.has_any_permission(user, self.required)
        if not ok:
            raise AuthorizationError("Forbidden", required=self.required)
        return user


def require_permission(*required: str, require_all: bool = True) -> RequirePermission:
    return RequirePermission(*required, require_all=require_all)


# Convenience dependencies
require_panel_access = RequirePermission(perms.PANEL_ACCESS)
