"""Auth service — email/password login, registration, wallet sign-in."""

import re
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from monquest_cms.models.user import User, UserStatus, AuthMethod
from monquest_cms.models.role import Role
from monquest_cms.core.security import hash_password, verify_password
from monquest_cms.core.exceptions import (
    AuthenticationError, AuthorizationError, ResourceConflictError,
    ResourceNotFoundError, ValidationError,
)

DEFAULT_ROLE_SLUG = "user"
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8
MIN_NAME_LENGTH = 3


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def validate_email(email: str) -> None:
    if not EMAIL_RE.match(email or ""):
        raise ValidationError("Invalid email format")


def validate_password(password: str) -> None:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def validate_name(name: str) -> None:
    if len((name or "").strip()) < MIN_NAME_LENGTH:
        raise ValidationError(f"Name must be at least {MIN_NAME_LENGTH} characters")


class AuthService:
    """Handles authentication of admin and site users."""

    @staticmethod
    def authenticate(db: Session, email: Optional[str], password: Optional[str]) -> User:
        """Check credentials and stamp ``last_login``.

        Raises:
            ValidationError: If email or password is missing.
            AuthenticationError: If credentials are invalid.
            AuthorizationError: If the account is inactive.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = db.query(User).filter(User.email == email).first()
        if not user:
            raise AuthenticationError("Invalid credentials")

        if user.status != UserStatus.ACTIVE:
            raise AuthorizationError("Account is inactive. Please contact administrator.")

        if not verify_password(password, user.password):
            raise AuthenticationError("Invalid credentials")

        user.last_login = _now()
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def default_role(db: Session) -> Role:
        role = db.query(Role).filter(Role.slug == DEFAULT_ROLE_SLUG).first()
        if not role:
            raise ResourceNotFoundError("Default role not found. Please contact administrator.")
        return role

    @staticmethod
    def register(db: Session, email: str, password: str, name: str) -> User:
        """Create a site user with the default, panel-less role."""
        validate_email(email)
        validate_password(password)
        validate_name(name)

        if db.query(User).filter(User.email == email).first():
            raise ResourceConflictError("Email already exists")

        user = User(
            email=email,
            password=hash_password(password),
            name=name.strip(),
            role_id=AuthService.default_role(db).id,
            auth_method=AuthMethod.EMAIL,
            status=UserStatus.ACTIVE,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def wallet_sign_in(db: Session, wallet_address: str, name: Optional[str] = None) -> User:
        """Find or create the user owning a wallet address.

        Proof of wallet ownership is checked by the wallet provider before this
        call and is not repeated here.
        """
        address = wallet_address.strip().lower()
        user = db.query(User).filter(User.wallet_address == address).first()

        if not user:
            user = User(
                wallet_address=address,
                name=name or f"User {address[:6]}...{address[-4:]}",
                auth_method=AuthMethod.WALLET,
                role_id=AuthService.default_role(db).id,
                status=UserStatus.ACTIVE,
            )
            db.add(user)
        elif user.status != UserStatus.ACTIVE:
            raise AuthorizationError("Account is inactive")
        elif user.email and user.auth_method == AuthMethod.EMAIL:
            user.auth_method = AuthMethod.HYBRID

        user.last_login = _now()
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def get_user(db: Session, user_id: str) -> User:
        """Get a user by id."""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ResourceNotFoundError("User not found")
        return user


auth_service = AuthService()
