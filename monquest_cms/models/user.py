"""User model."""

import enum

from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import relationship

from monquest_cms.db.base import Base
from monquest_cms.models.role import new_id


class AuthMethod(str, enum.Enum):
    EMAIL = "EMAIL"
    WALLET = "WALLET"
    HYBRID = "HYBRID"


class UserStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class User(Base):
    """Admin panel or site user, identified by email and/or wallet."""
    __tablename__ = "users"

    id = Column(String(40), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=True, index=True)
    password = Column(String(255), nullable=True)  # bcrypt hash
    name = Column(String(255), nullable=False)
    wallet_address = Column(String(100), unique=True, nullable=True, index=True)
    auth_method = Column(Enum(AuthMethod), default=AuthMethod.EMAIL, nullable=False)
    status = Column(Enum(UserStatus), default=UserStatus.ACTIVE, nullable=False)
    last_login = Column(DateTime, nullable=True)
    role_id = Column(String(40), ForeignKey("roles.id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    role = relationship("Role", back_populates="users", lazy="joined")
