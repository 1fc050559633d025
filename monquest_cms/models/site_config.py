"""API key, key-value setting, and theme preset models."""

import enum

from sqlalchemy import Column, String, Text, Boolean, DateTime, Enum, ForeignKey, JSON, func
from sqlalchemy.orm import relationship

from monquest_cms.db.base import Base
from monquest_cms.models.role import new_id


class ApiEnvironment(str, enum.Enum):
    PRODUCTION = "PRODUCTION"
    DEVELOPMENT = "DEVELOPMENT"
    STAGING = "STAGING"


class ApiKeyStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    REVOKED = "REVOKED"


class ApiKey(Base):
    """API key for machine-to-machine access."""
    __tablename__ = "api_keys"

    id = Column(String(40), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    key = Column(String(64), nullable=False, unique=True, index=True)
    environment = Column(Enum(ApiEnvironment), nullable=False)
    status = Column(Enum(ApiKeyStatus), default=ApiKeyStatus.ACTIVE, nullable=False)
    last_used = Column(DateTime, nullable=True)
    user_id = Column(String(40), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", lazy="joined")


class Setting(Base):
    """Key-value site settings grouped by category."""
    __tablename__ = "settings"

    id = Column(String(40), primary_key=True, default=new_id)
    key = Column(String(100), unique=True, nullable=False, index=True)
    value = Column(JSON, nullable=True)
    category = Column(String(50), nullable=False, index=True)
    description = Column(String(500), nullable=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class ThemePreset(Base):
    """Named color palette; the active one is stored in ``active_theme_preset``."""
    __tablename__ = "theme_presets"

    id = Column(String(40), primary_key=True, default=new_id)
    name = Column(String(50), nullable=False)
    slug = Column(String(60), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    colors = Column(JSON, nullable=False)
    is_system = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
