"""Role model for RBAC."""

import uuid

from sqlalchemy import Column, String, Text, Boolean, DateTime, JSON, func
from sqlalchemy.orm import relationship

from monquest_cms.db.base import Base


def new_id() -> str:
    return uuid.uuid4().hex


class Role(Base):
    """Named bundle of permission strings assigned to users."""
    __tablename__ = "roles"

    id = Column(String(40), primary_key=True, default=new_id)
    name = Column(String(50), nullable=False)
    slug = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    permissions = Column(JSON, nullable=False, default=list)  # list of permission strings
    is_system = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    users = relationship("User", back_populates="role", passive_deletes=True)
