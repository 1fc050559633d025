"""In-app notification model."""

import enum

from sqlalchemy import Column, String, Text, Boolean, DateTime, Enum, ForeignKey, func

from monquest_cms.db.base import Base
from monquest_cms.models.role import new_id


class NotificationType(str, enum.Enum):
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"


class Notification(Base):
    """Notification for one user, or for every admin when ``user_id`` is null."""
    __tablename__ = "notifications"

    id = Column(String(40), primary_key=True, default=new_id)
    user_id = Column(String(40), ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    type = Column(Enum(NotificationType), default=NotificationType.INFO, nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    action_url = Column(String(500), nullable=True)
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)
