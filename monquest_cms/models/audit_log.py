"""Activity log model — append-only."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from monquest_cms.db.base import Base


class ActivityLog(Base):
    """Immutable audit trail for admin mutations.

    This table is APPEND-ONLY: no UPDATE or DELETE operations should ever
    be performed on it (enforced at application level).
    """
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(40), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    action = Column(String(100), nullable=False, index=True)  # e.g. "login", "updated"
    resource = Column(String(50), nullable=False, index=True)  # auth, role, content, api_key, ...
    resource_id = Column(String(100), nullable=True)
    details = Column(JSON, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)
