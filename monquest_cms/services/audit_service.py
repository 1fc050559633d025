"""Activity log service — who changed what in the admin panel."""

from typing import Any, Optional

from fastapi import Request
from sqlalchemy.orm import Session

from monquest_cms.models.audit_log import ActivityLog

USER_AGENT_MAX = 500


class AuditService:
    """Appends activity entries and serves the dashboard's activity views."""

    @staticmethod
    def record(
        db: Session,
        action: str,
        resource: str,
        user_id: Optional[str] = None,
        resource_id: Optional[Any] = None,
        details: Optional[Any] = None,
        request: Optional[Request] = None,
    ) -> ActivityLog:
        """Append one entry; client address and agent come from ``request``."""
        entry = ActivityLog(
            user_id=user_id,
            action=action,
            resource=resource,
            resource_id=None if resource_id is None else str(resource_id),
            details=details,
        )
        if request is not None:
            entry.ip_address = request.client.host if request.client else None
            entry.user_agent = request.headers.get("user-agent", "")[:USER_AGENT_MAX]
        db.add(entry)
        db.commit()
        return entry

    @staticmethod
    def log_from_request(db: Session, request: Request, user_id: Optional[str], action: str,
                         resource: str, resource_id: Optional[Any] = None,
                         details: Optional[Any] = None) -> ActivityLog:
        return AuditService.record(
            db, action, resource, user_id=user_id, resource_id=resource_id,
            details=details, request=request,
        )

    @staticmethod
    def recent(db: Session, limit: int = 5):
        """Latest entries for the dashboard feed."""
        return (
            db.query(ActivityLog)
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def query_logs(
        db: Session,
        user_id: Optional[str] = None,
        action: Optional[str] = None,
        resource: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> dict:
        """Exact-match filters on actor, action and resource, newest first."""
        filters = []
        if user_id:
            filters.append(ActivityLog.user_id == user_id)
        if action:
            filters.append(ActivityLog.action == action)
        if resource:
            filters.append(ActivityLog.resource == resource)

        query = db.query(ActivityLog).filter(*filters)
        total = query.count()
        logs = (
            query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return {"logs": logs, "total": total, "page": page}


audit_service = AuditService()
