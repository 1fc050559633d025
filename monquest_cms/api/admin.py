"""Dashboard / activity log API router."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import text
from sqlalchemy.orm import Session

from monquest_cms.core import permissions as perms
from monquest_cms.core.security import require_permission
from monquest_cms.db.session import get_db
from monquest_cms.models import ApiKey, ApiKeyStatus, Content, Notification, Role, User, UserStatus
from monquest_cms.services.audit_service import audit_service
from monquest_cms.services.cache_service import cache_service

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard/stats")
async def dashboard_stats(
    db: Session = Depends(get_db),
    user: User = Depends(require_permission(perms.PANEL_ACCESS)),
):
    """Counts shown on the admin dashboard."""
    recent = audit_service.recent(db)
    return {
        "success": True,
        "data": {
            "totalUsers": db.query(User).count(),
            "activeUsers": db.query(User).filter(User.status == UserStatus.ACTIVE).count(),
            "totalRoles": db.query(Role).count(),
            "contentSections": db.query(Content).count(),
            "activeApiKeys": db.query(ApiKey).filter(ApiKey.status == ApiKeyStatus.ACTIVE).count(),
            "unreadNotifications": db.query(Notification).filter(
                Notification.read.is_(False),
                (Notification.user_id == user.id) | Notification.user_id.is_(None),
            ).count(),
            "recentActivity": [
                {
                    "action": log.action,
                    "resource": log.resource,
                    "resourceId": log.resource_id,
                    "createdAt": log.created_at.isoformat() if log.created_at else None,
                }
                for log in recent
            ],
        },
    }


@router.get("/activity")
async def get_activity_logs(
    action: Optional[str] = Query(None),
    resource: Optional[str] = Query(None),
    user_id: Optional[str] = Query(None, alias="userId"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200, alias="pageSize"),
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("settings.view")),
):
    """Query the activity trail."""
    result = audit_service.query_logs(db, user_id, action, resource, page, page_size)
    return {
        "success": True,
        "data": {
            "logs": [
                {
                    "id": log.id,
                    "userId": log.user_id,
                    "action": log.action,
                    "resource": log.resource,
                    "resourceId": log.resource_id,
                    "details": log.details,
                    "ipAddress": log.ip_address,
                    "createdAt": log.created_at.isoformat() if log.created_at else None,
                }
                for log in result["logs"]
            ],
            "total": result["total"],
            "page": result["page"],
        },
    }


@router.get("/health/deps")
async def health_check(db: Session = Depends(get_db)):
    """Dependency health check — database and Redis."""
    db_ok = False
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except Exception:
        db.rollback()

    redis_ok = cache_service.health_check()

    return {
        "database": "ok" if db_ok else "error",
        "redis": "ok" if redis_ok else "error",
        "status": "healthy" if db_ok else "degraded",
    }
