"""Notifications router."""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from monquest_cms.api.serializers import dump
from monquest_cms.core import permissions as perms
from monquest_cms.core.security import require_permission
from monquest_cms.db.session import get_db
from monquest_cms.models.user import User
from monquest_cms.schemas.schemas import (
    MessageResponse, NotificationCreate, NotificationOut, NotificationUpdate, Pagination,
)
from monquest_cms.services.notification_service import NOTIFICATION_HEADER, notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])

panel_user = require_permission(perms.PANEL_ACCESS)


@router.get("")
async def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = Query(""),
    unread_only: bool = Query(False, alias="unreadOnly"),
    db: Session = Depends(get_db),
    user: User = Depends(panel_user),
):
    result = notification_service.list_for_user(db, user.id, page, limit, search, unread_only)
    return {
        "success": True,
        "data": {
            "notifications": [dump(NotificationOut.model_validate(n)) for n in result["notifications"]],
            "pagination": dump(Pagination.build(page, limit, result["total"])),
        },
    }


@router.post("", status_code=201)
async def create_notification(
    body: NotificationCreate,
    response: Response,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("content.edit")),
):
    notification = notification_service.create(
        db, body.title, body.message, type=body.type,
        user_id=body.user_id, action_url=body.action_url,
    )
    response.headers[NOTIFICATION_HEADER] = "true"
    return {"success": True, "data": dump(NotificationOut.model_validate(notification))}


@router.delete("", response_model=MessageResponse)
async def clear_notifications(
    db: Session = Depends(get_db),
    user: User = Depends(panel_user),
):
    notification_service.clear(db, user.id)
    return MessageResponse(message="All notifications cleared")


@router.post("/read-all", response_model=MessageResponse)
async def mark_all_read(
    db: Session = Depends(get_db),
    user: User = Depends(panel_user),
):
    updated = notification_service.mark_all_read(db, user.id)
    return MessageResponse(message="All notifications marked as read", detail={"updated": updated})


@router.patch("/{notification_id}")
async def mark_notification(
    notification_id: str,
    body: NotificationUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(panel_user),
):
    notification = notification_service.mark_read(db, user.id, notification_id, body.read)
    return {"success": True, "data": dump(NotificationOut.model_validate(notification))}


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(panel_user),
):
    notification_service.delete(db, user.id, notification_id)
    return MessageResponse(message="Notification deleted")
