"""Notification service — per-user and broadcast admin notifications."""

import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from monquest_cms.models.notification import Notification, NotificationType
from monquest_cms.core.exceptions import ResourceNotFoundError, ValidationError

logger = logging.getLogger("monquest.notifications")

# Response header telling the admin client to refresh its unread counter.
NOTIFICATION_HEADER = "X-Notification-Created"


class NotificationService:
    """Creates and queries in-app notifications."""

    @staticmethod
    def create(
        db: Session,
        title: str,
        message: str,
        type: str = NotificationType.INFO.value,
        user_id: Optional[str] = None,
        action_url: Optional[str] = None,
    ) -> Notification:
        """Create a notification; ``user_id=None`` broadcasts to every admin."""
        if not title or not message:
            raise ValidationError("Title and message are required")
        try:
            kind = NotificationType(type)
        except ValueError:
            raise ValidationError(f"Invalid notification type '{type}'")

        notification = Notification(
            user_id=user_id,
            type=kind,
            title=title,
            message=message,
            action_url=action_url,
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def broadcast(
        db: Session,
        title: str,
        message: str,
        type: str = NotificationType.INFO.value,
        action_url: Optional[str] = None,
    ) -> Optional[Notification]:
        """Broadcast to all admins. Failures are logged, never raised."""
        try:
            return NotificationService.create(
                db, title, message, type=type, action_url=action_url,
            )
        except Exception as e:
            db.rollback()
            logger.error("Notification error (non-fatal): %s", e)
            return None

    @staticmethod
    def _visible_to(db: Session, user_id: str):
        return db.query(Notification).filter(
            or_(Notification.user_id == user_id, Notification.user_id.is_(None))
        )

    @staticmethod
    def list_for_user(
        db: Session,
        user_id: str,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        unread_only: bool = False,
    ):
        """Own and broadcast notifications, newest first."""
        query = NotificationService._visible_to(db, user_id)
        if search:
            query = query.filter(
                or_(
                    Notification.title.contains(search),
                    Notification.message.contains(search),
                )
            )
        if unread_only:
            query = query.filter(Notification.read.is_(False))

        total = query.count()
        items = (
            query.order_by(Notification.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return {"notifications": items, "total": total, "page": page, "limit": limit}

    @staticmethod
    def unread_count(db: Session, user_id: str) -> int:
        return (
            NotificationService._visible_to(db, user_id)
            .filter(Notification.read.is_(False))
            .count()
        )

    @staticmethod
    def _get_visible(db: Session, user_id: str, notification_id: str) -> Notification:
        notification = (
            NotificationService._visible_to(db, user_id)
            .filter(Notification.id == notification_id)
            .first()
        )
        if not notification:
            raise ResourceNotFoundError("Notification not found")
        return notification

    @staticmethod
    def mark_read(db: Session, user_id: str, notification_id: str, read: bool = True) -> Notification:
        notification = NotificationService._get_visible(db, user_id, notification_id)
        notification.read = read
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def mark_all_read(db: Session, user_id: str) -> int:
        updated = (
            NotificationService._visible_to(db, user_id)
            .filter(Notification.read.is_(False))
            .update({"read": True}, synchronize_session=False)
        )
        db.commit()
        return updated

    @staticmethod
    def delete(db: Session, user_id: str, notification_id: str) -> None:
        notification = NotificationService._get_visible(db, user_id, notification_id)
        db.delete(notification)
        db.commit()

    @staticmethod
    def clear(db: Session, user_id: str) -> int:
        deleted = NotificationService._visible_to(db, user_id).delete(synchronize_session=False)
        db.commit()
        return deleted


notification_service = NotificationService()
