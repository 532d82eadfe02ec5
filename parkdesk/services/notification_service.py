# parkdesk/services/notification_service.py
"""
User notifications.
add_notification() never commits: callers include it in their own transaction
so a notification exists only if the change it describes was committed.
"""

from datetime import datetime
from sqlalchemy.orm import Session
from parkdesk.config import settings
from parkdesk.models.notification import Notification
from parkdesk.utils.logger import get_logger

logger = get_logger(__name__)


def add_notification(db: Session, user_id: int, title: str, message: str) -> Notification:
    notification = Notification(user_id=user_id, title=title, message=message,
                                is_read=False, created_at=datetime.utcnow())
    db.add(notification)
    return notification


def list_notifications(db: Session, user_id: int, limit: int = None):
    """Newest first, capped at NOTIFICATION_LIMIT."""
    limit = min(limit or settings.NOTIFICATION_LIMIT, settings.NOTIFICATION_LIMIT)
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
        .all()
    )


def mark_read(db: Session, notification_id: int, user_id: int) -> bool:
    """Flag a notification as read. Returns False if it is not the user's."""
    updated = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    if not updated:
        logger.debug(f"[Notify] Notification {notification_id} not found for user {user_id}")
    return bool(updated)
