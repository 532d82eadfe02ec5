# parkdesk/routers/notifications.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from parkdesk.database import get_db
from parkdesk.dependencies import get_current_user
from parkdesk.schemas.notification import NotificationOut
from parkdesk.services import notification_service
from parkdesk.services.auth_service import TokenUser

router = APIRouter()


@router.get("/notifications", response_model=list[NotificationOut], summary="Latest notifications, newest first")
def get_notifications(db: Session = Depends(get_db), user: TokenUser = Depends(get_current_user)):
    return notification_service.list_notifications(db, user.id)


@router.put("/notifications/{notification_id}/read", summary="Mark a notification as read")
def mark_notification_read(notification_id: int, db: Session = Depends(get_db),
                           user: TokenUser = Depends(get_current_user)):
    notification_service.mark_read(db, notification_id, user.id)
    return {"message": "Notification marked as read"}
