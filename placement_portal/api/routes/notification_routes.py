"""
Notification Routes (all require login, scoped to the caller)

GET /notifications - 50 most recent, newest first
GET /notifications/unread-count - Badge count
POST /notifications/read-all - Mark everything read
PATCH /notifications/{notification_id}/read - Mark one read
"""

from fastapi import APIRouter, Depends

from placement_portal.core.auth import get_current_user
from placement_portal.services.notification_service import get_notification_service

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("")
def list_notifications(user: dict = Depends(get_current_user)):
    notifications = get_notification_service().list_recent(user["user_id"])
    return {"success": True, "count": len(notifications), "data": notifications}


@router.get("/unread-count")
def unread_count(user: dict = Depends(get_current_user)):
    return {"success": True, "count": get_notification_service().unread_count(user["user_id"])}


# Must be declared before /{notification_id}/read
@router.post("/read-all")
def read_all(user: dict = Depends(get_current_user)):
    modified = get_notification_service().mark_all_read(user["user_id"])
    return {"success": True, "modifiedCount": modified}


@router.patch("/{notification_id}/read")
def mark_read(notification_id: str, user: dict = Depends(get_current_user)):
    notification = get_notification_service().mark_read(notification_id, user["user_id"])
    return {"success": True, "data": notification}
