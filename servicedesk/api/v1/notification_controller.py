"""
Notification Controller
=======================

The signed-in user's notifications.
"""
from fastapi import APIRouter, Depends, Query

from servicedesk.api.responses import paginated, success
from servicedesk.api.v1.dependencies import get_current_user, get_notification_service
from servicedesk.application.dto.notification_dto import NotificationResponse
from servicedesk.application.services.notification_service import NotificationService
from servicedesk.domain.models.user import User

router = APIRouter(tags=["notifications"])


@router.get("", summary="List notifications")
def list_notifications(
    unread_only: bool = False,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    notifications, total = service.list_for_user(user.id, unread_only=unread_only, page=page, limit=limit)
    return paginated([NotificationResponse.from_entity(n) for n in notifications], page, limit, total)


@router.get("/unread-count", summary="Number of unread notifications")
def unread_count(
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return success({"count": service.unread_count(user.id)})


@router.post("/read-all", summary="Mark every notification read")
def mark_all_read(
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    updated = service.mark_all_read(user.id)
    return success({"updated": updated}, "All notifications marked as read")


@router.post("/{notification_id}/read", summary="Mark a notification read")
def mark_read(
    notification_id: str,
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    notification = service.mark_read(user.id, notification_id)
    return success(NotificationResponse.from_entity(notification))


@router.delete("/{notification_id}", summary="Delete a notification")
def delete_notification(
    notification_id: str,
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    service.delete(user.id, notification_id)
    return success(message="Notification deleted")
