from fastapi import APIRouter, Body, Depends, status

from moccam.core.deps import AuthorizationService
from moccam.core.enum import STAFF_ROLES
from moccam.schemas.shares.notification import NotificationCreateSchema
from moccam.services.shares.notification import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("")
async def get_notifications(
    service: NotificationService = Depends(NotificationService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.get_current_user()
    return await service.get_notifications_async(user)


@router.get("/unread-count")
async def get_unread_count(
    service: NotificationService = Depends(NotificationService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.get_current_user()
    return await service.get_unread_count_async(user)


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_notification(
    schema: NotificationCreateSchema = Body(),
    service: NotificationService = Depends(NotificationService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.create_notification_async(schema)


@router.put("/read-all")
async def mark_all_as_read(
    service: NotificationService = Depends(NotificationService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.get_current_user()
    return await service.mark_all_as_read_async(user)


@router.put("/{notification_id}/read")
async def mark_as_read(
    notification_id: int,
    service: NotificationService = Depends(NotificationService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.get_current_user()
    return await service.mark_as_read_async(notification_id, user)


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: int,
    service: NotificationService = Depends(NotificationService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.delete_notification_async(notification_id)
