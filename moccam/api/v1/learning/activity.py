from fastapi import APIRouter, Depends

from moccam.core.deps import AuthorizationService
from moccam.core.enum import STAFF_ROLES
from moccam.services.learning.activity import ActivityService

router = APIRouter(prefix="/activity", tags=["Activity"])


@router.get("")
async def get_all_activity(
    service: ActivityService = Depends(ActivityService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.get_all_activity_async()


@router.post("/log")
async def log_activity(
    service: ActivityService = Depends(ActivityService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.get_current_user()
    return await service.log_today_async(user)


@router.get("/{user_id}")
async def get_user_activity(
    user_id: int,
    service: ActivityService = Depends(ActivityService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_self_or_role(
        user_id, message="You can only view your own activity"
    )
    return await service.get_user_activity_async(user_id)


@router.delete("/{activity_id}")
async def delete_activity(
    activity_id: int,
    service: ActivityService = Depends(ActivityService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.delete_activity_async(activity_id)
