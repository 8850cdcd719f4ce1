from fastapi import APIRouter, Body, Depends, status

from moccam.core.deps import AuthorizationService
from moccam.core.enum import STAFF_ROLES
from moccam.schemas.content.ai_model import CreateHandMotion, UpdateHandMotion
from moccam.services.content.ai_model import HandMotionService

router = APIRouter(prefix="/hand-motions", tags=["Hand Motions"])


@router.get("")
async def get_motions(
    lesson_id: int | None = None,
    service: HandMotionService = Depends(HandMotionService),
):
    return await service.get_motions_async(lesson_id)


@router.get("/{motion_id}")
async def get_motion(motion_id: int, service: HandMotionService = Depends(HandMotionService)):
    return await service.get_motion_async(motion_id)


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_motion(
    schema: CreateHandMotion = Body(),
    service: HandMotionService = Depends(HandMotionService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.create_motion_async(schema)


@router.put("/{motion_id}")
async def update_motion(
    motion_id: int,
    schema: UpdateHandMotion = Body(),
    service: HandMotionService = Depends(HandMotionService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.update_motion_async(motion_id, schema)


@router.delete("/{motion_id}")
async def delete_motion(
    motion_id: int,
    service: HandMotionService = Depends(HandMotionService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.delete_motion_async(motion_id)
