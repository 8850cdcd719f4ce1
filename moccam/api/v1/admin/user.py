from fastapi import APIRouter, Body, Depends, status

from moccam.core.deps import AuthorizationService
from moccam.core.enum import STAFF_ROLES, UserRole
from moccam.schemas.auth.user import UserCreate, UserUpdate
from moccam.services.admin.user import UserService

router = APIRouter(prefix="/users", tags=["Users"])

ADMIN_ONLY = [UserRole.ADMIN.value]


@router.get("")
async def get_users(
    service: UserService = Depends(UserService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(ADMIN_ONLY)
    return await service.get_users_async()


@router.get("/{user_id}")
async def get_user(
    user_id: int,
    service: UserService = Depends(UserService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_self_or_role(user_id, ADMIN_ONLY)
    return await service.get_user_by_id_async(user_id)


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_user(
    schema: UserCreate = Body(),
    service: UserService = Depends(UserService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    creator = await authorization.require_role(STAFF_ROLES)
    return await service.create_user_async(schema, creator)


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    schema: UserUpdate = Body(),
    service: UserService = Depends(UserService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    actor = await authorization.get_current_user()
    return await service.update_user_async(user_id, schema, actor)


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    service: UserService = Depends(UserService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(ADMIN_ONLY)
    return await service.delete_user_async(user_id)
