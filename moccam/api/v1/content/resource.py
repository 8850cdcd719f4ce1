from fastapi import APIRouter, Body, Depends, status

from moccam.core.deps import AuthorizationService
from moccam.core.enum import STAFF_ROLES
from moccam.schemas.content.course import CreateResource, UpdateResource
from moccam.services.content.resource import ResourceService

router = APIRouter(prefix="/resources", tags=["Resources"])


@router.get("")
async def get_resources(
    lesson_id: int | None = None,
    service: ResourceService = Depends(ResourceService),
):
    return await service.get_resources_async(lesson_id)


@router.get("/{resource_id}")
async def get_resource(
    resource_id: int,
    service: ResourceService = Depends(ResourceService),
):
    return await service.get_resource_async(resource_id)


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_resource(
    schema: CreateResource = Body(),
    service: ResourceService = Depends(ResourceService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.create_resource_async(schema)


@router.put("/{resource_id}")
async def update_resource(
    resource_id: int,
    schema: UpdateResource = Body(),
    service: ResourceService = Depends(ResourceService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.update_resource_async(resource_id, schema)


@router.delete("/{resource_id}")
async def delete_resource(
    resource_id: int,
    service: ResourceService = Depends(ResourceService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.delete_resource_async(resource_id)
