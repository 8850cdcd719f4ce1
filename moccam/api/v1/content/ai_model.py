from fastapi import APIRouter, Body, Depends, status

from moccam.core.deps import AuthorizationService
from moccam.core.enum import STAFF_ROLES
from moccam.schemas.content.ai_model import CreateAIModel, UpdateAIModel
from moccam.services.content.ai_model import AIModelService

router = APIRouter(prefix="/ai-models", tags=["AI Models"])


@router.get("")
async def get_models(service: AIModelService = Depends(AIModelService)):
    return await service.get_models_async()


@router.get("/{model_id}")
async def get_model(model_id: int, service: AIModelService = Depends(AIModelService)):
    return await service.get_model_async(model_id)


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_model(
    schema: CreateAIModel = Body(),
    service: AIModelService = Depends(AIModelService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.create_model_async(schema)


@router.put("/{model_id}")
async def update_model(
    model_id: int,
    schema: UpdateAIModel = Body(),
    service: AIModelService = Depends(AIModelService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.update_model_async(model_id, schema)


@router.delete("/{model_id}")
async def delete_model(
    model_id: int,
    service: AIModelService = Depends(AIModelService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.delete_model_async(model_id)
