from fastapi import APIRouter, Body, Depends, status

from moccam.core.deps import AuthorizationService
from moccam.core.enum import STAFF_ROLES
from moccam.schemas.billing.plan import CreatePlan, UpdatePlan
from moccam.services.billing.plan import SubscriptionPlanService

router = APIRouter(prefix="/subscription-plans", tags=["Subscription Plans"])


@router.get("")
async def get_active_plans(
    service: SubscriptionPlanService = Depends(SubscriptionPlanService),
):
    return await service.get_plans_async()


@router.get("/all")
async def get_all_plans(
    service: SubscriptionPlanService = Depends(SubscriptionPlanService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.get_plans_async(include_inactive=True)


@router.get("/{plan_id}")
async def get_plan(
    plan_id: int,
    service: SubscriptionPlanService = Depends(SubscriptionPlanService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.get_current_user()
    return await service.get_plan_async(plan_id, user)


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_plan(
    schema: CreatePlan = Body(),
    service: SubscriptionPlanService = Depends(SubscriptionPlanService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.create_plan_async(schema)


@router.put("/{plan_id}")
async def update_plan(
    plan_id: int,
    schema: UpdatePlan = Body(),
    service: SubscriptionPlanService = Depends(SubscriptionPlanService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.update_plan_async(plan_id, schema)


@router.delete("/{plan_id}")
async def delete_plan(
    plan_id: int,
    service: SubscriptionPlanService = Depends(SubscriptionPlanService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.delete_plan_async(plan_id)
