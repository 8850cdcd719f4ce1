from fastapi import APIRouter, Body, Depends, status

from moccam.core.deps import AuthorizationService
from moccam.core.enum import STAFF_ROLES
from moccam.schemas.billing.plan import CreateUserSubscription
from moccam.services.billing.user_subscription import UserSubscriptionService

router = APIRouter(prefix="/user-subscriptions", tags=["User Subscriptions"])


@router.get("")
async def get_subscriptions(
    service: UserSubscriptionService = Depends(UserSubscriptionService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.get_current_user()
    return await service.get_subscriptions_async(user)


@router.get("/user/{user_id}")
async def get_subscriptions_by_user(
    user_id: int,
    service: UserSubscriptionService = Depends(UserSubscriptionService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.require_self_or_role(
        user_id, message="Bạn chỉ có thể xem gói đăng ký của chính mình"
    )
    return await service.get_subscriptions_async(user, user_id=user_id)


@router.get("/{subscription_id}")
async def get_subscription(
    subscription_id: int,
    service: UserSubscriptionService = Depends(UserSubscriptionService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.get_current_user()
    return await service.get_subscription_async(subscription_id, user)


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_subscription(
    schema: CreateUserSubscription = Body(),
    service: UserSubscriptionService = Depends(UserSubscriptionService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.create_subscription_async(schema)


@router.put("/{subscription_id}/cancel")
async def cancel_subscription(
    subscription_id: int,
    service: UserSubscriptionService = Depends(UserSubscriptionService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.get_current_user()
    return await service.cancel_subscription_async(subscription_id, user)
