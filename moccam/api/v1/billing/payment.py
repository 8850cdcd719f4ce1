from fastapi import APIRouter, Body, Depends, Query, status

from moccam.core.deps import AuthorizationService
from moccam.core.enum import UserRole
from moccam.schemas.billing.payment import CreatePaymentLink, PayOSWebhook
from moccam.services.billing.payment import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/payos/create", status_code=status.HTTP_200_OK)
async def create_payos_link(
    schema: CreatePaymentLink = Body(),
    service: PaymentService = Depends(PaymentService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.require_role([UserRole.CUSTOMER.value])
    return await service.create_payment_link_async(schema, user)


@router.get("/payos/return")
async def payos_return(
    order_code: str | None = Query(default=None, alias="orderCode"),
    gateway_status: str | None = Query(default=None, alias="status"),
    service: PaymentService = Depends(PaymentService),
):
    return await service.handle_return_async(order_code, gateway_status)


@router.post("/payos/webhook")
async def payos_webhook(
    body: PayOSWebhook = Body(),
    service: PaymentService = Depends(PaymentService),
):
    return await service.handle_webhook_async(body)


@router.get("")
async def get_payments(
    service: PaymentService = Depends(PaymentService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.get_current_user()
    return await service.get_payments_async(user)
