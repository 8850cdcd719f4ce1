from fastapi import APIRouter, Body, Depends, status

from moccam.core.deps import AuthorizationService
from moccam.core.enum import STAFF_ROLES
from moccam.schemas.billing.voucher import CreateVoucher, UpdateVoucher
from moccam.services.billing.voucher import VoucherService

router = APIRouter(prefix="/vouchers", tags=["Vouchers"])


@router.get("")
async def get_vouchers(
    service: VoucherService = Depends(VoucherService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.get_vouchers_async()


@router.get("/check/{code}")
async def check_voucher(
    code: str,
    service: VoucherService = Depends(VoucherService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.get_current_user()
    return await service.check_voucher_async(code)


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_voucher(
    schema: CreateVoucher = Body(),
    service: VoucherService = Depends(VoucherService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.require_role(STAFF_ROLES)
    return await service.create_voucher_async(schema, user)


@router.put("/{voucher_id}")
async def update_voucher(
    voucher_id: int,
    schema: UpdateVoucher = Body(),
    service: VoucherService = Depends(VoucherService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.update_voucher_async(voucher_id, schema)


@router.delete("/{voucher_id}")
async def delete_voucher(
    voucher_id: int,
    service: VoucherService = Depends(VoucherService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.delete_voucher_async(voucher_id)
