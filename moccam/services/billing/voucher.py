from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.core.security import SecurityService
from moccam.db.models.database import Payments, User, Vouchers
from moccam.db.session import get_session
from moccam.db.uow import transaction
from moccam.libs.formats.datetime import now as get_now
from moccam.libs.sql.dependents import ensure_no_dependents
from moccam.libs.sql.partial_update import PartialUpdate
from moccam.schemas.billing.voucher import CreateVoucher, UpdateVoucher

CODE_LENGTH = 10
MAX_CODE_ATTEMPTS = 5


def ensure_voucher_usable(voucher: Vouchers) -> None:
    """400 nếu voucher ngoài thời hạn hoặc đã hết lượt."""
    current = get_now()
    if current < voucher.start_date or current > voucher.end_date:
        raise HTTPException(400, "Voucher is not valid.")
    if voucher.used_count >= voucher.max_usage:
        raise HTTPException(400, "Voucher has reached its usage limit.")


class VoucherService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def get_vouchers_async(self):
        return (
            await self.db.scalars(select(Vouchers).order_by(Vouchers.created_at.desc()))
        ).all()

    async def get_voucher_async(self, voucher_id: int) -> Vouchers:
        voucher = await self.db.get(Vouchers, voucher_id)
        if not voucher:
            raise HTTPException(404, "Voucher không tồn tại")
        return voucher

    async def check_voucher_async(self, code: str):
        voucher = await self.db.scalar(
            select(Vouchers).where(Vouchers.code == code.strip().upper())
        )
        if not voucher:
            raise HTTPException(404, "Voucher không tồn tại")
        if voucher.used_count >= voucher.max_usage:
            raise HTTPException(400, "Voucher đã hết lượt sử dụng")
        current = get_now()
        if current < voucher.start_date or current > voucher.end_date:
            raise HTTPException(400, "Voucher chưa đến hạn hoặc đã hết hạn")
        return voucher

    async def _generate_unique_code_async(self) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = SecurityService.generate_code(CODE_LENGTH)
            if not await self.db.scalar(select(Vouchers.voucher_id).where(Vouchers.code == code)):
                return code
        raise HTTPException(500, "Không sinh được mã voucher duy nhất")

    async def create_voucher_async(self, schema: CreateVoucher, creator: User):
        try:
            voucher = Vouchers(
                **schema.model_dump(),
                code=await self._generate_unique_code_async(),
                used_count=0,
                created_by=creator.user_id,
                created_at=get_now(),
            )
            self.db.add(voucher)
            await self.db.commit()
            logger.info(f"[Vouchers][Create] code={voucher.code} by={creator.user_id}")
            return {"message": "Tạo voucher thành công", "code": voucher.code}
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Vouchers][Create] {e}")
            raise HTTPException(500, f"Lỗi khi tạo voucher: {e}")

    async def update_voucher_async(self, voucher_id: int, schema: UpdateVoucher):
        try:
            voucher = await self.get_voucher_async(voucher_id)
            builder = PartialUpdate(Vouchers).merge(schema)
            values = builder.values

            start = values.get("start_date", voucher.start_date)
            end = values.get("end_date", voucher.end_date)
            if start >= end:
                raise HTTPException(400, "start_date phải trước end_date")
            if values.get("max_usage", voucher.max_usage) < voucher.used_count:
                raise HTTPException(400, "max_usage không được nhỏ hơn số lượt đã dùng")

            await self.db.execute(builder.statement(Vouchers.voucher_id == voucher_id))
            await self.db.commit()
            await self.db.refresh(voucher)
            return voucher
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Vouchers][Update] {e}")
            raise HTTPException(500, f"Lỗi khi cập nhật voucher: {e}")

    async def delete_voucher_async(self, voucher_id: int):
        try:
            async with transaction(self.db):
                await self.get_voucher_async(voucher_id)
                await ensure_no_dependents(
                    self.db,
                    [(Payments.voucher_id, "thanh toán")],
                    voucher_id,
                    "Không thể xóa voucher này.",
                )
                await self.db.execute(delete(Vouchers).where(Vouchers.voucher_id == voucher_id))
            return {"message": "Xóa voucher thành công"}
        except HTTPException:
            raise
        except Exception as e:
            logger.exception(f"[Vouchers][Delete] {e}")
            raise HTTPException(500, f"Lỗi khi xóa voucher: {e}")
