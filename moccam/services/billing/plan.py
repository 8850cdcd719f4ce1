from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.core.deps import AuthorizationService
from moccam.db.models.database import Payments, SubscriptionPlans, User, UserSubscriptions
from moccam.db.session import get_session
from moccam.db.uow import transaction
from moccam.libs.formats.datetime import now as get_now
from moccam.libs.sql.dependents import ensure_no_dependents
from moccam.libs.sql.partial_update import PartialUpdate
from moccam.schemas.billing.plan import CreatePlan, UpdatePlan

PLAN_DEPENDENTS = [
    (UserSubscriptions.plan_id, "gói đăng ký của người dùng"),
    (Payments.plan_id, "thanh toán"),
]


class SubscriptionPlanService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def get_plans_async(self, include_inactive: bool = False):
        stmt = select(SubscriptionPlans).order_by(
            SubscriptionPlans.price.asc(), SubscriptionPlans.plan_id
        )
        if not include_inactive:
            stmt = stmt.where(SubscriptionPlans.is_active.is_(True))
        return (await self.db.scalars(stmt)).all()

    async def get_plan_async(self, plan_id: int, user: User | None = None) -> SubscriptionPlans:
        plan = await self.db.get(SubscriptionPlans, plan_id)
        # khách hàng không thấy gói đã tắt
        hidden = plan is not None and not plan.is_active and (
            user is None or not AuthorizationService.is_staff(user)
        )
        if not plan or hidden:
            raise HTTPException(404, "Gói đăng ký không tồn tại")
        return plan

    async def create_plan_async(self, schema: CreatePlan):
        try:
            plan = SubscriptionPlans(**schema.model_dump(), created_at=get_now())
            self.db.add(plan)
            await self.db.commit()
            await self.db.refresh(plan)
            return plan
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Plans][Create] {e}")
            raise HTTPException(500, f"Lỗi khi tạo gói đăng ký: {e}")

    async def update_plan_async(self, plan_id: int, schema: UpdatePlan):
        try:
            plan = await self.db.get(SubscriptionPlans, plan_id)
            if not plan:
                raise HTTPException(404, "Gói đăng ký không tồn tại")
            await self.db.execute(
                PartialUpdate(SubscriptionPlans)
                .merge(schema)
                .statement(SubscriptionPlans.plan_id == plan_id)
            )
            await self.db.commit()
            await self.db.refresh(plan)
            return plan
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Plans][Update] {e}")
            raise HTTPException(500, f"Lỗi khi cập nhật gói đăng ký: {e}")

    async def delete_plan_async(self, plan_id: int):
        try:
            async with transaction(self.db):
                if not await self.db.get(SubscriptionPlans, plan_id):
                    raise HTTPException(404, "Gói đăng ký không tồn tại")
                await ensure_no_dependents(
                    self.db, PLAN_DEPENDENTS, plan_id, "Không thể xóa gói đăng ký này."
                )
                await self.db.execute(
                    delete(SubscriptionPlans).where(SubscriptionPlans.plan_id == plan_id)
                )
            return {"message": "Xóa gói đăng ký thành công"}
        except HTTPException:
            raise
        except Exception as e:
            logger.exception(f"[Plans][Delete] {e}")
            raise HTTPException(500, f"Lỗi khi xóa gói đăng ký: {e}")
