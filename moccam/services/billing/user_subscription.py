from datetime import timedelta

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.core.deps import AuthorizationService
from moccam.core.enum import SubscriptionStatus
from moccam.core.settings import settings
from moccam.db.models.database import SubscriptionPlans, User, UserSubscriptions
from moccam.db.session import get_session
from moccam.libs.formats.datetime import now as get_now
from moccam.schemas.billing.plan import CreateUserSubscription


class UserSubscriptionService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    @staticmethod
    def _base_stmt():
        return (
            select(UserSubscriptions, User.full_name, SubscriptionPlans.plan_name)
            .join(User, User.user_id == UserSubscriptions.user_id)
            .join(SubscriptionPlans, SubscriptionPlans.plan_id == UserSubscriptions.plan_id)
            .order_by(UserSubscriptions.start_date.desc(), UserSubscriptions.user_subscription_id.desc())
        )

    @staticmethod
    def _to_dict(sub: UserSubscriptions, full_name: str, plan_name: str) -> dict:
        return {
            "user_subscription_id": sub.user_subscription_id,
            "user_id": sub.user_id,
            "full_name": full_name,
            "plan_id": sub.plan_id,
            "plan_name": plan_name,
            "start_date": sub.start_date,
            "end_date": sub.end_date,
            "status": sub.status,
            "created_at": sub.created_at,
        }

    async def get_subscriptions_async(self, user: User, user_id: int | None = None):
        stmt = self._base_stmt()
        if not AuthorizationService.is_staff(user):
            stmt = stmt.where(UserSubscriptions.user_id == user.user_id)
        elif user_id is not None:
            stmt = stmt.where(UserSubscriptions.user_id == user_id)
        rows = (await self.db.execute(stmt)).all()
        return [self._to_dict(*row) for row in rows]

    async def get_subscription_async(self, subscription_id: int, user: User):
        row = (
            await self.db.execute(
                self._base_stmt().where(UserSubscriptions.user_subscription_id == subscription_id)
            )
        ).first()
        if not row:
            raise HTTPException(404, "Gói đăng ký không tồn tại")
        sub = row[0]
        if not AuthorizationService.is_staff(user) and sub.user_id != user.user_id:
            raise HTTPException(403, "Bạn chỉ có thể xem gói đăng ký của chính mình")
        return self._to_dict(*row)

    async def activate_async(self, user_id: int, plan: SubscriptionPlans) -> UserSubscriptions | None:
        """
        ✅ Kích hoạt gói cho user (dùng trong transaction của thanh toán).
        - Không tự commit.
        - Bỏ qua nếu cùng (user, plan) vừa được kích hoạt trong cửa sổ chống trùng.
        """
        current = get_now()
        window_start = current - timedelta(minutes=settings.SUBSCRIPTION_DUPLICATE_WINDOW_MINUTES)
        duplicate = await self.db.scalar(
            select(UserSubscriptions.user_subscription_id).where(
                UserSubscriptions.user_id == user_id,
                UserSubscriptions.plan_id == plan.plan_id,
                UserSubscriptions.status == SubscriptionStatus.ACTIVE.value,
                UserSubscriptions.created_at >= window_start,
            )
        )
        if duplicate:
            logger.warning(
                f"[Subscriptions][Activate] bỏ qua kích hoạt trùng user={user_id} plan={plan.plan_id}"
            )
            return None

        duration = plan.duration_in_days or settings.DEFAULT_PLAN_DURATION_DAYS
        sub = UserSubscriptions(
            user_id=user_id,
            plan_id=plan.plan_id,
            start_date=current,
            end_date=current + timedelta(days=duration),
            status=SubscriptionStatus.ACTIVE.value,
            created_at=current,
        )
        self.db.add(sub)
        await self.db.flush()
        return sub

    async def create_subscription_async(self, schema: CreateUserSubscription):
        try:
            if not await self.db.get(User, schema.user_id):
                raise HTTPException(400, "Người dùng không tồn tại")
            plan = await self.db.get(SubscriptionPlans, schema.plan_id)
            if not plan:
                raise HTTPException(400, "Gói đăng ký không tồn tại")

            sub = await self.activate_async(schema.user_id, plan)
            if sub is None:
                raise HTTPException(400, "Gói này vừa được kích hoạt cho người dùng")
            await self.db.commit()
            return {"message": "Kích hoạt gói thành công", "user_subscription_id": sub.user_subscription_id}
        except HTTPException:
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Subscriptions][Create] {e}")
            raise HTTPException(500, f"Lỗi khi kích hoạt gói: {e}")

    async def cancel_subscription_async(self, subscription_id: int, user: User):
        sub = await self.db.get(UserSubscriptions, subscription_id)
        if not sub:
            raise HTTPException(404, "Gói đăng ký không tồn tại")
        if not AuthorizationService.is_staff(user) and sub.user_id != user.user_id:
            raise HTTPException(403, "Bạn chỉ có thể hủy gói đăng ký của chính mình")

        # chỉ gói đang active mới hủy được
        result = await self.db.execute(
            update(UserSubscriptions)
            .where(
                UserSubscriptions.user_subscription_id == subscription_id,
                UserSubscriptions.status == SubscriptionStatus.ACTIVE.value,
            )
            .values(status=SubscriptionStatus.CANCELED.value)
        )
        if not result.rowcount:
            raise HTTPException(400, "Chỉ có thể hủy gói đang hoạt động")
        await self.db.commit()
        return {"message": "Hủy gói đăng ký thành công"}
