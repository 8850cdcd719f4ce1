from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import delete, func, or_, select, true, update
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.core.deps import AuthorizationService
from moccam.db.models.database import Notifications, User
from moccam.db.session import get_session
from moccam.libs.formats.datetime import now as get_now
from moccam.schemas.shares.notification import NotificationCreateSchema


class NotificationService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    @staticmethod
    def _visible_to(user: User):
        # khách hàng: thông báo riêng + thông báo chung (user_id NULL)
        if AuthorizationService.is_staff(user):
            return true()
        return or_(Notifications.user_id == user.user_id, Notifications.user_id.is_(None))

    # ==========================================================================
    # 📋 Lấy danh sách thông báo
    # ==========================================================================
    async def get_notifications_async(self, user: User):
        try:
            stmt = (
                select(Notifications)
                .where(self._visible_to(user))
                .order_by(Notifications.created_at.desc(), Notifications.notification_id.desc())
            )
            return (await self.db.scalars(stmt)).all()
        except Exception as e:
            logger.exception(f"[Notifications][Get] Lỗi truy vấn: {e}")
            raise HTTPException(500, "Lỗi hệ thống khi lấy thông báo.")

    async def get_unread_count_async(self, user: User):
        stmt = (
            select(func.count())
            .select_from(Notifications)
            .where(self._visible_to(user))
            .where(Notifications.is_read.is_(False))
        )
        return {"unread": (await self.db.execute(stmt)).scalar_one()}

    # ==========================================================================
    # 📨 Tạo thông báo
    # ==========================================================================
    async def create_notification_async(
        self,
        schema: NotificationCreateSchema,
        commit: bool = True,
    ) -> Notifications:
        """commit=False khi được gọi bên trong transaction của nghiệp vụ khác."""
        try:
            if schema.user_id is not None and not await self.db.get(User, schema.user_id):
                raise HTTPException(400, "Người nhận không tồn tại")

            notif = Notifications(
                user_id=schema.user_id,
                title=schema.title,
                message=schema.message,
                type=schema.type or "system",
                is_read=False,
                created_at=get_now(),
            )
            self.db.add(notif)
            if commit:
                await self.db.commit()
                await self.db.refresh(notif)
            else:
                await self.db.flush()
            return notif
        except HTTPException:
            raise
        except Exception as e:
            if commit:
                await self.db.rollback()
            logger.exception(f"[Notifications][Create] {e}")
            raise HTTPException(500, "Không thể tạo thông báo.")

    # ==========================================================================
    # ✅ Đánh dấu đã đọc
    # ==========================================================================
    async def mark_as_read_async(self, notification_id: int, user: User):
        try:
            notif = await self.db.get(Notifications, notification_id)
            if not notif:
                raise HTTPException(404, "Thông báo không tồn tại.")
            if notif.user_id != user.user_id and not AuthorizationService.is_staff(user):
                raise HTTPException(403, "Bạn không thể đánh dấu thông báo này.")

            # chỉ update khi chưa đọc → read_at được ghi đúng một lần
            result = await self.db.execute(
                update(Notifications)
                .where(
                    Notifications.notification_id == notification_id,
                    Notifications.is_read.is_(False),
                )
                .values(is_read=True, read_at=get_now())
            )
            await self.db.commit()
            return {
                "success": True,
                "message": "Đã đánh dấu đã đọc." if result.rowcount else "Thông báo đã được đọc trước đó.",
                "notification_id": notification_id,
            }
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Notifications][Read] {e}")
            raise HTTPException(500, "Lỗi hệ thống khi cập nhật thông báo.")

    async def mark_all_as_read_async(self, user: User):
        try:
            result = await self.db.execute(
                update(Notifications)
                .where(
                    Notifications.user_id == user.user_id,
                    Notifications.is_read.is_(False),
                )
                .values(is_read=True, read_at=get_now())
            )
            await self.db.commit()
            return {"success": True, "updated": result.rowcount}
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Notifications][ReadAll] {e}")
            raise HTTPException(500, "Lỗi hệ thống khi cập nhật thông báo.")

    async def delete_notification_async(self, notification_id: int):
        try:
            result = await self.db.execute(
                delete(Notifications).where(Notifications.notification_id == notification_id)
            )
            if not result.rowcount:
                raise HTTPException(404, "Thông báo không tồn tại.")
            await self.db.commit()
            return {"message": "Đã xóa thông báo."}
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Notifications][Delete] {e}")
            raise HTTPException(500, "Lỗi hệ thống khi xóa thông báo.")
