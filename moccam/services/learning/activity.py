import datetime

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.db.models.database import User, UserActivityLog
from moccam.db.session import get_session
from moccam.libs.formats.datetime import today as get_today
from moccam.libs.sql.upsert import insert_ignore


class ActivityService:
    """Nhật ký hoạt động theo ngày: tối đa một dòng cho mỗi (user, ngày)."""

    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def ensure_logged_async(self, user_id: int, day: datetime.date) -> bool:
        """Ghi nhận hoạt động của ngày ``day`` (không commit). True nếu vừa tạo mới."""
        return await insert_ignore(
            self.db,
            UserActivityLog,
            {"user_id": user_id, "activity_date": day},
            ("user_id", "activity_date"),
        )

    async def has_activity_async(self, user_id: int, day: datetime.date) -> bool:
        return bool(
            await self.db.scalar(
                select(
                    exists().where(
                        UserActivityLog.user_id == user_id,
                        UserActivityLog.activity_date == day,
                    )
                )
            )
        )

    async def log_today_async(self, user: User):
        try:
            created = await self.ensure_logged_async(user.user_id, get_today())
            await self.db.commit()
            if not created:
                return {"message": "User has already logged activity today."}
            return {"message": "Activity logged successfully."}
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Activity][Log] {e}")
            raise HTTPException(500, "Lỗi máy chủ khi ghi nhận hoạt động.")

    async def get_all_activity_async(self):
        stmt = (
            select(UserActivityLog, User.full_name)
            .join(User, User.user_id == UserActivityLog.user_id)
            .order_by(UserActivityLog.activity_date.desc(), UserActivityLog.activity_id.desc())
        )
        rows = (await self.db.execute(stmt)).all()
        return [
            {
                "activity_id": a.activity_id,
                "user_id": a.user_id,
                "full_name": full_name,
                "activity_date": a.activity_date,
            }
            for a, full_name in rows
        ]

    async def get_user_activity_async(self, user_id: int):
        rows = (
            await self.db.scalars(
                select(UserActivityLog)
                .where(UserActivityLog.user_id == user_id)
                .order_by(UserActivityLog.activity_date.desc())
            )
        ).all()
        if not rows:
            raise HTTPException(404, "No activity found for this user.")
        return rows

    async def delete_activity_async(self, activity_id: int):
        result = await self.db.execute(
            delete(UserActivityLog).where(UserActivityLog.activity_id == activity_id)
        )
        if not result.rowcount:
            raise HTTPException(404, "Activity not found.")
        await self.db.commit()
        return {"message": "Activity deleted successfully."}
