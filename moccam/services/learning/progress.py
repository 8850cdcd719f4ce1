import datetime
from typing import Any

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.core.deps import AuthorizationService
from moccam.core.enum import ProgressStatus
from moccam.core.settings import settings
from moccam.db.models.database import Leaderboard, LessonProgress, Lessons, User
from moccam.db.session import get_session
from moccam.db.uow import transaction
from moccam.libs.formats.datetime import now as get_now
from moccam.libs.sql.upsert import insert_ignore
from moccam.schemas.learning.progress import SubmitProgress, UpdateProgressStatus
from moccam.services.learning.activity import ActivityService

BASE_POINTS = 10
# chuỗi ngày → điểm thưởng
STREAK_BONUS = {7: 10, 14: 15}


def next_streak(previous_streak: int, had_yesterday: bool) -> int:
    return (previous_streak or 0) + 1 if had_yesterday else 1


def streak_bonus(streak: int) -> int:
    return STREAK_BONUS.get(streak, 0)


class ProgressService:
    """Tiến độ bài học + chuỗi ngày học + bảng xếp hạng."""

    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        activity: ActivityService = Depends(ActivityService),
    ):
        self.db = db
        self.activity = activity

    # ==========================================================================
    # ✅ Ghi nhận tiến độ
    # ==========================================================================
    async def submit_progress_async(self, user_id: int, schema: SubmitProgress) -> dict[str, Any]:
        """
        ✅ Cập nhật tiến độ 1 bài học trong một transaction:
        1️⃣ Upsert LessonProgress(user, lesson) với status + last_watched.
        2️⃣ Nếu completed: ghi activity hôm nay, tính chuỗi ngày, cộng điểm leaderboard.
        Lỗi ở bất kỳ bước nào → rollback toàn bộ.
        """
        try:
            async with transaction(self.db):
                if not await self.db.get(Lessons, schema.lesson_id):
                    raise HTTPException(400, "Lesson not found")

                current = get_now()
                previous_status = await self._upsert_progress_async(
                    user_id, schema.lesson_id, schema.status, current
                )

                result: dict[str, Any] = {
                    "message": "✅ Lesson progress updated",
                    "lesson_id": schema.lesson_id,
                    "status": schema.status,
                    "points_awarded": 0,
                }
                if schema.status != ProgressStatus.COMPLETED.value:
                    return result

                # hoàn thành lại bài đã completed → không cộng điểm
                if (
                    previous_status == ProgressStatus.COMPLETED.value
                    and not settings.AWARD_REPEAT_COMPLETIONS
                ):
                    return result

                result.update(await self._award_completion_async(user_id, current))
            return result
        except HTTPException:
            raise
        except Exception as e:
            logger.exception(f"[Progress][Submit] user={user_id} lesson={schema.lesson_id}: {e}")
            raise HTTPException(500, detail={"message": "Server error", "error": str(e)})

    async def _upsert_progress_async(
        self, user_id: int, lesson_id: int, status: str, current: datetime.datetime
    ) -> str | None:
        """Trả về status cũ (None nếu vừa tạo)."""
        inserted = await insert_ignore(
            self.db,
            LessonProgress,
            {
                "user_id": user_id,
                "lesson_id": lesson_id,
                "status": status,
                "last_watched": current,
            },
            ("user_id", "lesson_id"),
        )
        if inserted:
            return None

        previous_status = await self.db.scalar(
            select(LessonProgress.status)
            .where(LessonProgress.user_id == user_id, LessonProgress.lesson_id == lesson_id)
            .with_for_update()
        )
        await self.db.execute(
            update(LessonProgress)
            .where(LessonProgress.user_id == user_id, LessonProgress.lesson_id == lesson_id)
            .values(status=status, last_watched=current)
        )
        return previous_status

    async def _award_completion_async(
        self, user_id: int, current: datetime.datetime
    ) -> dict[str, Any]:
        today = current.date()

        # a) activity hôm nay (idempotent) + b) hôm qua có học không
        await self.activity.ensure_logged_async(user_id, today)
        had_yesterday = await self.activity.has_activity_async(
            user_id, today - datetime.timedelta(days=1)
        )

        # c) dòng leaderboard (tạo rỗng nếu chưa có) rồi khóa để đọc
        await insert_ignore(
            self.db,
            Leaderboard,
            {"user_id": user_id, "total_points": 0, "streak_days": 0},
            ("user_id",),
        )
        row = (
            await self.db.execute(
                select(Leaderboard.total_points, Leaderboard.streak_days)
                .where(Leaderboard.user_id == user_id)
                .with_for_update()
            )
        ).one()

        # d) hôm qua có học → nối chuỗi, không thì bắt đầu lại
        new_streak = next_streak(row.streak_days, had_yesterday)
        bonus = streak_bonus(new_streak)

        # e) + f) cộng điểm
        gain = BASE_POINTS + bonus
        await self.db.execute(
            update(Leaderboard)
            .where(Leaderboard.user_id == user_id)
            .values(
                total_points=Leaderboard.total_points + gain,
                streak_days=new_streak,
                last_updated=current,
            )
        )
        logger.info(
            f"[Progress][Award] user={user_id} +{gain} (bonus={bonus}) streak={new_streak}"
        )
        return {
            "points_awarded": gain,
            "bonus": bonus,
            "streak_days": new_streak,
            "total_points": row.total_points + gain,
        }

    # ==========================================================================
    # 📋 CRUD lesson-progress
    # ==========================================================================
    @staticmethod
    def _base_stmt():
        return (
            select(LessonProgress, User.full_name, Lessons.lesson_name)
            .join(User, User.user_id == LessonProgress.user_id)
            .join(Lessons, Lessons.lesson_id == LessonProgress.lesson_id)
            .order_by(LessonProgress.last_watched.desc(), LessonProgress.progress_id.desc())
        )

    @staticmethod
    def _to_dict(p: LessonProgress, full_name: str, lesson_name: str) -> dict:
        return {
            "progress_id": p.progress_id,
            "user_id": p.user_id,
            "full_name": full_name,
            "lesson_id": p.lesson_id,
            "lesson_name": lesson_name,
            "status": p.status,
            "last_watched": p.last_watched,
        }

    async def get_all_progress_async(self):
        rows = (await self.db.execute(self._base_stmt())).all()
        return [self._to_dict(*row) for row in rows]

    async def get_user_progress_async(self, user_id: int):
        rows = (
            await self.db.execute(self._base_stmt().where(LessonProgress.user_id == user_id))
        ).all()
        return [self._to_dict(*row) for row in rows]

    async def _get_owned_async(self, progress_id: int, user: User) -> LessonProgress:
        progress = await self.db.get(LessonProgress, progress_id)
        if not progress:
            raise HTTPException(404, "Progress not found")
        if progress.user_id != user.user_id and not AuthorizationService.is_staff(user):
            raise HTTPException(403, "You cannot edit someone else's progress")
        return progress

    async def update_progress_async(
        self, progress_id: int, schema: UpdateProgressStatus, user: User
    ):
        progress = await self._get_owned_async(progress_id, user)
        # cùng luồng với submit để điểm / chuỗi ngày luôn nhất quán
        return await self.submit_progress_async(
            progress.user_id,
            SubmitProgress(lesson_id=progress.lesson_id, status=schema.status),
        )

    async def delete_progress_async(self, progress_id: int, user: User):
        await self._get_owned_async(progress_id, user)
        await self.db.execute(
            delete(LessonProgress).where(LessonProgress.progress_id == progress_id)
        )
        await self.db.commit()
        return {"message": "Progress deleted successfully"}
