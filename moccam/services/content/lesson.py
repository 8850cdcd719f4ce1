from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.db.models.database import (
    Comments,
    Courses,
    HandMotions,
    LessonProgress,
    Lessons,
    Resources,
)
from moccam.db.session import get_session
from moccam.db.uow import transaction
from moccam.libs.formats.datetime import now as get_now
from moccam.libs.sql.dependents import ensure_no_dependents
from moccam.libs.sql.partial_update import PartialUpdate
from moccam.schemas.content.course import CreateLesson, UpdateLesson

LESSON_DEPENDENTS = [
    (Resources.lesson_id, "tài liệu"),
    (HandMotions.lesson_id, "dữ liệu cử chỉ tay"),
    (Comments.lesson_id, "bình luận"),
    (LessonProgress.lesson_id, "tiến độ học"),
]


class LessonService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def _ensure_course_async(self, course_id: int):
        if not await self.db.get(Courses, course_id):
            raise HTTPException(400, "Khóa học không tồn tại")

    async def get_lessons_async(self, course_id: int | None = None):
        stmt = select(Lessons).order_by(Lessons.course_id, Lessons.lesson_id)
        if course_id is not None:
            stmt = stmt.where(Lessons.course_id == course_id)
        return (await self.db.scalars(stmt)).all()

    async def get_lesson_async(self, lesson_id: int) -> Lessons:
        lesson = await self.db.get(Lessons, lesson_id)
        if not lesson:
            raise HTTPException(404, "Bài học không tồn tại")
        return lesson

    async def create_lesson_async(self, schema: CreateLesson):
        try:
            await self._ensure_course_async(schema.course_id)
            lesson = Lessons(**schema.model_dump(), created_at=get_now())
            self.db.add(lesson)
            await self.db.commit()
            await self.db.refresh(lesson)
            return lesson
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Lessons][Create] {e}")
            raise HTTPException(500, f"Lỗi khi tạo bài học: {e}")

    async def update_lesson_async(self, lesson_id: int, schema: UpdateLesson):
        try:
            lesson = await self.get_lesson_async(lesson_id)
            if schema.course_id is not None:
                await self._ensure_course_async(schema.course_id)
            await self.db.execute(
                PartialUpdate(Lessons).merge(schema).statement(Lessons.lesson_id == lesson_id)
            )
            await self.db.commit()
            await self.db.refresh(lesson)
            return lesson
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Lessons][Update] {e}")
            raise HTTPException(500, f"Lỗi khi cập nhật bài học: {e}")

    async def delete_lesson_async(self, lesson_id: int):
        try:
            async with transaction(self.db):
                await self.get_lesson_async(lesson_id)
                await ensure_no_dependents(
                    self.db, LESSON_DEPENDENTS, lesson_id, "Không thể xóa bài học này."
                )
                await self.db.execute(delete(Lessons).where(Lessons.lesson_id == lesson_id))
            return {"message": "Xóa bài học thành công"}
        except HTTPException:
            raise
        except Exception as e:
            logger.exception(f"[Lessons][Delete] {e}")
            raise HTTPException(500, f"Lỗi khi xóa bài học: {e}")
