from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.db.models.database import Courses, Lessons, User
from moccam.db.session import get_session
from moccam.db.uow import transaction
from moccam.libs.formats.datetime import now as get_now
from moccam.libs.sql.dependents import ensure_no_dependents
from moccam.libs.sql.partial_update import PartialUpdate
from moccam.schemas.content.course import CreateCourse, UpdateCourse


class CourseService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def get_courses_async(self, search: str | None = None):
        stmt = (
            select(Courses, func.count(Lessons.lesson_id).label("lesson_count"))
            .outerjoin(Lessons, Lessons.course_id == Courses.course_id)
            .group_by(Courses.course_id)
            .order_by(Courses.course_id)
        )
        if search:
            stmt = stmt.where(Courses.course_name.ilike(f"%{search.strip()}%"))
        rows = (await self.db.execute(stmt)).all()
        return [
            {
                "course_id": c.course_id,
                "course_name": c.course_name,
                "description": c.description,
                "level": c.level,
                "is_free": c.is_free,
                "created_by": c.created_by,
                "created_at": c.created_at,
                "lesson_count": lesson_count,
            }
            for c, lesson_count in rows
        ]

    async def get_course_async(self, course_id: int) -> Courses:
        course = await self.db.get(Courses, course_id)
        if not course:
            raise HTTPException(404, "Khóa học không tồn tại")
        return course

    async def create_course_async(self, schema: CreateCourse, creator: User):
        try:
            course = Courses(
                **schema.model_dump(),
                created_by=creator.user_id,
                created_at=get_now(),
            )
            self.db.add(course)
            await self.db.commit()
            await self.db.refresh(course)
            return course
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Courses][Create] {e}")
            raise HTTPException(500, f"Lỗi khi tạo khóa học: {e}")

    async def update_course_async(self, course_id: int, schema: UpdateCourse):
        try:
            course = await self.get_course_async(course_id)
            await self.db.execute(
                PartialUpdate(Courses).merge(schema).statement(Courses.course_id == course_id)
            )
            await self.db.commit()
            await self.db.refresh(course)
            return course
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Courses][Update] {e}")
            raise HTTPException(500, f"Lỗi khi cập nhật khóa học: {e}")

    async def delete_course_async(self, course_id: int):
        try:
            async with transaction(self.db):
                await self.get_course_async(course_id)
                await ensure_no_dependents(
                    self.db,
                    [(Lessons.course_id, "bài học")],
                    course_id,
                    "Không thể xóa khóa học này.",
                )
                await self.db.execute(delete(Courses).where(Courses.course_id == course_id))
            return {"message": "Xóa khóa học thành công"}
        except HTTPException:
            raise
        except Exception as e:
            logger.exception(f"[Courses][Delete] {e}")
            raise HTTPException(500, f"Lỗi khi xóa khóa học: {e}")
