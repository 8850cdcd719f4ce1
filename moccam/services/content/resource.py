from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.db.models.database import Lessons, Resources
from moccam.db.session import get_session
from moccam.libs.formats.datetime import now as get_now
from moccam.libs.sql.partial_update import PartialUpdate
from moccam.schemas.content.course import CreateResource, UpdateResource


class ResourceService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def _ensure_lesson_async(self, lesson_id: int):
        if not await self.db.get(Lessons, lesson_id):
            raise HTTPException(400, "Bài học không tồn tại")

    async def get_resources_async(self, lesson_id: int | None = None):
        stmt = select(Resources).order_by(Resources.resource_id)
        if lesson_id is not None:
            stmt = stmt.where(Resources.lesson_id == lesson_id)
        return (await self.db.scalars(stmt)).all()

    async def get_resource_async(self, resource_id: int) -> Resources:
        resource = await self.db.get(Resources, resource_id)
        if not resource:
            raise HTTPException(404, "Tài liệu không tồn tại")
        return resource

    async def create_resource_async(self, schema: CreateResource):
        try:
            await self._ensure_lesson_async(schema.lesson_id)
            resource = Resources(**schema.model_dump(), created_at=get_now())
            self.db.add(resource)
            await self.db.commit()
            await self.db.refresh(resource)
            return resource
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Resources][Create] {e}")
            raise HTTPException(500, f"Lỗi khi tạo tài liệu: {e}")

    async def update_resource_async(self, resource_id: int, schema: UpdateResource):
        try:
            resource = await self.get_resource_async(resource_id)
            if schema.lesson_id is not None:
                await self._ensure_lesson_async(schema.lesson_id)
            await self.db.execute(
                PartialUpdate(Resources)
                .merge(schema)
                .statement(Resources.resource_id == resource_id)
            )
            await self.db.commit()
            await self.db.refresh(resource)
            return resource
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Resources][Update] {e}")
            raise HTTPException(500, f"Lỗi khi cập nhật tài liệu: {e}")

    async def delete_resource_async(self, resource_id: int):
        await self.get_resource_async(resource_id)
        await self.db.execute(delete(Resources).where(Resources.resource_id == resource_id))
        await self.db.commit()
        return {"message": "Xóa tài liệu thành công"}
