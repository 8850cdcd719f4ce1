from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.db.models.database import AIModels, HandMotions, Lessons
from moccam.db.session import get_session
from moccam.db.uow import transaction
from moccam.libs.formats.datetime import now as get_now
from moccam.libs.sql.dependents import ensure_no_dependents
from moccam.libs.sql.partial_update import PartialUpdate
from moccam.schemas.content.ai_model import (
    CreateAIModel,
    CreateHandMotion,
    UpdateAIModel,
    UpdateHandMotion,
)


class AIModelService:
    """Mô hình nhận diện cử chỉ tay."""

    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def get_models_async(self):
        return (await self.db.scalars(select(AIModels).order_by(AIModels.model_id))).all()

    async def get_model_async(self, model_id: int) -> AIModels:
        model = await self.db.get(AIModels, model_id)
        if not model:
            raise HTTPException(404, "Mô hình AI không tồn tại")
        return model

    async def create_model_async(self, schema: CreateAIModel):
        model = AIModels(**schema.model_dump(), created_at=get_now())
        self.db.add(model)
        await self.db.commit()
        await self.db.refresh(model)
        return model

    async def update_model_async(self, model_id: int, schema: UpdateAIModel):
        model = await self.get_model_async(model_id)
        await self.db.execute(
            PartialUpdate(AIModels).merge(schema).statement(AIModels.model_id == model_id)
        )
        await self.db.commit()
        await self.db.refresh(model)
        return model

    async def delete_model_async(self, model_id: int):
        try:
            async with transaction(self.db):
                await self.get_model_async(model_id)
                await ensure_no_dependents(
                    self.db,
                    [(HandMotions.model_id, "dữ liệu cử chỉ tay")],
                    model_id,
                    "Không thể xóa mô hình AI này.",
                )
                await self.db.execute(delete(AIModels).where(AIModels.model_id == model_id))
            return {"message": "Xóa mô hình AI thành công"}
        except HTTPException:
            raise
        except Exception as e:
            logger.exception(f"[AIModels][Delete] {e}")
            raise HTTPException(500, f"Lỗi khi xóa mô hình AI: {e}")


class HandMotionService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def _ensure_refs_async(self, lesson_id: int | None, model_id: int | None):
        if lesson_id is not None and not await self.db.get(Lessons, lesson_id):
            raise HTTPException(400, "Bài học không tồn tại")
        if model_id is not None and not await self.db.get(AIModels, model_id):
            raise HTTPException(400, "Mô hình AI không tồn tại")

    async def get_motions_async(self, lesson_id: int | None = None):
        stmt = select(HandMotions).order_by(HandMotions.motion_id)
        if lesson_id is not None:
            stmt = stmt.where(HandMotions.lesson_id == lesson_id)
        return (await self.db.scalars(stmt)).all()

    async def get_motion_async(self, motion_id: int) -> HandMotions:
        motion = await self.db.get(HandMotions, motion_id)
        if not motion:
            raise HTTPException(404, "Dữ liệu cử chỉ tay không tồn tại")
        return motion

    async def create_motion_async(self, schema: CreateHandMotion):
        await self._ensure_refs_async(schema.lesson_id, schema.model_id)
        motion = HandMotions(**schema.model_dump(), created_at=get_now())
        self.db.add(motion)
        await self.db.commit()
        await self.db.refresh(motion)
        return motion

    async def update_motion_async(self, motion_id: int, schema: UpdateHandMotion):
        motion = await self.get_motion_async(motion_id)
        await self._ensure_refs_async(schema.lesson_id, schema.model_id)
        await self.db.execute(
            PartialUpdate(HandMotions)
            .merge(schema)
            .statement(HandMotions.motion_id == motion_id)
        )
        await self.db.commit()
        await self.db.refresh(motion)
        return motion

    async def delete_motion_async(self, motion_id: int):
        await self.get_motion_async(motion_id)
        await self.db.execute(delete(HandMotions).where(HandMotions.motion_id == motion_id))
        await self.db.commit()
        return {"message": "Xóa dữ liệu cử chỉ tay thành công"}
