from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.core.enum import UserRole
from moccam.db.models.database import Comments, Lessons, User
from moccam.db.session import get_session
from moccam.libs.formats.datetime import now as get_now
from moccam.libs.sql.partial_update import PartialUpdate
from moccam.schemas.content.comment import CreateComment, UpdateComment


class CommentService:
    """Bình luận + đánh giá (1-5 sao) của khách hàng cho bài học."""

    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    @staticmethod
    def _base_stmt():
        return (
            select(Comments, User.full_name)
            .join(User, User.user_id == Comments.user_id)
            .order_by(Comments.created_at.desc(), Comments.comment_id.desc())
        )

    @staticmethod
    def _to_dict(comment: Comments, full_name: str) -> dict:
        return {
            "comment_id": comment.comment_id,
            "user_id": comment.user_id,
            "full_name": full_name,
            "lesson_id": comment.lesson_id,
            "comment": comment.comment,
            "rate": comment.rate,
            "created_at": comment.created_at,
        }

    async def get_comments_async(self, lesson_id: int | None = None):
        stmt = self._base_stmt()
        if lesson_id is not None:
            stmt = stmt.where(Comments.lesson_id == lesson_id)
        rows = (await self.db.execute(stmt)).all()
        return [self._to_dict(c, name) for c, name in rows]

    async def get_comment_async(self, comment_id: int):
        row = (
            await self.db.execute(self._base_stmt().where(Comments.comment_id == comment_id))
        ).first()
        if not row:
            raise HTTPException(404, "Bình luận không tồn tại")
        return self._to_dict(*row)

    async def create_comment_async(self, schema: CreateComment, user: User):
        try:
            if not await self.db.get(Lessons, schema.lesson_id):
                raise HTTPException(400, "Bài học không tồn tại")
            comment = Comments(
                user_id=user.user_id,
                lesson_id=schema.lesson_id,
                comment=schema.comment.strip(),
                rate=schema.rate,
                created_at=get_now(),
            )
            self.db.add(comment)
            await self.db.commit()
            await self.db.refresh(comment)
            return self._to_dict(comment, user.full_name)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Comments][Create] {e}")
            raise HTTPException(500, f"Lỗi khi tạo bình luận: {e}")

    async def _get_owned_async(self, comment_id: int, user: User) -> Comments:
        comment = await self.db.get(Comments, comment_id)
        if not comment:
            raise HTTPException(404, "Bình luận không tồn tại")
        if user.role != UserRole.ADMIN.value and comment.user_id != user.user_id:
            raise HTTPException(403, "Bạn không thể thao tác trên bình luận của người khác")
        return comment

    async def update_comment_async(self, comment_id: int, schema: UpdateComment, user: User):
        comment = await self._get_owned_async(comment_id, user)
        await self.db.execute(
            PartialUpdate(Comments)
            .merge(schema, transforms={"comment": str.strip})
            .statement(Comments.comment_id == comment_id)
        )
        await self.db.commit()
        await self.db.refresh(comment)
        return {"message": "Cập nhật bình luận thành công"}

    async def delete_comment_async(self, comment_id: int, user: User):
        await self._get_owned_async(comment_id, user)
        await self.db.execute(delete(Comments).where(Comments.comment_id == comment_id))
        await self.db.commit()
        return {"message": "Xóa bình luận thành công"}
