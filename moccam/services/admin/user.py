from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.core.enum import UserRole
from moccam.core.security import SecurityService
from moccam.db.models.database import (
    Comments,
    Courses,
    LessonProgress,
    Payments,
    User,
    UserSubscriptions,
)
from moccam.db.session import get_session
from moccam.db.uow import transaction
from moccam.libs.formats.datetime import now as get_now
from moccam.libs.sql.dependents import ensure_no_dependents
from moccam.libs.sql.partial_update import PartialUpdate
from moccam.schemas.auth.user import UserCreate, UserOut, UserUpdate

# Bảng tham chiếu tới user → không cho xóa khi còn dữ liệu
USER_DEPENDENTS = [
    (Payments.user_id, "thanh toán"),
    (UserSubscriptions.user_id, "gói đăng ký"),
    (LessonProgress.user_id, "tiến độ học"),
    (Comments.user_id, "bình luận"),
    (Courses.created_by, "khóa học đã tạo"),
]


class UserService:
    """Service quản lý tài khoản (admin / nhân viên)."""

    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        security: SecurityService = Depends(SecurityService),
    ):
        self.db = db
        self.security = security

    async def _ensure_unique_async(
        self, email: str | None, phone: str | None, exclude_id: int | None = None
    ):
        if email:
            stmt = select(User.user_id).where(User.email == email)
            if exclude_id is not None:
                stmt = stmt.where(User.user_id != exclude_id)
            if await self.db.scalar(stmt):
                raise HTTPException(400, "Email đã tồn tại")
        if phone:
            stmt = select(User.user_id).where(User.phone_number == phone)
            if exclude_id is not None:
                stmt = stmt.where(User.user_id != exclude_id)
            if await self.db.scalar(stmt):
                raise HTTPException(400, "Số điện thoại đã tồn tại")

    async def get_users_async(self):
        users = (await self.db.scalars(select(User).order_by(User.user_id))).all()
        return [UserOut.model_validate(u) for u in users]

    async def get_user_by_id_async(self, user_id: int):
        user = await self.db.get(User, user_id)
        if not user:
            raise HTTPException(404, "Không tìm thấy người dùng")
        return UserOut.model_validate(user)

    async def create_user_async(self, schema: UserCreate, creator: User):
        try:
            # employee chỉ được tạo customer
            if creator.role != UserRole.ADMIN.value and schema.role != UserRole.CUSTOMER:
                raise HTTPException(403, "Chỉ admin mới được tạo tài khoản nhân viên")

            await self._ensure_unique_async(schema.email, schema.phone_number)
            user = User(
                email=schema.email,
                password=await self.security.hash_password(schema.password),
                full_name=schema.full_name,
                phone_number=schema.phone_number,
                role=schema.role.value,
                date_of_birth=schema.date_of_birth,
                picture=schema.picture,
                created_at=get_now(),
            )
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
            logger.info(f"[Users][Create] user_id={user.user_id} by={creator.user_id}")
            return {"message": "Tạo người dùng thành công", "user_id": user.user_id}
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Users][Create] {e}")
            raise HTTPException(500, f"Lỗi khi tạo người dùng: {e}")

    async def update_user_async(self, user_id: int, schema: UserUpdate, actor: User):
        try:
            user = await self.db.get(User, user_id)
            if not user:
                raise HTTPException(404, "Không tìm thấy người dùng")

            # 1️⃣ Quyền: customer chỉ sửa chính mình, chỉ admin đổi role
            if actor.role == UserRole.CUSTOMER.value and actor.user_id != user_id:
                raise HTTPException(403, "Bạn chỉ có thể sửa thông tin của chính mình")
            if "role" in schema.model_fields_set and actor.role != UserRole.ADMIN.value:
                raise HTTPException(403, "Chỉ admin mới được đổi vai trò")

            # 2️⃣ Trùng email / SĐT (bỏ qua chính user này)
            await self._ensure_unique_async(schema.email, schema.phone_number, exclude_id=user_id)

            # 3️⃣ Dựng câu update từ các trường được gửi
            builder = PartialUpdate(User).merge(
                schema,
                transforms={"role": lambda r: UserRole(r).value},
                exclude={"password"},
            )
            if schema.password:
                builder.set(User.password, await self.security.hash_password(schema.password))

            await self.db.execute(builder.statement(User.user_id == user_id))
            await self.db.commit()
            await self.db.refresh(user)
            return {"message": "Cập nhật người dùng thành công", "user": UserOut.model_validate(user)}
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Users][Update] {e}")
            raise HTTPException(500, f"Lỗi khi cập nhật người dùng: {e}")

    async def delete_user_async(self, user_id: int):
        try:
            async with transaction(self.db):
                if not await self.db.get(User, user_id):
                    raise HTTPException(404, "Không tìm thấy người dùng")

                await ensure_no_dependents(
                    self.db, USER_DEPENDENTS, user_id, "Không thể xóa người dùng này."
                )

                await self.db.execute(delete(User).where(User.user_id == user_id))
            return {"message": "Xóa người dùng thành công"}
        except HTTPException:
            raise
        except Exception as e:
            logger.exception(f"[Users][Delete] {e}")
            raise HTTPException(500, f"Lỗi khi xóa người dùng: {e}")
