from typing import Any

from fastapi import Depends, HTTPException, status
from google.auth.transport import requests
from google.oauth2 import id_token
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.core.enum import UserRole
from moccam.core.security import SOCIAL_LOGIN_PASSWORD, SecurityService
from moccam.core.settings import settings
from moccam.db.models.database import User
from moccam.db.session import get_session
from moccam.libs.formats.datetime import now as get_now
from moccam.schemas.auth.user import GoogleLogin, LoginUser, RegisterCustomer, UserOut


def verify_google_token(token: str) -> dict[str, Any]:
    """Xác thực Google ID token, trả về claims (sub, email, name, picture)."""
    return id_token.verify_oauth2_token(
        token, requests.Request(), settings.GOOGLE_CLIENT_ID
    )


class AuthService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        security: SecurityService = Depends(SecurityService),
    ):
        self.db = db
        self.security = security

    async def _issue_token(self, user: User) -> dict[str, Any]:
        token = await self.security.create_access_token(
            user.user_id, user.full_name, user.role
        )
        return {
            "token": token,
            "user": {
                "id": user.user_id,
                "full_name": user.full_name,
                "email": user.email,
                "role": user.role,
            },
        }

    async def register_customer_async(self, schema: RegisterCustomer) -> dict[str, Any]:
        try:
            # 1️⃣ Email / SĐT không được trùng
            if await self.db.scalar(select(User.user_id).where(User.email == schema.email)):
                raise HTTPException(status.HTTP_400_BAD_REQUEST, "Email đã tồn tại")
            if await self.db.scalar(
                select(User.user_id).where(User.phone_number == schema.phone_number)
            ):
                raise HTTPException(status.HTTP_400_BAD_REQUEST, "Số điện thoại đã tồn tại")

            # 2️⃣ Tạo tài khoản customer
            user = User(
                email=schema.email,
                password=await self.security.hash_password(schema.password),
                full_name=schema.full_name.strip(),
                phone_number=schema.phone_number,
                date_of_birth=schema.date_of_birth,
                role=UserRole.CUSTOMER.value,
                created_at=get_now(),
            )
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
            logger.info(f"[Auth][Register] user_id={user.user_id}")
            return {"message": "Đăng ký thành công", "user_id": user.user_id}
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Auth][Register] {e}")
            raise HTTPException(500, "Lỗi máy chủ khi đăng ký")

    async def login_async(self, schema: LoginUser) -> dict[str, Any]:
        user: User | None = await self.db.scalar(select(User).where(User.email == schema.email))

        # 1️⃣ KHÔNG TÌM THẤY USER
        if not user:
            raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Email không tồn tại")

        # 2️⃣ SAI MẬT KHẨU (tài khoản Google không có mật khẩu)
        if not await self.security.verify_password(schema.password, user.password):
            raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Sai mật khẩu")

        return {"message": "Đăng nhập thành công", **await self._issue_token(user)}

    async def login_google_async(self, schema: GoogleLogin) -> dict[str, Any]:
        # 1) VERIFY GOOGLE ID TOKEN
        try:
            info = verify_google_token(schema.token)
        except ValueError as e:
            logger.warning(f"[Auth][Google] token không hợp lệ: {e}")
            raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Google token không hợp lệ")

        email = info.get("email")
        if not email:
            raise HTTPException(400, "Google không trả về email hợp lệ")

        try:
            # 2) TÌM HOẶC TẠO USER
            user: User | None = await self.db.scalar(select(User).where(User.email == email))
            is_new_user = user is None
            if is_new_user:
                user = User(
                    email=email,
                    password=SOCIAL_LOGIN_PASSWORD,
                    full_name=info.get("name") or email.split("@")[0],
                    picture=info.get("picture"),
                    role=UserRole.CUSTOMER.value,
                    created_at=get_now(),
                )
                self.db.add(user)
                await self.db.commit()
                await self.db.refresh(user)
                logger.info(f"[Auth][Google] tạo user mới user_id={user.user_id}")

            return {
                "message": "Đăng nhập Google thành công",
                "isNewUser": is_new_user,
                **await self._issue_token(user),
            }
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Auth][Google] {e}")
            raise HTTPException(500, "Lỗi máy chủ khi đăng nhập Google")

    async def me_async(self, user: User):
        return UserOut.model_validate(user)
