# moccam/core/deps.py
from typing import List, Optional

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.core.context import get_request
from moccam.core.enum import STAFF_ROLES
from moccam.core.security import SecurityService
from moccam.db.models.database import User
from moccam.db.session import get_session


class AuthorizationService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        security: SecurityService = Depends(SecurityService),
    ):
        self.db = db
        self.security = security

    # ==============================
    # 🧩 CORE AUTH CHECKS
    # ==============================

    @staticmethod
    def _read_bearer_token() -> str | None:
        request = get_request()
        header = request.headers.get("authorization") or ""
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()

    async def get_current_user(self) -> User:
        """Lấy user hiện tại từ header Authorization: Bearer <token>."""
        token = self._read_bearer_token()
        if not token:
            raise HTTPException(status_code=401, detail="Access denied. No token provided.")

        try:
            payload = await self.security.decode_access_token(token)
        except ValueError as e:
            raise HTTPException(status_code=401, detail=str(e))

        user_id = payload.get("id") or payload.get("sub")
        try:
            user_id = int(user_id)
        except (TypeError, ValueError):
            raise HTTPException(status_code=401, detail="Invalid token")

        user = await self.db.get(User, user_id)
        if not user:
            raise HTTPException(status_code=401, detail="Invalid token")
        return user

    # ==============================
    # 🧩 ROLE-BASED ACCESS CONTROL
    # ==============================

    async def require_role(self, required_roles: Optional[List[str]] = None) -> User:
        """Yêu cầu user có một trong các vai trò (vd: ["admin", "employee"])."""
        current_user = await self.get_current_user()

        if required_roles and current_user.role not in required_roles:
            raise HTTPException(
                status_code=403, detail="You do not have access to this functionality"
            )
        return current_user

    async def require_self_or_role(
        self,
        owner_id: int,
        required_roles: Optional[List[str]] = None,
        message: str = "You do not have access to this functionality",
    ) -> User:
        """Chủ sở hữu tài nguyên hoặc người có vai trò được phép."""
        current_user = await self.get_current_user()
        allowed = required_roles if required_roles is not None else STAFF_ROLES
        if current_user.user_id != owner_id and current_user.role not in allowed:
            raise HTTPException(status_code=403, detail=message)
        return current_user

    @staticmethod
    def is_staff(user: User) -> bool:
        return user.role in STAFF_ROLES
