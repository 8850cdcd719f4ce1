import secrets
import string
from datetime import timedelta
from typing import Any, Dict

import bcrypt
import jwt

from moccam.core.settings import settings
from moccam.libs.formats.datetime import now_tzinfo

SOCIAL_LOGIN_PASSWORD = "SOCIAL_LOGIN"


class SecurityService:
    def __init__(self):
        self.secret_key = settings.SECRET_KEY
        self.algorithm = settings.ALGORITHM
        self.access_token_expire_minutes = float(settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    # 🔐 JWT
    async def create_access_token(self, user_id: int, name: str, role: str) -> str:
        expire = now_tzinfo() + timedelta(minutes=self.access_token_expire_minutes)
        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "id": user_id,
            "name": name,
            "role": role,
            "iat": now_tzinfo(),
            "exp": expire,
        }
        return str(jwt.encode(payload, self.secret_key, algorithm=self.algorithm))

    async def decode_access_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise ValueError("Token expired")
        except jwt.InvalidTokenError:
            raise ValueError("Invalid token")

    # 🔑 PASSWORD
    @staticmethod
    async def hash_password(plain: str) -> str:
        return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    @staticmethod
    async def verify_password(plain: str, hashed: str) -> bool:
        # Tài khoản Google không có mật khẩu thật
        if not hashed or hashed == SOCIAL_LOGIN_PASSWORD:
            return False
        try:
            return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            return False

    # 🎟 Mã voucher
    @staticmethod
    def generate_code(length: int = 10) -> str:
        alphabet = string.ascii_uppercase + string.digits
        return "".join(secrets.choice(alphabet) for _ in range(length))
