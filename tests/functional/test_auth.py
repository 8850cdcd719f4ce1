from sqlalchemy import select

from moccam.core.security import SOCIAL_LOGIN_PASSWORD
from moccam.db.models.database import User
from moccam.services.shares import auth as auth_module

REGISTER = {
    "email": "moi@moccam.vn",
    "password": "matkhau1",
    "full_name": "  Lê Cường ",
    "phone_number": "0911222333",
}


async def test_register_creates_customer(client, seed):
    res = await client.post("/api/v1/auth/register", json=REGISTER)
    assert res.status_code == 201

    user = await seed.scalar(select(User).where(User.email == REGISTER["email"]))
    assert user.role == "customer"
    assert user.full_name == "Lê Cường"
    assert user.password != REGISTER["password"]


async def test_register_rejects_duplicates(client, users):
    dup_email = await client.post("/api/v1/auth/register", json={**REGISTER, "email": "an@moccam.vn"})
    assert dup_email.status_code == 400
    assert dup_email.json()["message"] == "Email đã tồn tại"

    dup_phone = await client.post("/api/v1/auth/register", json={**REGISTER, "phone_number": "0900000003"})
    assert dup_phone.json()["message"] == "Số điện thoại đã tồn tại"


async def test_register_validation_is_400(client):
    res = await client.post("/api/v1/auth/register", json={**REGISTER, "email": "khong-phai-email"})
    assert res.status_code == 400
    assert "errors" in res.json()


async def test_login_and_me(client, users, password):
    res = await client.post("/api/v1/auth/login", json={"email": "an@moccam.vn", "password": password})
    assert res.status_code == 200
    body = res.json()
    assert body["user"]["role"] == "customer"

    me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["full_name"] == "Nguyễn An"
    assert "password" not in me.json()


async def test_login_wrong_password(client, users):
    res = await client.post("/api/v1/auth/login", json={"email": "an@moccam.vn", "password": "sai-roi"})
    assert res.status_code == 401
    assert res.json()["message"] == "Sai mật khẩu"


async def test_me_requires_token(client):
    res = await client.get("/api/v1/auth/me")
    assert res.status_code == 401
    assert res.json()["message"] == "Access denied. No token provided."

    bad = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer rac"})
    assert bad.status_code == 401


class TestGoogleLogin:
    async def test_creates_user_once(self, client, seed, monkeypatch):
        monkeypatch.setattr(
            auth_module,
            "verify_google_token",
            lambda token: {"email": "gg@gmail.com", "name": "Google User", "picture": "https://pic"},
        )

        first = await client.post("/api/v1/auth/google-login", json={"token": "id-token"})
        assert first.status_code == 200
        assert first.json()["isNewUser"] is True

        second = await client.post("/api/v1/auth/google-login", json={"token": "id-token"})
        assert second.json()["isNewUser"] is False

        user = await seed.scalar(select(User).where(User.email == "gg@gmail.com"))
        assert user.password == SOCIAL_LOGIN_PASSWORD

    async def test_social_account_cannot_password_login(self, client, monkeypatch):
        monkeypatch.setattr(auth_module, "verify_google_token", lambda token: {"email": "gg@gmail.com"})
        await client.post("/api/v1/auth/google-login", json={"token": "id-token"})

        res = await client.post(
            "/api/v1/auth/login", json={"email": "gg@gmail.com", "password": SOCIAL_LOGIN_PASSWORD}
        )
        assert res.status_code == 401

    async def test_invalid_token(self, client, monkeypatch):
        def reject(token):
            raise ValueError("Wrong issuer")

        monkeypatch.setattr(auth_module, "verify_google_token", reject)
        res = await client.post("/api/v1/auth/google-login", json={"token": "x"})
        assert res.status_code == 401
