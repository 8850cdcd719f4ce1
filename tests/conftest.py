"""
Shared fixtures: a throwaway aiosqlite database per test, the ASGI app with
its session and payment gateway dependencies overridden, and seeded users
with bearer tokens for each role.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789-abcdefghijklmnopqrstuvwxyz")
os.environ.setdefault("PAYOS_CHECKSUM_KEY", "test-checksum-key")
os.environ.setdefault("FRONTEND_URL", "http://frontend.test")

import datetime
import decimal
from typing import Any, Dict

import pytest
from httpx import ASGITransport, AsyncClient

from moccam.core.security import SecurityService
from moccam.db.models.database import (
    AIModels,
    Courses,
    Lessons,
    SubscriptionPlans,
    User,
    Vouchers,
)
from moccam.db.session import Database, get_session
from moccam.libs.formats.datetime import now as get_now
from moccam.main import create_app
from moccam.services.billing.payos_service import PayOSError, PayOSService, get_payos_service

PASSWORD = "secret123"


class FakePayOS(PayOSService):
    """Real signing/verification, no network."""

    def __init__(self):
        super().__init__(http=None)
        self.calls = []
        self.fail = False

    async def create_payment_link(self, order_code, amount, description, return_url=None, cancel_url=None):
        if self.fail:
            raise PayOSError("gateway down")
        self.calls.append({"orderCode": order_code, "amount": amount, "description": description})
        return {"checkoutUrl": f"https://pay.payos.vn/web/{order_code}", "paymentLinkId": "link"}


class Seeder:
    """Writes rows through short-lived sessions so SQLite never holds a reader lock."""

    def __init__(self, database: Database):
        self.database = database

    async def add(self, *objs):
        async with self.database.sessionmaker() as session:
            session.add_all(objs)
            await session.commit()
        return objs[0] if len(objs) == 1 else objs

    async def scalar(self, stmt):
        async with self.database.sessionmaker() as session:
            return await session.scalar(stmt)

    async def scalars(self, stmt):
        async with self.database.sessionmaker() as session:
            return (await session.scalars(stmt)).all()

    async def get(self, model, pk):
        async with self.database.sessionmaker() as session:
            return await session.get(model, pk)

    async def course(self, name="Bảng chữ cái", **kw) -> Courses:
        return await self.add(Courses(course_name=name, is_free=True, created_at=get_now(), **kw))

    async def lesson(self, course_id: int, name="Chữ A", **kw) -> Lessons:
        return await self.add(
            Lessons(course_id=course_id, lesson_name=name, is_free=True, created_at=get_now(), **kw)
        )

    async def ai_model(self, name="HandNet") -> AIModels:
        return await self.add(AIModels(model_name=name, version="1.0", created_at=get_now()))

    async def plan(self, price="100000", active=True, duration=30, name="Gói tháng") -> SubscriptionPlans:
        return await self.add(
            SubscriptionPlans(
                plan_name=name,
                price=decimal.Decimal(price),
                duration_in_days=duration,
                currency="VND",
                is_active=active,
                created_at=get_now(),
            )
        )

    async def voucher(
        self, discount="20000", max_usage=10, used_count=0, starts_in_days=-1, ends_in_days=7, code="SALE2024AB"
    ) -> Vouchers:
        current = get_now()
        return await self.add(
            Vouchers(
                code=code,
                description="Giảm giá",
                discount_value=decimal.Decimal(discount),
                max_usage=max_usage,
                used_count=used_count,
                start_date=current + datetime.timedelta(days=starts_in_days),
                end_date=current + datetime.timedelta(days=ends_in_days),
                created_at=current,
            )
        )


# ===== DATABASE / APP =====


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'moccam.db'}", echo=False)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def payos():
    return FakePayOS()


@pytest.fixture
def app(database, payos):
    app = create_app()

    async def override_get_session():
        async with database.sessionmaker() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_payos_service] = lambda: payos
    return app


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def seed(database):
    return Seeder(database)


# ===== USERS / AUTH =====


@pytest.fixture
def password():
    return PASSWORD


@pytest.fixture(scope="session")
def password_hash():
    import bcrypt

    return bcrypt.hashpw(PASSWORD.encode(), bcrypt.gensalt(rounds=4)).decode()


@pytest.fixture
async def users(seed, password_hash) -> Dict[str, User]:
    def make(role, email, phone, name):
        return User(
            email=email,
            password=password_hash,
            full_name=name,
            phone_number=phone,
            role=role,
            created_at=get_now(),
        )

    admin, employee, customer, other = await seed.add(
        make("admin", "admin@moccam.vn", "0900000001", "Quản trị"),
        make("employee", "staff@moccam.vn", "0900000002", "Nhân viên"),
        make("customer", "an@moccam.vn", "0900000003", "Nguyễn An"),
        make("customer", "binh@moccam.vn", "0900000004", "Trần Bình"),
    )
    return {"admin": admin, "employee": employee, "customer": customer, "other": other}


async def bearer(user: User) -> Dict[str, Any]:
    token = await SecurityService().create_access_token(user.user_id, user.full_name, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def headers(users) -> Dict[str, Dict[str, str]]:
    return {role: await bearer(user) for role, user in users.items()}
