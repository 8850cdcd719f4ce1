# moccam/db/session.py
from typing import AsyncGenerator

from fastapi import Request
from loguru import logger
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from moccam.core.settings import settings


class Database:
    """Engine + session factory sống cùng vòng đời process (mở ở lifespan, dispose khi tắt)."""

    def __init__(self, url: str | None = None, echo: bool | None = None, **engine_kwargs):
        self.url = url or settings.DATABASE_ASYNC_URL
        self.engine: AsyncEngine = create_async_engine(
            self.url,
            echo=settings.DB_ECHO if echo is None else echo,
            pool_pre_ping=True,  # tự kiểm tra connection còn sống
            **engine_kwargs,
        )
        self.sessionmaker = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,  # giữ dữ liệu object sau commit
        )

    async def create_all(self) -> None:
        from moccam.db.models.database import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("🗄 Database engine disposed")


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency cho FastAPI: mỗi request một session."""
    database: Database = request.app.state.database
    async with database.sessionmaker() as session:
        try:
            yield session
        finally:
            await session.close()
