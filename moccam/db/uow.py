from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession


@asynccontextmanager
async def transaction(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Một nghiệp vụ = một transaction: commit khi thoát, rollback khi có lỗi."""
    try:
        yield db
        await db.commit()
    except BaseException:
        await db.rollback()
        raise
