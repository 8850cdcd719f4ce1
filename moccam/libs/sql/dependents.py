from typing import Any, Sequence

from fastapi import HTTPException
from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

# (cột khóa ngoại, nhãn hiển thị)
Dependent = tuple[InstrumentedAttribute, str]


async def find_dependents(
    db: AsyncSession, dependents: Sequence[Dependent], value: Any
) -> list[str]:
    """Trả về nhãn các bảng còn dòng tham chiếu tới ``value``."""
    found = []
    for column, label in dependents:
        if await db.scalar(select(exists().where(column == value))):
            found.append(label)
    return found


async def ensure_no_dependents(
    db: AsyncSession, dependents: Sequence[Dependent], value: Any, message: str
) -> None:
    """400 {message, reason} khi còn dữ liệu tham chiếu."""
    found = await find_dependents(db, dependents, value)
    if found:
        raise HTTPException(
            400,
            detail={
                "message": message,
                "reason": f"Còn dữ liệu liên quan: {', '.join(found)}",
            },
        )
