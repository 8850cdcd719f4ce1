from typing import Any, Sequence

from sqlalchemy import and_, exists, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

ON_CONFLICT_DIALECTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


async def insert_ignore(
    db: AsyncSession,
    model: type,
    values: dict[str, Any],
    conflict_columns: Sequence[str],
) -> bool:
    """INSERT ... ON CONFLICT DO NOTHING theo khóa unique ``conflict_columns``.

    Trả về True nếu dòng mới được chèn.
    """
    dialect = db.get_bind().dialect.name
    factory = ON_CONFLICT_DIALECTS.get(dialect)
    if factory is not None:
        stmt = factory(model).values(**values).on_conflict_do_nothing(
            index_elements=list(conflict_columns)
        )
        result = await db.execute(stmt)
        return bool(result.rowcount)

    # dialect khác: kiểm tra trước rồi chèn
    condition = and_(*(getattr(model, c) == values[c] for c in conflict_columns))
    if await db.scalar(select(exists().where(condition))):
        return False
    await db.execute(insert(model).values(**values))
    return True
