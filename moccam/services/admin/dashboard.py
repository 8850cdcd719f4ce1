from typing import Any

from fastapi import Depends
from sqlalchemy import extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.core.enum import PaymentStatus
from moccam.db.models.database import Lessons, Payments, User, Vouchers
from moccam.db.session import get_session
from moccam.libs.formats.datetime import now as get_now
from moccam.libs.formats.datetime import year_bounds


class DashboardService:
    """Thống kê theo tháng cho trang quản trị (luôn đủ 12 tháng)."""

    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    @staticmethod
    def _fill_months(rows, key: str, default: Any = 0) -> list[dict]:
        by_month = {int(month): value for month, value in rows}
        return [
            {
                "month": month,
                "monthName": f"Tháng {month}",
                key: by_month.get(month) or default,
            }
            for month in range(1, 13)
        ]

    async def _monthly_async(self, column, aggregate, year: int | None, *filters):
        start, end = year_bounds(year or get_now().year)
        month = extract("month", column)
        stmt = (
            select(month, aggregate)
            .where(column >= start, column < end, *filters)
            .group_by(month)
        )
        return (await self.db.execute(stmt)).all()

    async def user_stats_async(self, year: int | None = None):
        rows = await self._monthly_async(User.created_at, func.count(User.user_id), year)
        return self._fill_months(rows, "count")

    async def voucher_stats_async(self, year: int | None = None):
        rows = await self._monthly_async(
            Vouchers.created_at, func.count(Vouchers.voucher_id), year
        )
        return self._fill_months(rows, "count")

    async def lesson_stats_async(self, year: int | None = None):
        rows = await self._monthly_async(Lessons.created_at, func.count(Lessons.lesson_id), year)
        return self._fill_months(rows, "count")

    async def revenue_stats_async(self, year: int | None = None):
        rows = await self._monthly_async(
            Payments.created_at,
            func.coalesce(func.sum(Payments.final_amount), 0),
            year,
            Payments.status == PaymentStatus.SUCCESS.value,
        )
        return self._fill_months([(m, float(v or 0)) for m, v in rows], "totalRevenue", 0)
