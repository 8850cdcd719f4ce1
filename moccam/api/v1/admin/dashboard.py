from fastapi import APIRouter, Depends, Query

from moccam.core.deps import AuthorizationService
from moccam.core.enum import STAFF_ROLES, UserRole
from moccam.services.admin.dashboard import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

Year = Query(default=None, ge=2000, le=9999)


@router.get("/user-stats-by-month")
async def user_stats(
    year: int | None = Year,
    service: DashboardService = Depends(DashboardService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role([UserRole.ADMIN.value])
    return await service.user_stats_async(year)


@router.get("/voucher-stats-by-month")
async def voucher_stats(
    year: int | None = Year,
    service: DashboardService = Depends(DashboardService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role([UserRole.ADMIN.value])
    return await service.voucher_stats_async(year)


@router.get("/revenue-stats-by-month")
async def revenue_stats(
    year: int | None = Year,
    service: DashboardService = Depends(DashboardService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.revenue_stats_async(year)


@router.get("/lesson-stats-by-month")
async def lesson_stats(
    year: int | None = Year,
    service: DashboardService = Depends(DashboardService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.lesson_stats_async(year)
