from fastapi import APIRouter, Body, Depends, status

from moccam.core.deps import AuthorizationService
from moccam.core.enum import STAFF_ROLES, UserRole
from moccam.schemas.learning.progress import SubmitProgress, UpdateProgressStatus
from moccam.services.learning.leaderboard import LeaderboardService
from moccam.services.learning.progress import ProgressService

router = APIRouter(tags=["Leaderboard"])
progress_router = APIRouter(prefix="/lesson-progress", tags=["Lesson Progress"])

CUSTOMER_ONLY = [UserRole.CUSTOMER.value]


# ---------------- GAMIFICATION ----------------
@router.post("/lessons/progress")
async def submit_lesson_progress(
    schema: SubmitProgress = Body(),
    service: ProgressService = Depends(ProgressService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.require_role(CUSTOMER_ONLY)
    return await service.submit_progress_async(user.user_id, schema)


@router.get("/leaderboard")
async def get_leaderboard(service: LeaderboardService = Depends(LeaderboardService)):
    return await service.get_top_async()


@router.get("/leaderboard/{user_id}")
async def get_leaderboard_entry(
    user_id: int,
    service: LeaderboardService = Depends(LeaderboardService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    viewer = await authorization.get_current_user()
    return await service.get_user_entry_async(user_id, viewer)


# ---------------- LESSON PROGRESS ----------------
@progress_router.get("")
async def get_all_progress(
    service: ProgressService = Depends(ProgressService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.get_all_progress_async()


@progress_router.get("/{user_id}")
async def get_user_progress(
    user_id: int,
    service: ProgressService = Depends(ProgressService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_self_or_role(
        user_id, message="You can only view your own progress"
    )
    return await service.get_user_progress_async(user_id)


@progress_router.post("", status_code=status.HTTP_201_CREATED)
async def create_progress(
    schema: SubmitProgress = Body(),
    service: ProgressService = Depends(ProgressService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.require_role(CUSTOMER_ONLY)
    return await service.submit_progress_async(user.user_id, schema)


@progress_router.put("/{progress_id}")
async def update_progress(
    progress_id: int,
    schema: UpdateProgressStatus = Body(),
    service: ProgressService = Depends(ProgressService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.get_current_user()
    return await service.update_progress_async(progress_id, schema, user)


@progress_router.delete("/{progress_id}")
async def delete_progress(
    progress_id: int,
    service: ProgressService = Depends(ProgressService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.get_current_user()
    return await service.delete_progress_async(progress_id, user)
