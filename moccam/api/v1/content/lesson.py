from fastapi import APIRouter, Body, Depends, status

from moccam.core.deps import AuthorizationService
from moccam.core.enum import STAFF_ROLES
from moccam.schemas.content.course import CreateLesson, UpdateLesson
from moccam.services.content.lesson import LessonService

router = APIRouter(prefix="/lessons", tags=["Lessons"])


@router.get("")
async def get_lessons(
    service: LessonService = Depends(LessonService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.get_current_user()
    return await service.get_lessons_async()


@router.get("/course/{course_id}")
async def get_lessons_by_course(
    course_id: int,
    service: LessonService = Depends(LessonService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.get_current_user()
    return await service.get_lessons_async(course_id)


@router.get("/{lesson_id}")
async def get_lesson(
    lesson_id: int,
    service: LessonService = Depends(LessonService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.get_current_user()
    return await service.get_lesson_async(lesson_id)


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_lesson(
    schema: CreateLesson = Body(),
    service: LessonService = Depends(LessonService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.create_lesson_async(schema)


@router.put("/{lesson_id}")
async def update_lesson(
    lesson_id: int,
    schema: UpdateLesson = Body(),
    service: LessonService = Depends(LessonService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.update_lesson_async(lesson_id, schema)


@router.delete("/{lesson_id}")
async def delete_lesson(
    lesson_id: int,
    service: LessonService = Depends(LessonService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.delete_lesson_async(lesson_id)
