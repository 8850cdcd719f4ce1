from fastapi import APIRouter, Body, Depends, status

from moccam.core.deps import AuthorizationService
from moccam.core.enum import STAFF_ROLES
from moccam.schemas.content.course import CreateCourse, UpdateCourse
from moccam.services.content.course import CourseService

router = APIRouter(prefix="/courses", tags=["Courses"])


@router.get("")
async def get_courses(
    search: str | None = None,
    service: CourseService = Depends(CourseService),
):
    return await service.get_courses_async(search)


@router.get("/{course_id}")
async def get_course(
    course_id: int,
    service: CourseService = Depends(CourseService),
):
    return await service.get_course_async(course_id)


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_course(
    schema: CreateCourse = Body(),
    service: CourseService = Depends(CourseService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.require_role(STAFF_ROLES)
    return await service.create_course_async(schema, user)


@router.put("/{course_id}")
async def update_course(
    course_id: int,
    schema: UpdateCourse = Body(),
    service: CourseService = Depends(CourseService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.update_course_async(course_id, schema)


@router.delete("/{course_id}")
async def delete_course(
    course_id: int,
    service: CourseService = Depends(CourseService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    await authorization.require_role(STAFF_ROLES)
    return await service.delete_course_async(course_id)
