from fastapi import APIRouter, Body, Depends, status

from moccam.core.deps import AuthorizationService
from moccam.core.enum import UserRole
from moccam.schemas.content.comment import CreateComment, UpdateComment
from moccam.services.content.comment import CommentService

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.get("")
async def get_comments(service: CommentService = Depends(CommentService)):
    return await service.get_comments_async()


@router.get("/lesson/{lesson_id}")
async def get_comments_by_lesson(
    lesson_id: int,
    service: CommentService = Depends(CommentService),
):
    return await service.get_comments_async(lesson_id)


@router.get("/{comment_id}")
async def get_comment(
    comment_id: int,
    service: CommentService = Depends(CommentService),
):
    return await service.get_comment_async(comment_id)


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_comment(
    schema: CreateComment = Body(),
    service: CommentService = Depends(CommentService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.require_role([UserRole.CUSTOMER.value])
    return await service.create_comment_async(schema, user)


@router.put("/{comment_id}")
async def update_comment(
    comment_id: int,
    schema: UpdateComment = Body(),
    service: CommentService = Depends(CommentService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.require_role([UserRole.ADMIN.value, UserRole.CUSTOMER.value])
    return await service.update_comment_async(comment_id, schema, user)


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: int,
    service: CommentService = Depends(CommentService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.require_role([UserRole.ADMIN.value, UserRole.CUSTOMER.value])
    return await service.delete_comment_async(comment_id, user)
