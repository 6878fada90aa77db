# app/api/routes/recipes/comment_router.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.dependencies.services import get_comment_service
from app.core.api_response import StandardResponse, response_success, response_error
from app.core.exceptions import BaseBusinessException
from app.core.security.security import get_current_user
from app.schemas.recipes.comment_schemas import CommentCreate, CommentRead
from app.schemas.users.user_context import UserContext
from app.services.recipes.comment_service import CommentService

router = APIRouter()


@router.get(
    "/recipes/{recipe_id}/comments",
    response_model=StandardResponse[List[CommentRead]],
    summary="获取菜谱的评论",
)
async def list_comments(recipe_id: UUID, service: CommentService = Depends(get_comment_service)):
    try:
        comments = await service.list_comments(recipe_id)
        return response_success(data=comments)
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.post(
    "/recipes/{recipe_id}/comments",
    response_model=StandardResponse[CommentRead],
    status_code=status.HTTP_201_CREATED,
    summary="发表评论",
)
async def add_comment(
    recipe_id: UUID,
    comment_in: CommentCreate,
    service: CommentService = Depends(get_comment_service),
    current_user: UserContext = Depends(get_current_user),
):
    try:
        comment = await service.add_comment(current_user, recipe_id, comment_in)
        return response_success(data=comment, http_status=status.HTTP_201_CREATED, message="评论成功")
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.delete(
    "/comments/{comment_id}",
    response_model=StandardResponse[None],
    summary="删除自己的评论",
)
async def delete_comment(
    comment_id: UUID,
    service: CommentService = Depends(get_comment_service),
    current_user: UserContext = Depends(get_current_user),
):
    try:
        await service.delete_comment(current_user, comment_id)
        return response_success(message="评论已删除")
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)
