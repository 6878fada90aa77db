# app/api/routes/recipes/tag_router.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.dependencies.services import get_tag_service
from app.core.api_response import StandardResponse, response_success, response_error
from app.core.exceptions import BaseBusinessException
from app.core.security.security import require_admin
from app.schemas.recipes.tag_schemas import TagRead, TagCreate, TagUpdate
from app.schemas.users.user_context import UserContext
from app.services.recipes.tag_service import TagService

# 标签的查询接口公开，写操作仅限管理员
router = APIRouter()


@router.get("", response_model=StandardResponse[List[TagRead]], summary="获取全部标签")
async def list_tags(service: TagService = Depends(get_tag_service)):
    tags = await service.list_tags()
    return response_success(data=[TagRead.model_validate(t) for t in tags])


@router.post(
    "",
    response_model=StandardResponse[TagRead],
    status_code=status.HTTP_201_CREATED,
    summary="[管理员] 创建标签",
)
async def create_tag(
    tag_in: TagCreate,
    service: TagService = Depends(get_tag_service),
    _admin: UserContext = Depends(require_admin),
):
    try:
        tag = await service.create_tag(tag_in)
        return response_success(
            data=TagRead.model_validate(tag), http_status=status.HTTP_201_CREATED, message="标签创建成功"
        )
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.put("/{tag_id}", response_model=StandardResponse[TagRead], summary="[管理员] 重命名标签")
async def update_tag(
    tag_id: UUID,
    tag_in: TagUpdate,
    service: TagService = Depends(get_tag_service),
    _admin: UserContext = Depends(require_admin),
):
    try:
        tag = await service.update_tag(tag_id, tag_in)
        return response_success(data=TagRead.model_validate(tag), message="标签更新成功")
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.delete("/{tag_id}", response_model=StandardResponse[None], summary="[管理员] 删除标签")
async def delete_tag(
    tag_id: UUID,
    service: TagService = Depends(get_tag_service),
    _admin: UserContext = Depends(require_admin),
):
    try:
        await service.delete_tag(tag_id)
        return response_success(message="标签已删除")
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)
