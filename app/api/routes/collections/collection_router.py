# app/api/routes/collections/collection_router.py

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.dependencies.services import get_collection_service
from app.core.api_response import StandardResponse, response_success, response_error
from app.core.exceptions import BaseBusinessException
from app.core.security.security import get_current_user, get_optional_user
from app.schemas.collections.collection_schemas import (
    CollectionCreate,
    CollectionDetail,
    CollectionRead,
    CollectionUpdate,
    MembershipRead,
)
from app.schemas.users.user_context import UserContext
from app.services.collections.collection_service import CollectionService

router = APIRouter()


@router.get("", response_model=StandardResponse[List[CollectionRead]], summary="我的收藏夹")
async def list_my_collections(
    service: CollectionService = Depends(get_collection_service),
    current_user: UserContext = Depends(get_current_user),
):
    collections = await service.list_my_collections(current_user)
    return response_success(data=[CollectionRead.model_validate(c) for c in collections])


@router.post(
    "",
    response_model=StandardResponse[CollectionRead],
    status_code=status.HTTP_201_CREATED,
    summary="创建收藏夹",
)
async def create_collection(
    collection_in: CollectionCreate,
    service: CollectionService = Depends(get_collection_service),
    current_user: UserContext = Depends(get_current_user),
):
    try:
        collection = await service.create_collection(current_user, collection_in)
        return response_success(
            data=CollectionRead.model_validate(collection),
            http_status=status.HTTP_201_CREATED,
            message="收藏夹创建成功",
        )
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.get(
    "/{collection_id}",
    response_model=StandardResponse[CollectionDetail],
    summary="收藏夹详情 (公开收藏夹无需登录)",
)
async def get_collection(
    collection_id: UUID,
    service: CollectionService = Depends(get_collection_service),
    current_user: Optional[UserContext] = Depends(get_optional_user),
):
    try:
        detail = await service.get_collection(current_user, collection_id)
        return response_success(data=detail)
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.put("/{collection_id}", response_model=StandardResponse[CollectionRead], summary="修改收藏夹")
async def update_collection(
    collection_id: UUID,
    collection_in: CollectionUpdate,
    service: CollectionService = Depends(get_collection_service),
    current_user: UserContext = Depends(get_current_user),
):
    try:
        collection = await service.update_collection(current_user, collection_id, collection_in)
        return response_success(data=CollectionRead.model_validate(collection), message="收藏夹已更新")
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.delete("/{collection_id}", response_model=StandardResponse[None], summary="删除收藏夹")
async def delete_collection(
    collection_id: UUID,
    service: CollectionService = Depends(get_collection_service),
    current_user: UserContext = Depends(get_current_user),
):
    try:
        await service.delete_collection(current_user, collection_id)
        return response_success(message="收藏夹已删除")
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.post(
    "/{collection_id}/recipes/{recipe_id}/toggle",
    response_model=StandardResponse[MembershipRead],
    summary="把菜谱加入或移出收藏夹",
)
async def toggle_recipe(
    collection_id: UUID,
    recipe_id: UUID,
    service: CollectionService = Depends(get_collection_service),
    current_user: UserContext = Depends(get_current_user),
):
    try:
        membership = await service.toggle_recipe_in_collection(current_user, collection_id, recipe_id)
        return response_success(data=membership)
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)
