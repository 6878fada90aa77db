# app/api/routes/recipes/recipes_router.py

from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, Depends, status, Query

from app.api.dependencies.services import get_discovery_service, get_recipes_service
from app.config.settings import settings
from app.core.api_response import StandardResponse, response_success, response_error
from app.core.exceptions import BaseBusinessException
from app.core.response_codes import ResponseCodeEnum
from app.core.security.security import get_current_user
from app.enums.recipe_enums import DiscoveryPreset
from app.schemas.recipes.discovery_schemas import DiscoveryQuery, DiscoveryPage
from app.schemas.recipes.recipe_schemas import RecipeCreate, RecipeUpdate, RecipeDetail
from app.schemas.users.user_context import UserContext
from app.services.recipes.recipe_discovery_service import RecipeDiscoveryService
from app.services.recipes.recipe_service import RecipeService

router = APIRouter()


@router.get(
    "",
    response_model=StandardResponse[DiscoveryPage],
    summary="发现页：分页、筛选、搜索菜谱",
)
async def discover_recipes(
    service: RecipeDiscoveryService = Depends(get_discovery_service),
    page: int = Query(1, ge=1, description="页码"),
    per_page: int = Query(settings.discovery.default_page_size, ge=1, description="每页数量"),
    tag_ids: List[UUID] = Query([], description="包含任一标签即匹配"),
    effort_ids: List[UUID] = Query([], description="包含任一难度即匹配"),
    preset: DiscoveryPreset = Query(DiscoveryPreset.ALL, description="all / vegetarian / vegan"),
    search: Optional[str] = Query(None, max_length=200, description="在标题与食材中搜索"),
):
    """
    公开接口，无需登录。
    主查询失败时返回 RECIPE_LISTING_FAILED，data 中仍然带有一个空的结果页。
    """
    query = DiscoveryQuery(
        page=page, per_page=per_page, tag_ids=tag_ids, effort_ids=effort_ids, preset=preset, search=search
    )
    result = await service.discover(query)
    if result.error:
        return response_error(code=ResponseCodeEnum.RECIPE_LISTING_FAILED, data=result)
    return response_success(data=result)


@router.get(
    "/{recipe_id}",
    response_model=StandardResponse[RecipeDetail],
    summary="获取指定菜谱的详细信息",
)
async def get_recipe(
    recipe_id: UUID, service: RecipeService = Depends(get_recipes_service)
):
    try:
        detail = await service.get_recipe_detail(recipe_id)
        return response_success(data=detail)
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.post(
    "",
    response_model=StandardResponse[RecipeDetail],
    status_code=status.HTTP_201_CREATED,
    summary="创建新菜谱",
)
async def create_recipe(
    recipe_in: RecipeCreate,
    service: RecipeService = Depends(get_recipes_service),
    current_user: UserContext = Depends(get_current_user),
):
    """图片需先由客户端上传到对象存储，这里只登记对象 key。"""
    try:
        detail = await service.create_recipe(current_user, recipe_in)
        return response_success(data=detail, http_status=status.HTTP_201_CREATED, message="菜谱创建成功")
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.put(
    "/{recipe_id}",
    response_model=StandardResponse[RecipeDetail],
    summary="更新指定菜谱",
)
async def update_recipe(
    recipe_id: UUID,
    recipe_in: RecipeUpdate,
    service: RecipeService = Depends(get_recipes_service),
    current_user: UserContext = Depends(get_current_user),
):
    try:
        detail = await service.update_recipe(current_user, recipe_id, recipe_in)
        return response_success(data=detail, message="菜谱更新成功")
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.delete(
    "/{recipe_id}",
    response_model=StandardResponse[None],
    summary="删除菜谱 (移入回收站)",
)
async def delete_recipe(
    recipe_id: UUID,
    service: RecipeService = Depends(get_recipes_service),
    current_user: UserContext = Depends(get_current_user),
):
    try:
        await service.soft_delete_recipe(current_user, recipe_id)
        return response_success(message="菜谱已删除")
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.delete(
    "/{recipe_id}/permanent",
    response_model=StandardResponse[dict],
    summary="永久删除菜谱及其图片",
)
async def hard_delete_recipe(
    recipe_id: UUID,
    service: RecipeService = Depends(get_recipes_service),
    current_user: UserContext = Depends(get_current_user),
):
    try:
        failed = await service.hard_delete_recipe(current_user, recipe_id)
        return response_success(data={"failed_objects": failed}, message="菜谱已永久删除")
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)
