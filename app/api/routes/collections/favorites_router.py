# app/api/routes/collections/favorites_router.py

from uuid import UUID

from fastapi import APIRouter, Depends

from app.api.dependencies.services import get_collection_service
from app.core.api_response import StandardResponse, response_success, response_error
from app.core.exceptions import BaseBusinessException
from app.core.security.security import get_current_user
from app.schemas.collections.collection_schemas import MembershipRead
from app.schemas.users.user_context import UserContext
from app.services.collections.collection_service import CollectionService

router = APIRouter()


@router.get("/{recipe_id}", response_model=StandardResponse[dict], summary="菜谱是否已收藏")
async def is_favorite(
    recipe_id: UUID,
    service: CollectionService = Depends(get_collection_service),
    current_user: UserContext = Depends(get_current_user),
):
    favorite = await service.is_favorite(current_user, recipe_id)
    return response_success(data={"recipe_id": recipe_id, "is_favorite": favorite})


@router.post("/{recipe_id}/toggle", response_model=StandardResponse[MembershipRead], summary="收藏 / 取消收藏")
async def toggle_favorite(
    recipe_id: UUID,
    service: CollectionService = Depends(get_collection_service),
    current_user: UserContext = Depends(get_current_user),
):
    try:
        membership = await service.toggle_favorite(current_user, recipe_id)
        return response_success(data=membership)
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)
