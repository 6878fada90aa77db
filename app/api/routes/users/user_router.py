# app/api/routes/users/user_router.py

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.api.dependencies.services import get_user_service
from app.core.api_response import StandardResponse, response_success, response_error
from app.core.exceptions import BaseBusinessException
from app.core.security.security import get_current_user, require_admin
from app.schemas.common.page_schemas import PageResponse
from app.schemas.users.user_context import UserContext
from app.schemas.users.user_schemas import UserProfileRead, UserProfileUpdate, UserRead
from app.services.users.user_service import UserService

router = APIRouter()


# ==========================
# 个人资料
# ==========================

@router.get("/me", response_model=StandardResponse[UserProfileRead], summary="我的资料")
async def get_my_profile(
    service: UserService = Depends(get_user_service),
    current_user: UserContext = Depends(get_current_user),
):
    try:
        profile = await service.get_profile(current_user)
        return response_success(data=profile)
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.put("/me", response_model=StandardResponse[UserProfileRead], summary="修改我的资料")
async def update_my_profile(
    updates: UserProfileUpdate,
    service: UserService = Depends(get_user_service),
    current_user: UserContext = Depends(get_current_user),
):
    try:
        profile = await service.update_profile(current_user, updates)
        return response_success(data=profile, message="资料已更新")
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.delete("/me/profile-picture", response_model=StandardResponse[UserProfileRead], summary="删除我的头像")
async def remove_my_profile_picture(
    service: UserService = Depends(get_user_service),
    current_user: UserContext = Depends(get_current_user),
):
    try:
        profile = await service.remove_profile_picture(current_user)
        return response_success(data=profile, message="头像已删除")
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


# ==========================
# 管理员
# ==========================

@router.get("", response_model=StandardResponse[PageResponse[UserRead]], summary="[管理员] 用户列表")
async def list_users(
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100, description="按用户名或邮箱搜索"),
    service: UserService = Depends(get_user_service),
    _admin: UserContext = Depends(require_admin),
):
    users = await service.page_list_users(page=page, per_page=per_page, search=search)
    return response_success(data=users)


@router.post("/{user_id}/ban/toggle", response_model=StandardResponse[UserRead], summary="[管理员] 封禁 / 解封用户")
async def toggle_ban(
    user_id: UUID,
    service: UserService = Depends(get_user_service),
    admin: UserContext = Depends(require_admin),
):
    try:
        user = await service.toggle_ban(admin, user_id)
        return response_success(data=user)
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.post("/{user_id}/admin/toggle", response_model=StandardResponse[UserRead], summary="[管理员] 授予 / 撤销管理员")
async def toggle_admin(
    user_id: UUID,
    service: UserService = Depends(get_user_service),
    admin: UserContext = Depends(require_admin),
):
    try:
        user = await service.toggle_admin(admin, user_id)
        return response_success(data=user)
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)
