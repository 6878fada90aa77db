# app/core/security/security.py
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.api.dependencies.services import get_user_service
from app.core.exceptions import PermissionDeniedException, UnauthorizedException
from app.schemas.users.user_context import UserContext
from app.services.users.user_service import UserService
from app.utils.jwt_utils import decode_token, get_user_id

bearer_scheme = HTTPBearer(auto_error=False)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    user_service: UserService = Depends(get_user_service),
) -> Optional[UserContext]:
    """没有携带 token 时返回 None；携带了无效 token 仍然报错。"""
    if credentials is None:
        return None
    payload = await decode_token(credentials.credentials)
    return await user_service.get_user_context(get_user_id(payload))


async def get_current_user(
    user: Optional[UserContext] = Depends(get_optional_user),
) -> UserContext:
    if user is None:
        raise UnauthorizedException(message="请先登录")
    return user


async def require_admin(
    user: UserContext = Depends(get_current_user),
) -> UserContext:
    """标签、难度的维护只对管理员开放。"""
    if not user.is_admin:
        raise PermissionDeniedException("需要管理员权限")
    return user
