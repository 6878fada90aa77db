# app/core/middleware.py

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.core.exceptions import UnauthorizedException
from app.core.request_scope import set_request_scope
from app.utils.jwt_utils import decode_token

EXCLUDED_PATHS = {
    "/health",
    "/docs",
    "/openapi.json",
}


class RequestScopeMiddleware(BaseHTTPMiddleware):
    """
    把请求中的用户 id 写入 request scope，供 RepositoryFactory 使用。
    完整的 UserContext 由 get_current_user 依赖加载。
    """

    async def dispatch(self, request: Request, call_next):
        if request.url.path in EXCLUDED_PATHS:
            return await call_next(request)

        try:
            scope = {}
            auth_header = request.headers.get("Authorization")
            if auth_header and auth_header.startswith("Bearer "):
                payload = await decode_token(auth_header.split("Bearer ")[1])
                if payload.get("sub"):
                    scope["user_id"] = payload["sub"]
            set_request_scope(scope)
        except UnauthorizedException as e:
            # token 过期或无效，直接返回 401
            return JSONResponse(
                status_code=401,
                content={"code": e.code, "message": e.message, "data": None},
            )

        return await call_next(request)
