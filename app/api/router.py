from fastapi import APIRouter

from app.api.routes.recipes import recipes_router, comment_router, tag_router, effort_router
from app.api.routes.collections import collection_router, favorites_router
from app.api.routes.users import user_router

api_router = APIRouter()

# 将所有路由配置定义在一个列表中
# 每个元素都是一个包含 router, prefix, 和 tags 的字典
routers_to_include = [
    # recipes routers
    {"router": recipes_router.router, "prefix": "/recipes", "tags": ["recipes"]},
    {"router": comment_router.router, "prefix": "", "tags": ["comments"]},
    {"router": tag_router.router, "prefix": "/tags", "tags": ["tags"]},
    {"router": effort_router.router, "prefix": "/efforts", "tags": ["efforts"]},

    # collection routers
    {"router": collection_router.router, "prefix": "/collections", "tags": ["collections"]},
    {"router": favorites_router.router, "prefix": "/favorites", "tags": ["favorites"]},

    # user routers
    {"router": user_router.router, "prefix": "/users", "tags": ["users"]},
]

for route_config in routers_to_include:
    api_router.include_router(**route_config)
