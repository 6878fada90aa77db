# app/api/routes/recipes/effort_router.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.dependencies.services import get_effort_service
from app.core.api_response import StandardResponse, response_success, response_error
from app.core.exceptions import BaseBusinessException
from app.core.security.security import require_admin
from app.schemas.recipes.effort_schemas import EffortRead, EffortCreate, EffortUpdate
from app.schemas.users.user_context import UserContext
from app.services.recipes.effort_service import EffortService

router = APIRouter()


@router.get("", response_model=StandardResponse[List[EffortRead]], summary="获取全部难度")
async def list_efforts(service: EffortService = Depends(get_effort_service)):
    efforts = await service.list_efforts()
    return response_success(data=[EffortRead.model_validate(e) for e in efforts])


@router.post(
    "",
    response_model=StandardResponse[EffortRead],
    status_code=status.HTTP_201_CREATED,
    summary="[管理员] 创建难度",
)
async def create_effort(
    effort_in: EffortCreate,
    service: EffortService = Depends(get_effort_service),
    _admin: UserContext = Depends(require_admin),
):
    try:
        effort = await service.create_effort(effort_in)
        return response_success(
            data=EffortRead.model_validate(effort), http_status=status.HTTP_201_CREATED, message="难度创建成功"
        )
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.put("/{effort_id}", response_model=StandardResponse[EffortRead], summary="[管理员] 重命名难度")
async def update_effort(
    effort_id: UUID,
    effort_in: EffortUpdate,
    service: EffortService = Depends(get_effort_service),
    _admin: UserContext = Depends(require_admin),
):
    try:
        effort = await service.update_effort(effort_id, effort_in)
        return response_success(data=EffortRead.model_validate(effort), message="难度更新成功")
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)


@router.delete("/{effort_id}", response_model=StandardResponse[None], summary="[管理员] 删除难度")
async def delete_effort(
    effort_id: UUID,
    service: EffortService = Depends(get_effort_service),
    _admin: UserContext = Depends(require_admin),
):
    try:
        await service.delete_effort(effort_id)
        return response_success(message="难度已删除")
    except BaseBusinessException as e:
        return response_error(code=e.code, message=e.message)
