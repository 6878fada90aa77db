from typing import Any, Optional, Dict, TypeVar, Generic, Union

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.core.logger import get_logger
from app.core.response_codes import ResponseCodeEnum

logger = get_logger(__name__)

T = TypeVar('T')


# === Generic Pydantic Response Schema ===
class StandardResponse(BaseModel, Generic[T]):
    code: int
    message: str
    data: Optional[T] = None

    model_config = {
        "arbitrary_types_allowed": True,
        "json_schema_extra": {
            "example": {
                "code": 0,
                "message": "Success",
                "data": {}
            }
        },
    }


# === 自动序列化工具 ===
def to_json_compatible(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump()

    if isinstance(data, (list, tuple)):
        return [to_json_compatible(item) for item in data]

    if isinstance(data, dict):
        return {k: to_json_compatible(v) for k, v in data.items()}

    return data  # int, str, bool, None, etc.


# === 成功响应 ===
def response_success(
    data: Any = None,
    code: ResponseCodeEnum = ResponseCodeEnum.SUCCESS,
    http_status: int = 200,
    message: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    final_message = message or code.message
    logger.debug(f"Response Success | code: {code.code}, message: {final_message}")

    # 先处理 Pydantic 模型，再交给 FastAPI 处理 datetime, UUID 等
    encoded_data = jsonable_encoder(to_json_compatible(data))

    return JSONResponse(
        status_code=http_status,
        content={
            "code": code.code,
            "message": final_message,
            "data": encoded_data
        },
        headers=headers
    )


# === 错误响应 ===
def response_error(
    code: Union[ResponseCodeEnum, int],
    http_status: int = 200,
    message: Optional[str] = None,
    data: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    if isinstance(code, ResponseCodeEnum):
        final_code, final_message = code.code, message or code.message
    else:
        final_code, final_message = code, message or ResponseCodeEnum.SERVER_ERROR.message
    logger.warning(f"Response Error | http_status: {http_status}, code: {final_code}, message: {final_message}")

    return JSONResponse(
        status_code=http_status,
        content={
            "code": final_code,
            "message": final_message,
            "data": jsonable_encoder(to_json_compatible(data))
        },
        headers=headers
    )
