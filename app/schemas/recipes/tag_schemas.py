# app/schemas/recipes/tag_schemas.py
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


# --- 基础与读取 ---

class TagBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=50, description="标签名称")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("标签名称不能为空")
        return v


class TagRead(BaseModel):
    """用于从数据库读取并返回给客户端的标签模型。"""
    id: UUID
    name: str
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


# --- 创建与更新 ---

class TagCreate(TagBase):
    """用于创建新标签的 Schema。"""
    pass


class TagUpdate(TagBase):
    """重命名标签。"""
    pass
