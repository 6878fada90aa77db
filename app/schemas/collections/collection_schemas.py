# app/schemas/collections/collection_schemas.py
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.schemas.recipes.recipe_schemas import RecipeSummary


class CollectionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    is_public: bool = False

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("收藏夹名称不能为空")
        return v


class CollectionUpdate(BaseModel):
    """重命名、修改描述或公开状态，未传的字段保持不变。"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    is_public: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> str:
        if v is None or not v.strip():
            raise ValueError("收藏夹名称不能为空")
        return v.strip()

    @field_validator("is_public")
    @classmethod
    def reject_null_visibility(cls, v: Optional[bool]) -> bool:
        if v is None:
            raise ValueError("is_public 不能为空")
        return v


class CollectionRead(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    description: Optional[str] = None
    is_public: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class CollectionDetail(CollectionRead):
    recipes: List[RecipeSummary] = Field(default_factory=list)


class MembershipRead(BaseModel):
    """切换收藏状态后的结果。"""
    recipe_id: UUID
    collection_id: UUID
    is_member: bool
