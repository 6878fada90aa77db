# app/schemas/recipes/recipe_schemas.py

from typing import List, Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field, conlist, field_validator


class NamedRef(BaseModel):
    """标签 / 难度在菜谱中的精简表示。"""
    id: UUID
    name: str
    model_config = {"from_attributes": True}


# === 图片 ===
class RecipeImageRead(BaseModel):
    id: UUID
    image_path: str
    sort_order: int
    url: Optional[str] = Field(None, description="解析后的访问地址，解析失败时为空")
    model_config = {"from_attributes": True}


# === 创建 / 更新 ===
class RecipeBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    ingredients: Optional[str] = Field(None, max_length=20000)
    instructions: Optional[str] = Field(None, max_length=20000)
    cook_time_mins: Optional[int] = Field(None, ge=0, le=100000, description="烹饪时长 (分钟)")
    external_link: Optional[str] = Field(None, max_length=500)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("菜谱标题不能为空")
        return v


class RecipeCreate(RecipeBase):
    tag_ids: List[UUID] = Field(default_factory=list)
    effort_ids: List[UUID] = Field(default_factory=list)
    image_paths: conlist(str, max_length=20) = Field(
        default_factory=list, description="客户端已上传到对象存储的图片 key，按显示顺序排列"
    )


class RecipeUpdate(BaseModel):
    """所有字段可选；tag_ids / effort_ids 传入时整体替换原有关联。"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    ingredients: Optional[str] = Field(None, max_length=20000)
    instructions: Optional[str] = Field(None, max_length=20000)
    cook_time_mins: Optional[int] = Field(None, ge=0, le=100000)
    external_link: Optional[str] = Field(None, max_length=500)
    tag_ids: Optional[List[UUID]] = None
    effort_ids: Optional[List[UUID]] = None
    image_paths_to_add: conlist(str, max_length=20) = Field(default_factory=list)
    image_ids_to_remove: List[UUID] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> str:
        # 未传 title 时不会进入这里；显式传 null 与空白标题一样拒绝
        if v is None or not v.strip():
            raise ValueError("菜谱标题不能为空")
        return v.strip()


# === 读取 ===
class RecipeRead(RecipeBase):
    id: UUID
    user_id: Optional[UUID] = None
    created_at: datetime
    model_config = {"from_attributes": True}


class RecipeDetail(RecipeRead):
    author_username: Optional[str] = None
    tags: List[NamedRef] = Field(default_factory=list)
    efforts: List[NamedRef] = Field(default_factory=list)
    images: List[RecipeImageRead] = Field(default_factory=list)


class RecipeSummary(BaseModel):
    """发现页卡片所需的数据。"""
    id: UUID
    title: str
    ingredients: Optional[str] = None
    cook_time_mins: Optional[int] = None
    user_id: Optional[UUID] = None
    created_at: datetime
    preview_url: Optional[str] = Field(None, description="预览图地址；无图片或解析失败时为空")
    tags: Optional[List[NamedRef]] = Field(default_factory=list, description="加载失败时为空值")
    efforts: Optional[List[NamedRef]] = Field(default_factory=list, description="加载失败时为空值")
