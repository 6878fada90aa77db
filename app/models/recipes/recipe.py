from typing import Optional
import uuid

from sqlalchemy import Text, UniqueConstraint
from sqlmodel import SQLModel, Field

from app.models._model_utils.guid import GUID
from app.models.base.base_model import BaseModel, SoftDeleteModel, AutoTableNameMixin


# === 关联表 ===
# 关联表是菜谱与标签/难度关系的唯一来源
class RecipeTagLink(AutoTableNameMixin, SQLModel, table=True):
    recipe_id: uuid.UUID = Field(foreign_key="recipe.id", primary_key=True, sa_type=GUID())
    tag_id: uuid.UUID = Field(foreign_key="tag.id", primary_key=True, sa_type=GUID(), index=True)

    __table_args__ = (
        UniqueConstraint("recipe_id", "tag_id", name="uq_recipe_tag"),
    )


class RecipeEffortLink(AutoTableNameMixin, SQLModel, table=True):
    recipe_id: uuid.UUID = Field(foreign_key="recipe.id", primary_key=True, sa_type=GUID())
    effort_id: uuid.UUID = Field(foreign_key="effort.id", primary_key=True, sa_type=GUID(), index=True)

    __table_args__ = (
        UniqueConstraint("recipe_id", "effort_id", name="uq_recipe_effort"),
    )


# === 标签 Tag (管理员维护) ===
class Tag(BaseModel, table=True):
    name: str = Field(index=True, nullable=False, max_length=50)


# === 难度 Effort (管理员维护) ===
class Effort(BaseModel, table=True):
    name: str = Field(index=True, nullable=False, max_length=50)


# === 菜谱 Recipe ===
class Recipe(SoftDeleteModel, table=True):
    title: str = Field(index=True, max_length=200)
    ingredients: Optional[str] = Field(default=None, sa_type=Text)
    instructions: Optional[str] = Field(default=None, sa_type=Text)
    cook_time_mins: Optional[int] = Field(default=None, ge=0, description="烹饪时长 (分钟)")
    external_link: Optional[str] = Field(default=None, max_length=500)
    user_id: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id", sa_type=GUID(), index=True)


# === 菜谱图片 RecipeImage ===
class RecipeImage(BaseModel, table=True):
    """
    image_path 是对象存储中的 key，不是 URL。
    同一菜谱内 sort_order 唯一，最小的一张作为预览图。
    """
    recipe_id: uuid.UUID = Field(foreign_key="recipe.id", sa_type=GUID(), index=True)
    image_path: str = Field(max_length=500)
    sort_order: int = Field(default=0, ge=0)

    __table_args__ = (
        UniqueConstraint("recipe_id", "sort_order", name="uq_recipe_image_order"),
    )
