from typing import Optional
import uuid

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field

from app.models._model_utils.guid import GUID
from app.models.base.base_model import BaseModel, AutoTableNameMixin


class CollectionRecipeLink(AutoTableNameMixin, SQLModel, table=True):
    collection_id: uuid.UUID = Field(foreign_key="collection.id", primary_key=True, sa_type=GUID())
    recipe_id: uuid.UUID = Field(foreign_key="recipe.id", primary_key=True, sa_type=GUID(), index=True)


class Collection(BaseModel, table=True):
    """用户的菜谱收藏夹。名为 Favorites 的收藏夹在首次使用时自动创建。"""
    user_id: uuid.UUID = Field(foreign_key="user.id", sa_type=GUID(), index=True)
    name: str = Field(max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    is_public: bool = Field(default=False)

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_collection_user_name"),
    )
