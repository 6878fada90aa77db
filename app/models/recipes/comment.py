from typing import Optional
import uuid

from sqlalchemy import Text
from sqlmodel import Field

from app.models._model_utils.guid import GUID
from app.models.base.base_model import BaseModel


class Comment(BaseModel, table=True):
    user_id: uuid.UUID = Field(foreign_key="user.id", sa_type=GUID(), index=True)
    recipe_id: uuid.UUID = Field(foreign_key="recipe.id", sa_type=GUID(), index=True)
    body: str = Field(sa_type=Text)
    rating: Optional[int] = Field(default=None, ge=1, le=5)
