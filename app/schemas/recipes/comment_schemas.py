# app/schemas/recipes/comment_schemas.py
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class CommentCreate(BaseModel):
    body: str = Field(..., min_length=1, max_length=2000)
    rating: Optional[int] = Field(None, ge=1, le=5, description="评分 1-5，可选")

    @field_validator("body")
    @classmethod
    def strip_body(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("评论内容不能为空")
        return v


class CommentRead(BaseModel):
    id: UUID
    recipe_id: UUID
    user_id: UUID
    body: str
    rating: Optional[int] = None
    created_at: datetime
    author_username: Optional[str] = None
    author_avatar_url: Optional[str] = None

    model_config = {"from_attributes": True}
