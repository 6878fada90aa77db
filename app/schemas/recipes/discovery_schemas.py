# app/schemas/recipes/discovery_schemas.py

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.enums.recipe_enums import DiscoveryPreset
from app.schemas.recipes.recipe_schemas import RecipeSummary


class DiscoveryQuery(BaseModel):
    """
    发现页的查询条件。
    空的 tag_ids / effort_ids 表示不按该维度过滤；空白的 search 视为没有搜索词。
    """
    page: int = Field(1, ge=1, description="页码，从 1 开始")
    per_page: int = Field(12, ge=1, description="每页数量")
    tag_ids: List[UUID] = Field(default_factory=list)
    effort_ids: List[UUID] = Field(default_factory=list)
    preset: DiscoveryPreset = DiscoveryPreset.ALL
    search: Optional[str] = Field(None, max_length=200)

    @field_validator("tag_ids", "effort_ids")
    @classmethod
    def dedupe_ids(cls, v: List[UUID]) -> List[UUID]:
        return list(dict.fromkeys(v))

    @field_validator("search")
    @classmethod
    def blank_search_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v


class DiscoveryPage(BaseModel):
    """
    一页发现结果。主查询失败时 items 为空且 error 有值。
    has_next 在本页拿满 per_page 条时为 True。
    """
    items: List[RecipeSummary] = Field(default_factory=list)
    page: int
    per_page: int
    has_next: bool = False
    error: Optional[str] = None
