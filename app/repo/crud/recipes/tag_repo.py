# app/repo/crud/recipes/tag_repo.py

from typing import List, Optional, Dict, Any, Sequence
from uuid import UUID

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.repo.crud.common.base_repo import BaseRepository
from app.models.recipes.recipe import Tag, RecipeTagLink
from app.schemas.recipes.tag_schemas import TagCreate, TagUpdate


class TagRepository(BaseRepository[Tag, TagCreate, TagUpdate]):
    def __init__(self, db: AsyncSession, context: Optional[Dict[str, Any]] = None):
        super().__init__(db=db, model=Tag, context=context)

    async def find_by_name(self, name: str) -> Optional[Tag]:
        """
        根据名称查找标签（大小写不敏感的精确匹配）。
        用于重名校验，以及把 vegetarian / vegan 预设解析成标签 id。
        """
        return await self.find_by_field(name.strip(), "name", case_insensitive=True)

    async def are_ids_valid(self, ids: Sequence[UUID]) -> bool:
        """
        高效地检查一组ID是否都存在于 tag 表中。
        """
        if not ids:
            return True

        unique_ids = set(ids)
        stmt = select(func.count(self.model.id)).where(self.model.id.in_(unique_ids))
        existing_count = await self._run_and_scalar(stmt, "are_ids_valid")
        return existing_count == len(unique_ids)

    async def list_links(self, recipe_ids: Optional[Sequence[UUID]] = None) -> List[RecipeTagLink]:
        """列出菜谱-标签关联；不传 recipe_ids 时返回全部关联。"""
        stmt = select(RecipeTagLink)
        if recipe_ids is not None:
            if not recipe_ids:
                return []
            stmt = stmt.where(RecipeTagLink.recipe_id.in_(list(recipe_ids)))
        return await self._run_and_scalars(stmt, "list_links")

    async def replace_links_for_recipe(self, recipe_id: UUID, tag_ids: Sequence[UUID]) -> None:
        """用给定的标签集合整体替换一个菜谱的标签关联 (先删后插)。"""
        await self.db.execute(delete(RecipeTagLink).where(RecipeTagLink.recipe_id == recipe_id))
        self.db.add_all([RecipeTagLink(recipe_id=recipe_id, tag_id=tag_id) for tag_id in dict.fromkeys(tag_ids)])
        await self.db.flush()

    async def delete_links_for_tag(self, tag_id: UUID) -> int:
        result = await self.db.execute(delete(RecipeTagLink).where(RecipeTagLink.tag_id == tag_id))
        return result.rowcount
