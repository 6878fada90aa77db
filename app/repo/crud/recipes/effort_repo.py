# app/repo/crud/recipes/effort_repo.py

from typing import List, Optional, Dict, Any, Sequence
from uuid import UUID

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.repo.crud.common.base_repo import BaseRepository
from app.models.recipes.recipe import Effort, RecipeEffortLink
from app.schemas.recipes.effort_schemas import EffortCreate, EffortUpdate


class EffortRepository(BaseRepository[Effort, EffortCreate, EffortUpdate]):
    def __init__(self, db: AsyncSession, context: Optional[Dict[str, Any]] = None):
        super().__init__(db=db, model=Effort, context=context)

    async def find_by_name(self, name: str) -> Optional[Effort]:
        return await self.find_by_field(name.strip(), "name", case_insensitive=True)

    async def are_ids_valid(self, ids: Sequence[UUID]) -> bool:
        if not ids:
            return True

        unique_ids = set(ids)
        stmt = select(func.count(self.model.id)).where(self.model.id.in_(unique_ids))
        existing_count = await self._run_and_scalar(stmt, "are_ids_valid")
        return existing_count == len(unique_ids)

    async def list_links(self, recipe_ids: Optional[Sequence[UUID]] = None) -> List[RecipeEffortLink]:
        """列出菜谱-难度关联；不传 recipe_ids 时返回全部关联。"""
        stmt = select(RecipeEffortLink)
        if recipe_ids is not None:
            if not recipe_ids:
                return []
            stmt = stmt.where(RecipeEffortLink.recipe_id.in_(list(recipe_ids)))
        return await self._run_and_scalars(stmt, "list_links")

    async def replace_links_for_recipe(self, recipe_id: UUID, effort_ids: Sequence[UUID]) -> None:
        await self.db.execute(delete(RecipeEffortLink).where(RecipeEffortLink.recipe_id == recipe_id))
        self.db.add_all(
            [RecipeEffortLink(recipe_id=recipe_id, effort_id=effort_id) for effort_id in dict.fromkeys(effort_ids)]
        )
        await self.db.flush()

    async def delete_links_for_effort(self, effort_id: UUID) -> int:
        result = await self.db.execute(delete(RecipeEffortLink).where(RecipeEffortLink.effort_id == effort_id))
        return result.rowcount
