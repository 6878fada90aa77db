# app/repo/crud/recipes/recipe_image_repo.py

from typing import List, Optional, Dict, Any, Sequence
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import select, func, delete, asc
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.recipes.recipe import RecipeImage
from app.repo.crud.common.base_repo import BaseRepository


class RecipeImageRepository(BaseRepository[RecipeImage, BaseModel, BaseModel]):
    def __init__(self, db: AsyncSession, context: Optional[Dict[str, Any]] = None):
        super().__init__(db=db, model=RecipeImage, context=context)

    async def list_for_recipes(self, recipe_ids: Sequence[UUID]) -> List[RecipeImage]:
        """批量获取多个菜谱的图片，按 sort_order 升序。"""
        if not recipe_ids:
            return []
        stmt = (
            select(RecipeImage)
            .where(RecipeImage.recipe_id.in_(list(recipe_ids)))
            .order_by(asc(RecipeImage.recipe_id), asc(RecipeImage.sort_order))
        )
        return await self._run_and_scalars(stmt, "list_for_recipes")

    async def next_sort_order(self, recipe_id: UUID) -> int:
        stmt = select(func.max(RecipeImage.sort_order)).where(RecipeImage.recipe_id == recipe_id)
        current_max = await self._run_and_scalar(stmt, "next_sort_order")
        return 0 if current_max is None else current_max + 1

    async def add_images(self, recipe_id: UUID, image_paths: Sequence[str], start_order: int = 0) -> List[RecipeImage]:
        images = [
            RecipeImage(recipe_id=recipe_id, image_path=path, sort_order=start_order + offset)
            for offset, path in enumerate(image_paths)
        ]
        self.db.add_all(images)
        await self.db.flush()
        return images

    async def get_for_recipe_by_ids(self, recipe_id: UUID, image_ids: Sequence[UUID]) -> List[RecipeImage]:
        if not image_ids:
            return []
        stmt = select(RecipeImage).where(
            RecipeImage.recipe_id == recipe_id,
            RecipeImage.id.in_(list(image_ids)),
        )
        return await self._run_and_scalars(stmt, "get_for_recipe_by_ids")

    async def delete_by_ids(self, image_ids: Sequence[UUID]) -> int:
        if not image_ids:
            return 0
        result = await self.db.execute(delete(RecipeImage).where(RecipeImage.id.in_(list(image_ids))))
        return result.rowcount
