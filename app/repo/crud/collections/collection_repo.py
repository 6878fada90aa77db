# app/repo/crud/collections/collection_repo.py

from typing import List, Optional, Dict, Any
from uuid import UUID

from sqlalchemy import select, delete, asc
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.collections.collection import Collection, CollectionRecipeLink
from app.repo.crud.common.base_repo import BaseRepository
from app.schemas.collections.collection_schemas import CollectionCreate, CollectionUpdate


class CollectionRepository(BaseRepository[Collection, CollectionCreate, CollectionUpdate]):
    def __init__(self, db: AsyncSession, context: Optional[Dict[str, Any]] = None):
        super().__init__(db=db, model=Collection, context=context)

    async def list_for_user(self, user_id: UUID, exclude_name: Optional[str] = None) -> List[Collection]:
        stmt = self._base_stmt().where(self.model.user_id == user_id)
        if exclude_name:
            stmt = stmt.where(self.model.name != exclude_name)
        stmt = stmt.order_by(asc(self.model.name))
        return await self._run_and_scalars(stmt, "list_for_user")

    async def get_by_user_and_name(self, user_id: UUID, name: str) -> Optional[Collection]:
        stmt = self._base_stmt().where(self.model.user_id == user_id, self.model.name == name)
        return await self._run_and_scalar(stmt, "get_by_user_and_name")

    async def list_recipe_ids(self, collection_id: UUID) -> List[UUID]:
        stmt = select(CollectionRecipeLink.recipe_id).where(CollectionRecipeLink.collection_id == collection_id)
        return await self._run_and_scalars(stmt, "list_recipe_ids")

    async def has_recipe(self, collection_id: UUID, recipe_id: UUID) -> bool:
        stmt = select(CollectionRecipeLink).where(
            CollectionRecipeLink.collection_id == collection_id,
            CollectionRecipeLink.recipe_id == recipe_id,
        )
        return await self._run_and_scalar(stmt, "has_recipe") is not None

    async def add_recipe(self, collection_id: UUID, recipe_id: UUID) -> None:
        self.db.add(CollectionRecipeLink(collection_id=collection_id, recipe_id=recipe_id))
        await self.db.flush()

    async def remove_recipe(self, collection_id: UUID, recipe_id: UUID) -> None:
        await self.db.execute(
            delete(CollectionRecipeLink).where(
                CollectionRecipeLink.collection_id == collection_id,
                CollectionRecipeLink.recipe_id == recipe_id,
            )
        )

    async def delete_with_links(self, collection_id: UUID) -> None:
        await self.db.execute(
            delete(CollectionRecipeLink).where(CollectionRecipeLink.collection_id == collection_id)
        )
        await self.db.execute(delete(Collection).where(Collection.id == collection_id))
        await self.db.flush()
