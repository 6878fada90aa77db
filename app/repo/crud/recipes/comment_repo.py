# app/repo/crud/recipes/comment_repo.py

from typing import List, Optional, Dict, Any
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.recipes.comment import Comment
from app.repo.crud.common.base_repo import BaseRepository
from app.schemas.recipes.comment_schemas import CommentCreate


class CommentRepository(BaseRepository[Comment, CommentCreate, BaseModel]):
    def __init__(self, db: AsyncSession, context: Optional[Dict[str, Any]] = None):
        super().__init__(db=db, model=Comment, context=context)

    async def list_for_recipe(self, recipe_id: UUID) -> List[Comment]:
        """最新的评论排在最前。"""
        stmt = (
            self._base_stmt()
            .where(self.model.recipe_id == recipe_id)
            .order_by(desc(self.model.created_at), desc(self.model.id))
        )
        return await self._run_and_scalars(stmt, "list_for_recipe")
