# app/repo/crud/recipes/recipe_repo.py

from typing import List, Optional, Dict, Any, Sequence
from uuid import UUID

from sqlalchemy import select, func, delete, desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.collections.collection import CollectionRecipeLink
from app.models.recipes.comment import Comment
from app.models.recipes.recipe import Recipe, RecipeTagLink, RecipeEffortLink, RecipeImage
from app.repo.crud.common.base_repo import BaseRepository, escape_like
from app.schemas.recipes.recipe_schemas import RecipeCreate, RecipeUpdate


class RecipeRepository(BaseRepository[Recipe, RecipeCreate, RecipeUpdate]):
    def __init__(self, db: AsyncSession, context: Optional[Dict[str, Any]] = None):
        super().__init__(db=db, model=Recipe, context=context)

    async def list_discoverable(
            self,
            *,
            page: int,
            per_page: int,
            tag_ids: Optional[Sequence[UUID]] = None,
            effort_ids: Optional[Sequence[UUID]] = None,
            search: Optional[str] = None,
    ) -> List[Recipe]:
        """
        发现页的主查询。所有过滤条件都在分页之前执行，
        保证只要存在足够的匹配菜谱，每一页都是满的。

        - effort_ids: 菜谱至少关联其中一个难度
        - tag_ids: 菜谱至少关联其中一个标签 (OR 语义)
        - search: 在 title 与 ingredients 拼接后的文本上做大小写不敏感的子串匹配
        排序为 created_at 倒序，id 作为并列时的稳定次序。
        """
        stmt = self._base_stmt()

        if effort_ids:
            effort_subq = select(RecipeEffortLink.recipe_id).where(
                RecipeEffortLink.effort_id.in_(list(effort_ids))
            )
            stmt = stmt.where(self.model.id.in_(effort_subq))

        if tag_ids:
            tag_subq = select(RecipeTagLink.recipe_id).where(RecipeTagLink.tag_id.in_(list(tag_ids)))
            stmt = stmt.where(self.model.id.in_(tag_subq))

        if search:
            haystack = func.lower(
                func.coalesce(self.model.title, "") + func.coalesce(self.model.ingredients, "")
            )
            pattern = f"%{escape_like(search.lower())}%"
            stmt = stmt.where(haystack.like(pattern, escape="\\"))

        stmt = (
            stmt.order_by(desc(self.model.created_at), desc(self.model.id))
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        return await self._run_and_scalars(stmt, "list_discoverable")

    async def list_by_ids_ordered(self, ids: Sequence[UUID]) -> List[Recipe]:
        """按 created_at 倒序返回给定 id 中未删除的菜谱。"""
        if not ids:
            return []
        stmt = (
            self._base_stmt()
            .where(self.model.id.in_(list(ids)))
            .order_by(desc(self.model.created_at), desc(self.model.id))
        )
        return await self._run_and_scalars(stmt, "list_by_ids_ordered")

    async def get_any_by_id(self, recipe_id: UUID) -> Optional[Recipe]:
        """包含已软删除的菜谱，用于永久删除。"""
        stmt = select(Recipe).where(Recipe.id == recipe_id)
        return await self._run_and_scalar(stmt, "get_any_by_id")

    async def hard_delete(self, recipe_id: UUID) -> None:
        """
        物理删除一个菜谱及其所有从属数据 (图片行、关联、评论、收藏关系)。
        存储中的图片对象由调用方负责删除。
        """
        for stmt in (
            delete(RecipeImage).where(RecipeImage.recipe_id == recipe_id),
            delete(RecipeTagLink).where(RecipeTagLink.recipe_id == recipe_id),
            delete(RecipeEffortLink).where(RecipeEffortLink.recipe_id == recipe_id),
            delete(Comment).where(Comment.recipe_id == recipe_id),
            delete(CollectionRecipeLink).where(CollectionRecipeLink.recipe_id == recipe_id),
            delete(Recipe).where(Recipe.id == recipe_id),
        ):
            await self.db.execute(stmt)
        await self.db.flush()
