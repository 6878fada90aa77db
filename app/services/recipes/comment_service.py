# app/services/recipes/comment_service.py
from typing import List
from uuid import UUID

from app.core.exceptions import NotFoundException, PermissionDeniedException, UserBannedException
from app.infra.db.repository_factory_auto import RepositoryFactory
from app.repo.crud.recipes.comment_repo import CommentRepository
from app.repo.crud.recipes.recipe_repo import RecipeRepository
from app.repo.crud.users.user_repo import UserRepository
from app.schemas.recipes.comment_schemas import CommentCreate, CommentRead
from app.schemas.users.user_context import UserContext
from app.services._base_service import BaseService
from app.services.file.file_service import FileService

AVATAR_PROFILE = "profile_pictures"


class CommentService(BaseService):
    def __init__(self, factory: RepositoryFactory, file_service: FileService):
        super().__init__()
        self.factory = factory
        self.file_service = file_service
        self.comment_repo: CommentRepository = factory.get_repo_by_type(CommentRepository)
        self.recipe_repo: RecipeRepository = factory.get_repo_by_type(RecipeRepository)
        self.user_repo: UserRepository = factory.get_repo_by_type(UserRepository)

    async def _ensure_recipe(self, recipe_id: UUID) -> None:
        if not await self.recipe_repo.get_by_id(recipe_id):
            raise NotFoundException("菜谱不存在")

    async def list_comments(self, recipe_id: UUID) -> List[CommentRead]:
        """
        菜谱下的评论，最新的在前。
        附带评论者的用户名与头像地址；头像解析失败时为空。
        """
        await self._ensure_recipe(recipe_id)
        comments = await self.comment_repo.list_for_recipe(recipe_id)
        if not comments:
            return []

        authors = {u.id: u for u in await self.user_repo.get_by_ids({c.user_id for c in comments})}
        avatar_urls = await self.file_service.resolve_urls(
            {uid: user.profile_picture for uid, user in authors.items() if user.profile_picture},
            AVATAR_PROFILE,
        )

        result = []
        for comment in comments:
            author = authors.get(comment.user_id)
            read = CommentRead.model_validate(comment)
            read.author_username = author.username if author else None
            read.author_avatar_url = avatar_urls.get(comment.user_id)
            result.append(read)
        return result

    async def add_comment(self, user: UserContext, recipe_id: UUID, comment_in: CommentCreate) -> CommentRead:
        if user.is_banned:
            raise UserBannedException()
        await self._ensure_recipe(recipe_id)

        try:
            comment = await self.comment_repo.create(
                {"user_id": user.id, "recipe_id": recipe_id, "body": comment_in.body, "rating": comment_in.rating}
            )
            await self.factory.commit()
        except Exception as e:
            self.logger.error(f"发表评论失败 (recipe={recipe_id}): {e}")
            await self.factory.rollback()
            raise e

        read = CommentRead.model_validate(comment)
        read.author_username = user.username
        return read

    async def delete_comment(self, user: UserContext, comment_id: UUID) -> None:
        """只能删除自己的评论。"""
        comment = await self.comment_repo.get_by_id(comment_id)
        if not comment:
            raise NotFoundException("评论不存在")
        if comment.user_id != user.id:
            raise PermissionDeniedException("只能删除自己的评论")

        try:
            await self.comment_repo.delete(comment)
            await self.factory.commit()
        except Exception as e:
            self.logger.error(f"删除评论 {comment_id} 失败: {e}")
            await self.factory.rollback()
            raise e
