# app/services/collections/collection_service.py
from typing import List, Optional
from uuid import UUID

from app.core.exceptions import (
    AlreadyExistsException,
    BusinessRuleException,
    NotFoundException,
    PermissionDeniedException,
)
from app.infra.db.repository_factory_auto import RepositoryFactory
from app.models.collections.collection import Collection
from app.repo.crud.collections.collection_repo import CollectionRepository
from app.repo.crud.recipes.recipe_repo import RecipeRepository
from app.schemas.collections.collection_schemas import (
    CollectionCreate,
    CollectionDetail,
    CollectionRead,
    CollectionUpdate,
    MembershipRead,
)
from app.schemas.users.user_context import UserContext
from app.services._base_service import BaseService
from app.services.recipes.recipe_discovery_service import RecipeDiscoveryService

FAVORITES_NAME = "Favorites"


class CollectionService(BaseService):
    """
    用户收藏夹。每个用户有一个私有的 Favorites 收藏夹，首次使用时自动创建，
    它不出现在普通收藏夹列表中，通过 favorites 接口单独操作。
    """

    def __init__(self, factory: RepositoryFactory, discovery_service: RecipeDiscoveryService):
        super().__init__()
        self.factory = factory
        self.discovery_service = discovery_service
        self.collection_repo: CollectionRepository = factory.get_repo_by_type(CollectionRepository)
        self.recipe_repo: RecipeRepository = factory.get_repo_by_type(RecipeRepository)

    async def _get_owned(self, user: UserContext, collection_id: UUID) -> Collection:
        collection = await self.collection_repo.get_by_id(collection_id)
        if not collection:
            raise NotFoundException("收藏夹不存在")
        if collection.user_id != user.id:
            raise PermissionDeniedException("只能操作自己的收藏夹")
        return collection

    async def _ensure_recipe(self, recipe_id: UUID) -> None:
        if not await self.recipe_repo.get_by_id(recipe_id):
            raise NotFoundException("菜谱不存在")

    async def list_my_collections(self, user: UserContext) -> List[Collection]:
        return await self.collection_repo.list_for_user(user.id, exclude_name=FAVORITES_NAME)

    async def create_collection(self, user: UserContext, collection_in: CollectionCreate) -> Collection:
        """【事务性】同一用户下收藏夹名称唯一，Favorites 为保留名称。"""
        if collection_in.name == FAVORITES_NAME or await self.collection_repo.get_by_user_and_name(
            user.id, collection_in.name
        ):
            raise AlreadyExistsException("已存在同名收藏夹")

        data = collection_in.model_dump()
        data["user_id"] = user.id
        try:
            collection = await self.collection_repo.create(data)
            await self.factory.commit()
            return collection
        except Exception as e:
            self.logger.error(f"创建收藏夹失败: {e}")
            await self.factory.rollback()
            raise e

    async def get_collection(self, user: Optional[UserContext], collection_id: UUID) -> CollectionDetail:
        """私有收藏夹只对所有者可见，其它人看到的是不存在。"""
        collection = await self.collection_repo.get_by_id(collection_id)
        if not collection or (not collection.is_public and (user is None or user.id != collection.user_id)):
            raise NotFoundException("收藏夹不存在")

        recipe_ids = await self.collection_repo.list_recipe_ids(collection_id)
        recipes = await self.recipe_repo.list_by_ids_ordered(recipe_ids)
        summaries = await self.discovery_service.build_summaries(recipes)
        return CollectionDetail(**CollectionRead.model_validate(collection).model_dump(), recipes=summaries)

    async def update_collection(
            self, user: UserContext, collection_id: UUID, collection_in: CollectionUpdate
    ) -> Collection:
        """【事务性】只有所有者可以修改；Favorites 收藏夹不能修改，新名称不能与自己的其它收藏夹重复。"""
        collection = await self._get_owned(user, collection_id)
        if collection.name == FAVORITES_NAME:
            raise BusinessRuleException("Favorites 收藏夹不能修改")

        update_data = collection_in.model_dump(exclude_unset=True)
        new_name = update_data.get("name")
        if new_name and new_name != collection.name:
            existing = await self.collection_repo.get_by_user_and_name(user.id, new_name)
            if new_name == FAVORITES_NAME or (existing and existing.id != collection.id):
                raise AlreadyExistsException("已存在同名收藏夹")

        try:
            collection = await self.collection_repo.update(collection, update_data)
            await self.factory.commit()
            return collection
        except Exception as e:
            self.logger.error(f"更新收藏夹 {collection_id} 失败: {e}")
            await self.factory.rollback()
            raise e

    async def delete_collection(self, user: UserContext, collection_id: UUID) -> None:
        collection = await self._get_owned(user, collection_id)
        try:
            await self.collection_repo.delete_with_links(collection.id)
            await self.factory.commit()
        except Exception as e:
            self.logger.error(f"删除收藏夹 {collection_id} 失败: {e}")
            await self.factory.rollback()
            raise e

    async def toggle_recipe_in_collection(
            self, user: UserContext, collection_id: UUID, recipe_id: UUID
    ) -> MembershipRead:
        """菜谱在收藏夹中则移除，否则加入；返回切换后的状态。"""
        collection = await self._get_owned(user, collection_id)
        await self._ensure_recipe(recipe_id)
        return await self._toggle(collection, recipe_id)

    # --- 收藏 (Favorites) ---

    async def _get_or_create_favorites(self, user: UserContext) -> Collection:
        favorites = await self.collection_repo.get_by_user_and_name(user.id, FAVORITES_NAME)
        if favorites:
            return favorites
        self.logger.info(f"⭐ 为用户 {user.id} 创建 Favorites 收藏夹")
        return await self.collection_repo.create(
            {"user_id": user.id, "name": FAVORITES_NAME, "is_public": False}
        )

    async def is_favorite(self, user: UserContext, recipe_id: UUID) -> bool:
        favorites = await self.collection_repo.get_by_user_and_name(user.id, FAVORITES_NAME)
        if not favorites:
            return False
        return await self.collection_repo.has_recipe(favorites.id, recipe_id)

    async def toggle_favorite(self, user: UserContext, recipe_id: UUID) -> MembershipRead:
        await self._ensure_recipe(recipe_id)
        try:
            favorites = await self._get_or_create_favorites(user)
        except Exception as e:
            self.logger.error(f"创建 Favorites 收藏夹失败: {e}")
            await self.factory.rollback()
            raise e
        return await self._toggle(favorites, recipe_id)

    async def _toggle(self, collection: Collection, recipe_id: UUID) -> MembershipRead:
        try:
            if await self.collection_repo.has_recipe(collection.id, recipe_id):
                await self.collection_repo.remove_recipe(collection.id, recipe_id)
                is_member = False
            else:
                await self.collection_repo.add_recipe(collection.id, recipe_id)
                is_member = True
            await self.factory.commit()
        except Exception as e:
            self.logger.error(f"切换收藏状态失败 (collection={collection.id}, recipe={recipe_id}): {e}")
            await self.factory.rollback()
            raise e
        return MembershipRead(recipe_id=recipe_id, collection_id=collection.id, is_member=is_member)
