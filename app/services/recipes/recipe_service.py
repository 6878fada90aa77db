# app/services/recipes/recipe_service.py
from typing import List, Optional, Sequence
from uuid import UUID

from app.core.exceptions import NotFoundException, PermissionDeniedException, UserBannedException
from app.infra.db.repository_factory_auto import RepositoryFactory
from app.models.recipes.recipe import Recipe, RecipeImage
from app.repo.crud.recipes.effort_repo import EffortRepository
from app.repo.crud.recipes.recipe_image_repo import RecipeImageRepository
from app.repo.crud.recipes.recipe_repo import RecipeRepository
from app.repo.crud.recipes.tag_repo import TagRepository
from app.repo.crud.users.user_repo import UserRepository
from app.schemas.recipes.recipe_schemas import (
    NamedRef,
    RecipeCreate,
    RecipeDetail,
    RecipeImageRead,
    RecipeRead,
    RecipeUpdate,
)
from app.schemas.users.user_context import UserContext
from app.services._base_service import BaseService
from app.services.file.file_service import FileService

# RecipeUpdate 中直接写入 recipe 表的字段
_SCALAR_FIELDS = ("title", "ingredients", "instructions", "cook_time_mins", "external_link")


class RecipeService(BaseService):
    def __init__(self, factory: RepositoryFactory, file_service: FileService):
        super().__init__()
        self.factory = factory
        self.file_service = file_service
        # 从工厂获取所有需要的 Repository 实例
        self.recipe_repo: RecipeRepository = factory.get_repo_by_type(RecipeRepository)
        self.tag_repo: TagRepository = factory.get_repo_by_type(TagRepository)
        self.effort_repo: EffortRepository = factory.get_repo_by_type(EffortRepository)
        self.image_repo: RecipeImageRepository = factory.get_repo_by_type(RecipeImageRepository)
        self.user_repo: UserRepository = factory.get_repo_by_type(UserRepository)

    @property
    def _image_profile(self) -> str:
        return self.settings.discovery.image_profile

    # ==========================
    # 查询
    # ==========================

    async def get_recipe_or_404(self, recipe_id: UUID) -> Recipe:
        recipe = await self.recipe_repo.get_by_id(recipe_id)
        if not recipe:
            raise NotFoundException("菜谱不存在")
        return recipe

    async def get_recipe_detail(self, recipe_id: UUID) -> RecipeDetail:
        """
        菜谱详情：作者用户名、标签、难度，以及按 sort_order 排列的全部图片。
        单张图片地址解析失败时，该图片不出现在结果中。
        """
        recipe = await self.get_recipe_or_404(recipe_id)

        author_username = None
        if recipe.user_id:
            author = await self.user_repo.get_by_id(recipe.user_id)
            author_username = author.username if author else None

        tag_links = await self.tag_repo.list_links([recipe.id])
        tags = await self.tag_repo.get_by_ids([link.tag_id for link in tag_links])
        effort_links = await self.effort_repo.list_links([recipe.id])
        efforts = await self.effort_repo.get_by_ids([link.effort_id for link in effort_links])

        images = await self.image_repo.list_for_recipes([recipe.id])
        urls = await self.file_service.resolve_urls(
            {image.id: image.image_path for image in images}, self._image_profile
        )

        return RecipeDetail(
            **RecipeRead.model_validate(recipe).model_dump(),
            author_username=author_username,
            tags=sorted((NamedRef.model_validate(t) for t in tags), key=lambda ref: ref.name.lower()),
            efforts=sorted((NamedRef.model_validate(e) for e in efforts), key=lambda ref: ref.name.lower()),
            images=[
                RecipeImageRead(id=image.id, image_path=image.image_path, sort_order=image.sort_order,
                                url=urls[image.id])
                for image in images
                if urls.get(image.id)
            ],
        )

    # ==========================
    # 创建 / 更新
    # ==========================

    async def _validate_refs(self, tag_ids: Optional[Sequence[UUID]], effort_ids: Optional[Sequence[UUID]]):
        if tag_ids and not await self.tag_repo.are_ids_valid(tag_ids):
            raise NotFoundException("一个或多个指定的标签ID不存在")
        if effort_ids and not await self.effort_repo.are_ids_valid(effort_ids):
            raise NotFoundException("一个或多个指定的难度ID不存在")

    async def create_recipe(self, user: UserContext, recipe_in: RecipeCreate) -> RecipeDetail:
        """【事务性】创建菜谱及其标签、难度关联与图片记录。"""
        if user.is_banned:
            raise UserBannedException()
        await self._validate_refs(recipe_in.tag_ids, recipe_in.effort_ids)

        recipe_data = recipe_in.model_dump(include=set(_SCALAR_FIELDS))
        recipe_data["user_id"] = user.id
        try:
            recipe = await self.recipe_repo.create(recipe_data)
            if recipe_in.tag_ids:
                await self.tag_repo.replace_links_for_recipe(recipe.id, recipe_in.tag_ids)
            if recipe_in.effort_ids:
                await self.effort_repo.replace_links_for_recipe(recipe.id, recipe_in.effort_ids)
            if recipe_in.image_paths:
                await self.image_repo.add_images(recipe.id, recipe_in.image_paths, start_order=0)
            await self.factory.commit()
        except Exception as e:
            self.logger.error(f"创建菜谱失败: {e}")
            await self.factory.rollback()
            raise e

        self.logger.info(f"📝 用户 {user.id} 创建了菜谱 {recipe.id}")
        return await self.get_recipe_detail(recipe.id)

    async def update_recipe(self, user: UserContext, recipe_id: UUID, recipe_in: RecipeUpdate) -> RecipeDetail:
        """
        【事务性】更新菜谱。只有作者本人可以修改。
        tag_ids / effort_ids 传入时整体替换；新增图片排在已有图片之后；
        被移除图片的存储对象在事务提交后再删除。
        """
        recipe = await self.get_recipe_or_404(recipe_id)
        if recipe.user_id != user.id:
            raise PermissionDeniedException("只能修改自己的菜谱")
        await self._validate_refs(recipe_in.tag_ids, recipe_in.effort_ids)

        images_to_remove: List[RecipeImage] = await self.image_repo.get_for_recipe_by_ids(
            recipe_id, recipe_in.image_ids_to_remove
        )
        if len(images_to_remove) != len(set(recipe_in.image_ids_to_remove)):
            raise NotFoundException("一个或多个要删除的图片不属于该菜谱")

        update_data = recipe_in.model_dump(include=set(_SCALAR_FIELDS), exclude_unset=True)
        try:
            if update_data:
                await self.recipe_repo.update(recipe, update_data)
            if recipe_in.tag_ids is not None:
                await self.tag_repo.replace_links_for_recipe(recipe_id, recipe_in.tag_ids)
            if recipe_in.effort_ids is not None:
                await self.effort_repo.replace_links_for_recipe(recipe_id, recipe_in.effort_ids)
            if images_to_remove:
                await self.image_repo.delete_by_ids([image.id for image in images_to_remove])
                await self.factory.flush()
            if recipe_in.image_paths_to_add:
                start = await self.image_repo.next_sort_order(recipe_id)
                await self.image_repo.add_images(recipe_id, recipe_in.image_paths_to_add, start_order=start)
            await self.factory.commit()
        except Exception as e:
            self.logger.error(f"更新菜谱 {recipe_id} 失败: {e}")
            await self.factory.rollback()
            raise e

        if images_to_remove:
            await self.file_service.delete_files(
                [image.image_path for image in images_to_remove], self._image_profile
            )
        return await self.get_recipe_detail(recipe_id)

    # ==========================
    # 删除
    # ==========================

    async def soft_delete_recipe(self, user: UserContext, recipe_id: UUID) -> None:
        """软删除：菜谱从发现页与详情中消失，数据保留。"""
        recipe = await self.get_recipe_or_404(recipe_id)
        if recipe.user_id != user.id:
            raise PermissionDeniedException("只能删除自己的菜谱")
        try:
            await self.recipe_repo.soft_delete(recipe)
            await self.factory.commit()
        except Exception as e:
            self.logger.error(f"删除菜谱 {recipe_id} 失败: {e}")
            await self.factory.rollback()
            raise e
        self.logger.info(f"🗑️ 菜谱 {recipe_id} 已移入回收站")

    async def hard_delete_recipe(self, user: UserContext, recipe_id: UUID) -> List[str]:
        """
        永久删除菜谱 (包括已软删除的)。先删除存储中的图片对象，再删除所有数据库行。
        存储删除失败只记录日志，不阻止数据库删除；返回删除失败的对象 key。
        """
        recipe = await self.recipe_repo.get_any_by_id(recipe_id)
        if not recipe:
            raise NotFoundException("菜谱不存在")
        if recipe.user_id != user.id:
            raise PermissionDeniedException("只能删除自己的菜谱")

        images = await self.image_repo.list_for_recipes([recipe_id])
        failed: List[str] = []
        if images:
            failed = await self.file_service.delete_files(
                [image.image_path for image in images], self._image_profile
            )

        try:
            await self.recipe_repo.hard_delete(recipe_id)
            await self.factory.commit()
        except Exception as e:
            self.logger.error(f"永久删除菜谱 {recipe_id} 失败: {e}")
            await self.factory.rollback()
            raise e

        self.logger.info(f"🔥 菜谱 {recipe_id} 已永久删除，{len(images)} 张图片，{len(failed)} 个对象删除失败")
        return failed
