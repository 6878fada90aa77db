# app/services/recipes/tag_service.py

from typing import List
from uuid import UUID

from app.core.exceptions import NotFoundException, AlreadyExistsException
from app.infra.db.repository_factory_auto import RepositoryFactory
from app.models.recipes.recipe import Tag
from app.repo.crud.recipes.tag_repo import TagRepository
from app.schemas.recipes.tag_schemas import TagCreate, TagUpdate
from app.services._base_service import BaseService


class TagService(BaseService):
    def __init__(self, factory: RepositoryFactory):
        super().__init__()
        self.factory = factory
        self.tag_repo: TagRepository = factory.get_repo_by_type(TagRepository)

    async def get_tag_by_id(self, tag_id: UUID) -> Tag:
        tag = await self.tag_repo.get_by_id(tag_id)
        if not tag:
            raise NotFoundException("标签不存在")
        return tag

    async def list_tags(self) -> List[Tag]:
        """全部标签，按名称排序。"""
        return await self.tag_repo.list_all(order_by=["name"])

    async def create_tag(self, tag_in: TagCreate) -> Tag:
        """【事务性】创建新标签，并进行重名校验。"""
        # 业务规则：标签名不能重复（大小写不敏感）
        if await self.tag_repo.find_by_name(tag_in.name):
            raise AlreadyExistsException("已存在同名标签")

        try:
            new_tag = await self.tag_repo.create(tag_in)
            await self.factory.commit()
        except Exception as e:
            self.logger.error(f"创建标签失败: {e}")
            await self.factory.rollback()
            raise e
        self.logger.info(f"🏷️ 新建标签 {new_tag.name}")
        return new_tag

    async def update_tag(self, tag_id: UUID, tag_in: TagUpdate) -> Tag:
        """【事务性】重命名标签，新名称不能与其它标签冲突。"""
        tag = await self.get_tag_by_id(tag_id)
        existing_tag = await self.tag_repo.find_by_name(tag_in.name)
        if existing_tag and existing_tag.id != tag_id:
            raise AlreadyExistsException("更新失败，已存在同名标签")

        try:
            updated_tag = await self.tag_repo.update(tag, {"name": tag_in.name})
            await self.factory.commit()
            return updated_tag
        except Exception as e:
            self.logger.error(f"更新标签 {tag_id} 失败: {e}")
            await self.factory.rollback()
            raise e

    async def delete_tag(self, tag_id: UUID) -> None:
        """【事务性】删除标签，先移除它与菜谱的全部关联。"""
        tag = await self.get_tag_by_id(tag_id)
        try:
            removed = await self.tag_repo.delete_links_for_tag(tag_id)
            await self.tag_repo.delete(tag)
            await self.factory.commit()
        except Exception as e:
            self.logger.error(f"删除标签 {tag_id} 失败: {e}")
            await self.factory.rollback()
            raise e
        self.logger.info(f"🗑️ 删除标签 {tag.name}，解除 {removed} 个菜谱关联")
