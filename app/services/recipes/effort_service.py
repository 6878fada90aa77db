# app/services/recipes/effort_service.py

from typing import List
from uuid import UUID

from app.core.exceptions import NotFoundException, AlreadyExistsException
from app.infra.db.repository_factory_auto import RepositoryFactory
from app.models.recipes.recipe import Effort
from app.repo.crud.recipes.effort_repo import EffortRepository
from app.schemas.recipes.effort_schemas import EffortCreate, EffortUpdate
from app.services._base_service import BaseService


class EffortService(BaseService):
    def __init__(self, factory: RepositoryFactory):
        super().__init__()
        self.factory = factory
        self.effort_repo: EffortRepository = factory.get_repo_by_type(EffortRepository)

    async def get_effort_by_id(self, effort_id: UUID) -> Effort:
        effort = await self.effort_repo.get_by_id(effort_id)
        if not effort:
            raise NotFoundException("难度不存在")
        return effort

    async def list_efforts(self) -> List[Effort]:
        """全部难度，按名称排序。"""
        return await self.effort_repo.list_all(order_by=["name"])

    async def create_effort(self, effort_in: EffortCreate) -> Effort:
        """【事务性】创建新难度，并进行重名校验。"""
        # 业务规则：难度名不能重复（大小写不敏感）
        if await self.effort_repo.find_by_name(effort_in.name):
            raise AlreadyExistsException("已存在同名难度")

        try:
            new_effort = await self.effort_repo.create(effort_in)
            await self.factory.commit()
        except Exception as e:
            self.logger.error(f"创建难度失败: {e}")
            await self.factory.rollback()
            raise e
        self.logger.info(f"⏱️ 新建难度 {new_effort.name}")
        return new_effort

    async def update_effort(self, effort_id: UUID, effort_in: EffortUpdate) -> Effort:
        """【事务性】重命名难度，新名称不能与其它难度冲突。"""
        effort = await self.get_effort_by_id(effort_id)
        existing_effort = await self.effort_repo.find_by_name(effort_in.name)
        if existing_effort and existing_effort.id != effort_id:
            raise AlreadyExistsException("更新失败，已存在同名难度")

        try:
            updated_effort = await self.effort_repo.update(effort, {"name": effort_in.name})
            await self.factory.commit()
            return updated_effort
        except Exception as e:
            self.logger.error(f"更新难度 {effort_id} 失败: {e}")
            await self.factory.rollback()
            raise e

    async def delete_effort(self, effort_id: UUID) -> None:
        """【事务性】删除难度，先移除它与菜谱的全部关联。"""
        effort = await self.get_effort_by_id(effort_id)
        try:
            removed = await self.effort_repo.delete_links_for_effort(effort_id)
            await self.effort_repo.delete(effort)
            await self.factory.commit()
        except Exception as e:
            self.logger.error(f"删除难度 {effort_id} 失败: {e}")
            await self.factory.rollback()
            raise e
        self.logger.info(f"🗑️ 删除难度 {effort.name}，解除 {removed} 个菜谱关联")
