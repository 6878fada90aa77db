# app/infra/db/repository_factory_auto.py
from typing import Optional, Type, TypeVar, AsyncGenerator, Dict
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from app.repo.crud.common.base_repo import BaseRepository
from app.core.request_scope import get_request_scope

# =====================
# 类型定义
# =====================
RepoType = TypeVar("RepoType", bound=BaseRepository)


# =====================
# 自定义异常
# =====================
class RepositoryNotFoundError(Exception):
    pass


# =====================
# Repository Factory
# =====================
class RepositoryFactory:
    """
    RepositoryFactory 负责管理所有 Repository 的实例化和缓存，
    并封装 Session 的事务管理功能。同一个工厂内的所有 Repository 共享一个 Session。
    """

    def __init__(
        self,
        db: AsyncSession,
        *,
        user_id: Optional[str] = None,
        context: Optional[dict] = None
    ):
        self._db = db
        if context:
            self.context = context
        elif user_id:
            self.context = {"user_id": user_id}
        else:
            self.context = get_request_scope()
        self._registry: Dict[str, BaseRepository] = {}

    # ==========
    # 通过名称获取 Repository
    # ==========
    def get_repo(self, name: str) -> BaseRepository:
        name = name.lower()
        if name not in self._registry:
            repo_cls = BaseRepository.registry.get(name)
            if not repo_cls:
                raise RepositoryNotFoundError(f"Repository '{name}' not registered.")
            self._registry[name] = repo_cls(self._db, context=self.context)
        return self._registry[name]

    # ==========
    # 通过类型获取 Repository
    # ==========
    def get_repo_by_type(self, repo_type: Type[RepoType]) -> RepoType:
        for repo in self._registry.values():
            if isinstance(repo, repo_type):
                return repo

        # 如果未加载，则动态实例化并缓存
        for cls in BaseRepository.registry.values():
            if cls is not BaseRepository and issubclass(cls, repo_type):
                instance = cls(self._db, context=self.context)
                key = cls.__name__.replace("Repository", "").lower()
                self._registry[key] = instance
                return instance

        raise RepositoryNotFoundError(f"Repository of type '{repo_type.__name__}' not found.")

    # ==========
    # Session 操作封装
    # ==========
    async def commit(self): await self._db.commit()
    async def rollback(self): await self._db.rollback()
    async def flush(self): await self._db.flush()
    def get_session(self) -> AsyncSession: return self._db

    # ==========
    # 事务上下文管理器
    # ==========
    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[None, None]:
        try:
            yield
            await self.commit()
        except Exception:
            await self.rollback()
            raise
