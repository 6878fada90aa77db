from typing import TypeVar, Generic, Optional, Type, List, Union, Dict, Any, Sequence
from uuid import UUID
from datetime import datetime, timezone

from pydantic import BaseModel
from sqlalchemy import asc, desc, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.logger import get_logger
from app.core.types.common import ModelType
from app.infra.db.repo_registrar import RepositoryRegistrar


CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

logger = get_logger(__name__)


def escape_like(value: str) -> str:
    """转义 LIKE 通配符，配合 escape="\\" 使用。"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class BaseRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType], RepositoryRegistrar):
    def __init__(self, db: AsyncSession, model: Type[ModelType], context: dict = None):
        self.db = db
        self.model = model
        self.context = context or {}
        self.logger = get_logger(self.__class__.__name__)

    # ==========================
    # 事务控制方法 (Transaction Control)
    # ==========================

    async def commit(self):
        """提交当前数据库会话中的所有更改。"""
        await self.db.commit()

    async def rollback(self):
        """回滚当前数据库会话中的所有更改。"""
        await self.db.rollback()

    async def refresh(self, obj: ModelType):
        """用数据库中的最新状态刷新一个ORM对象。"""
        await self.db.refresh(obj)

    async def flush(self):
        """将当前会话中的变更刷入数据库，但不提交事务。"""
        await self.db.flush()

    # ==========================
    # 数据创建方法 (Create)
    # ==========================

    async def create(self, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        创建一个新的对象实例，并将其添加到会话中。
        """
        create_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        db_obj = self.model(**create_data)
        self.db.add(db_obj)
        await self.db.flush()
        await self.db.refresh(db_obj)
        return db_obj

    # ==========================
    # 数据更新方法 (Update)
    # ==========================

    async def update(self, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        在内存中更新一个ORM对象的属性 (Read-Modify-Write模式)。
        """
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(db_obj, field, value)

        if hasattr(db_obj, "updated_at"):
            setattr(db_obj, "updated_at", datetime.now(timezone.utc))

        self.db.add(db_obj)
        await self.db.flush()
        await self.db.refresh(db_obj)
        return db_obj

    # ==========================
    # 数据删除方法 (Delete)
    # ==========================

    async def delete(self, db_obj: ModelType) -> None:
        """
        从数据库中物理删除一个对象。
        """
        await self.db.delete(db_obj)
        await self.db.flush()

    async def soft_delete(self, db_obj: ModelType) -> ModelType:
        """
        软删除一个对象 (设置 is_deleted = True)。
        """
        now = datetime.now(timezone.utc)
        if hasattr(db_obj, "updated_at"):
            setattr(db_obj, "updated_at", now)
        if hasattr(db_obj, "is_deleted"):
            setattr(db_obj, "is_deleted", True)
        if hasattr(db_obj, "deleted_at"):
            setattr(db_obj, "deleted_at", now)

        self.db.add(db_obj)
        await self.db.flush()
        await self.db.refresh(db_obj)
        return db_obj

    # ==========================
    # 数据查询方法 (Query)
    # ==========================

    def _base_stmt(self):
        """
        构建基础查询语句，默认过滤掉软删除的记录 (如果模型支持)。
        """
        stmt = select(self.model)
        if hasattr(self.model, 'is_deleted'):
            stmt = stmt.where(getattr(self.model, 'is_deleted') == False)  # noqa: E712
        return stmt

    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        stmt = self._base_stmt().where(self.model.id == id)
        return await self._run_and_scalar(stmt, "get_by_id")

    async def get_by_ids(self, ids: Sequence[UUID]) -> List[ModelType]:
        """
        根据一个ID列表，批量获取对象，避免在循环中进行多次数据库调用。
        """
        if not ids:
            return []

        stmt = self._base_stmt().where(self.model.id.in_(list(ids)))
        return await self._run_and_scalars(stmt, "get_by_ids")

    def apply_ordering(self, stmt, order_by: List[str]):
        if not order_by:
            return stmt.order_by(desc(self.model.created_at))  # 默认排序

        for sort_field in order_by:
            order_func = asc
            if sort_field.startswith('-'):
                sort_field = sort_field[1:]
                order_func = desc

            column = getattr(self.model, sort_field, None)
            if column is not None:
                stmt = stmt.order_by(order_func(column))
        return stmt

    async def find_by_field(self, value: Any, field_name: str, case_insensitive: bool = False) -> Optional[ModelType]:
        """通过指定字段查找单个对象"""
        column = getattr(self.model, field_name)
        stmt = self._base_stmt()

        if case_insensitive:
            stmt = stmt.where(func.lower(column) == str(value).lower())
        else:
            stmt = stmt.where(column == value)

        return await self._run_and_scalar(stmt.limit(1), f"find_by_{field_name}")

    async def list_all(self, order_by: Optional[List[str]] = None) -> List[ModelType]:
        stmt = self.apply_ordering(self._base_stmt(), order_by or [])
        return await self._run_and_scalars(stmt, "list_all")

    async def count(self) -> int:
        stmt = select(func.count()).select_from(self._base_stmt().subquery())
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def _run_and_scalar(self, stmt, method: str):
        try:
            result = await self.db.execute(stmt)
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"[{self.__class__.__name__}.{method}] Failed: {e}")
            raise

    async def _run_and_scalars(self, stmt, method: str):
        try:
            result = await self.db.execute(stmt)
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"[{self.__class__.__name__}.{method}] Failed: {e}")
            raise

    async def _run_and_rows(self, stmt, method: str):
        try:
            result = await self.db.execute(stmt)
            return list(result.all())
        except Exception as e:
            logger.error(f"[{self.__class__.__name__}.{method}] Failed: {e}")
            raise
