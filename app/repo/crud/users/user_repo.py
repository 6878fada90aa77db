# app/repo/crud/users/user_repo.py

from typing import List, Optional, Dict, Any, Tuple

from sqlalchemy import select, func, or_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.users.user import User
from app.repo.crud.common.base_repo import BaseRepository, escape_like
from app.schemas.users.user_schemas import UserProfileUpdate


class UserRepository(BaseRepository[User, UserProfileUpdate, UserProfileUpdate]):
    """用户由外部身份服务注册，这里负责资料查询与修改。"""
    def __init__(self, db: AsyncSession, context: Optional[Dict[str, Any]] = None):
        super().__init__(db=db, model=User, context=context)

    async def get_paged_users(
            self,
            *,
            page: int,
            per_page: int,
            search: Optional[str] = None,
    ) -> Tuple[List[User], int]:
        """按注册时间倒序分页；search 对用户名或邮箱做大小写不敏感的子串匹配。"""
        stmt = self._base_stmt()
        if search:
            pattern = f"%{escape_like(search.lower())}%"
            stmt = stmt.where(
                or_(
                    func.lower(self.model.username).like(pattern, escape="\\"),
                    func.lower(func.coalesce(self.model.email, "")).like(pattern, escape="\\"),
                )
            )

        total = await self._run_and_scalar(
            select(func.count()).select_from(stmt.subquery()), "get_paged_users.count"
        )
        stmt = (
            stmt.order_by(desc(self.model.created_at), desc(self.model.id))
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        items = await self._run_and_scalars(stmt, "get_paged_users")
        return items, total or 0

    async def find_by_username(self, username: str) -> Optional[User]:
        return await self.find_by_field(username, "username", case_insensitive=True)
