from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logger import logger
from app.infra.db.session import get_session
from app.infra.db.repository_factory_auto import RepositoryFactory
from app.core.request_scope import get_request_scope


def get_repository_factory(
        session: AsyncSession = Depends(get_session),
        context: dict = Depends(get_request_scope),
) -> RepositoryFactory:
    """
    专为 FastAPI API 请求设计的依赖注入函数。
    它从请求上下文中自动获取 session 和 context。
    """
    logger.debug(f"[get repo factory context]: {context}")
    return RepositoryFactory(
        db=session,
        user_id=context.get("user_id"),
        context=context,
    )
