from typing import AsyncGenerator

from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.config.settings import settings
import app.models  # noqa: F401  注册所有表到 SQLModel.metadata


DATABASE_URL = settings.database.url

# 初始化数据库引擎和 Session
engine = create_async_engine(DATABASE_URL, echo=settings.database.echo)
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    提供一个数据库会话，并采用明确的事务控制。
    路由成功执行则提交，出现任何异常则回滚并重新抛出。
    """
    session = AsyncSessionLocal()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


# 初始化数据库（启动时调用）
async def create_db_and_tables():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
