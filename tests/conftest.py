import os

# 配置在导入 app 时加载，环境变量必须先设置
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-recipes-0123456789")
os.environ.setdefault("STORAGE_ENDPOINT", "storage.test")
os.environ.setdefault("STORAGE_REGION", "us-east-1")
os.environ.setdefault("STORAGE_ACCESS_KEY", "test-access")
os.environ.setdefault("STORAGE_SECRET_KEY", "test-secret")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import app.models  # noqa: F401
from app.infra.db.repository_factory_auto import RepositoryFactory
from app.services.file.file_service import FileService
from tests.helpers import FakeStorageClient, FakeStorageFactory, Seeder


@pytest.fixture
def storage_client() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture
def file_service(storage_client) -> FileService:
    return FileService(factory=FakeStorageFactory(storage_client))


@pytest_asyncio.fixture
async def engine():
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as db:
        yield db


@pytest.fixture
def factory(session) -> RepositoryFactory:
    return RepositoryFactory(session, context={"user_id": "test"})


@pytest.fixture
def seed(session) -> Seeder:
    return Seeder(session)
