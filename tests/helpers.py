# 测试共用的替身与数据构造工具
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, Optional

import jwt
from botocore.exceptions import ClientError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.config_settings.config_schema import StorageProfileConfig
from app.config.settings import settings
from app.infra.storage.storage_interface import StorageClientInterface
from app.models.collections.collection import Collection
from app.models.recipes.recipe import Effort, Recipe, RecipeEffortLink, RecipeImage, RecipeTagLink, Tag
from app.models.users.user import User
from app.schemas.users.user_context import UserContext

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ==========================
# 存储替身
# ==========================

class FakeStorageClient(StorageClientInterface):
    """内存中的存储客户端，fail_on 中的对象 key 在签名和删除时都会失败。"""

    def __init__(self, fail_on: Iterable[str] = ()):
        self.fail_on = set(fail_on)
        self.removed = []
        self.signed = []

    def _maybe_fail(self, object_name: str, operation: str):
        if object_name in self.fail_on:
            raise ClientError({"Error": {"Code": "NoSuchKey", "Message": "missing"}}, operation)

    def remove_object(self, object_name: str):
        self._maybe_fail(object_name, "DeleteObject")
        self.removed.append(object_name)

    def get_presigned_url(self, client_method: str, object_name: str, expires_in: int) -> str:
        self._maybe_fail(object_name, "GetObject")
        self.signed.append(object_name)
        return f"https://signed.test/{object_name}?expires={expires_in}"

    def build_final_url(self, object_name: str) -> str:
        return f"https://public.test/{object_name}"

    def stat_object(self, object_name: str):
        self._maybe_fail(object_name, "HeadObject")
        return {"Key": object_name}


class FakeStorageFactory:
    def __init__(self, client: FakeStorageClient, visibility: str = "private"):
        self.client = client
        self.visibility = visibility

    def get_client_by_profile(self, profile_name: str) -> FakeStorageClient:
        self.get_profile_config(profile_name)
        return self.client

    def get_profile_config(self, profile_name: str) -> StorageProfileConfig:
        if profile_name not in settings.storage_profiles:
            raise ValueError(f"Storage profile '{profile_name}' is not defined in the configuration.")
        return StorageProfileConfig(client="fake", visibility=self.visibility, signed_url_expires_in=3600)


# ==========================
# 数据构造
# ==========================

class Seeder:
    """按需插入测试数据；created_at 递增，后插入的菜谱排在发现页前面。"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self._tick = 0

    def _next_time(self) -> datetime:
        self._tick += 1
        return BASE_TIME + timedelta(minutes=self._tick)

    async def user(self, username: str = "cook", **kwargs) -> User:
        user = User(username=username, email=f"{username}@example.com", **kwargs)
        self.db.add(user)
        await self.db.commit()
        return user

    async def tag(self, name: str) -> Tag:
        tag = Tag(name=name)
        self.db.add(tag)
        await self.db.commit()
        return tag

    async def effort(self, name: str) -> Effort:
        effort = Effort(name=name)
        self.db.add(effort)
        await self.db.commit()
        return effort

    async def recipe(
            self,
            title: str,
            *,
            user: Optional[User] = None,
            ingredients: Optional[str] = None,
            tags: Iterable[Tag] = (),
            efforts: Iterable[Effort] = (),
            images: Iterable[str] = (),
            is_deleted: bool = False,
    ) -> Recipe:
        recipe = Recipe(
            title=title,
            ingredients=ingredients,
            user_id=user.id if user else None,
            created_at=self._next_time(),
            is_deleted=is_deleted,
        )
        self.db.add(recipe)
        await self.db.flush()
        self.db.add_all([RecipeTagLink(recipe_id=recipe.id, tag_id=t.id) for t in tags])
        self.db.add_all([RecipeEffortLink(recipe_id=recipe.id, effort_id=e.id) for e in efforts])
        self.db.add_all(
            [RecipeImage(recipe_id=recipe.id, image_path=path, sort_order=i) for i, path in enumerate(images)]
        )
        await self.db.commit()
        return recipe

    async def collection(self, user: User, name: str, is_public: bool = False) -> Collection:
        collection = Collection(user_id=user.id, name=name, is_public=is_public)
        self.db.add(collection)
        await self.db.commit()
        return collection


def as_context(user: User) -> UserContext:
    return UserContext.model_validate(user)


# ==========================
# 认证
# ==========================

def make_token(user_id, expires_in: int = 3600, secret: Optional[str] = None, **claims) -> str:
    now = datetime.now(timezone.utc)
    payload: Dict = {
        "sub": str(user_id),
        "aud": settings.security_settings.jwt_audience,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
        **claims,
    }
    return jwt.encode(payload, secret or settings.security_settings.secret, algorithm="HS256")


def auth_header(user_id) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}
