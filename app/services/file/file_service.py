import asyncio
from typing import Dict, Hashable, List, Mapping, Optional

from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import FileException
from app.infra.storage.storage_factory import StorageFactory
from app.services._base_service import BaseService


class FileService(BaseService):
    """
    一个通用的文件存储服务层。

    它作为业务逻辑和底层存储客户端之间的协调者，使用 StorageFactory
    来动态地处理不同业务场景（Profiles）下的文件操作。
    上传由客户端直接完成，这里只负责把对象 key 解析成 URL 以及删除对象。
    """

    def __init__(self, factory: StorageFactory):
        super().__init__()
        self.factory = factory

    # --- URL 生成接口 ---

    async def generate_presigned_get_url(
        self,
        object_name: str,
        profile_name: str,
        expires_in: int = 3600
    ) -> str:
        """根据 Profile 生成文件的预签名访问URL。"""
        client = self.factory.get_client_by_profile(profile_name)
        try:
            return await run_in_threadpool(
                client.get_presigned_url,
                client_method="get_object",
                object_name=object_name,
                expires_in=expires_in
            )
        except (ClientError, BotoCoreError) as e:
            self.logger.error(f"Failed to generate GET URL for {object_name}: {e}")
            raise FileException(message="Could not generate file URL.") from e

    def build_url_for_object(self, object_name: Optional[str], profile_name: Optional[str]) -> Optional[str]:
        """公开 bucket 直接拼接 URL，无需签名。"""
        if not object_name or not profile_name:
            return None
        client = self.factory.get_client_by_profile(profile_name)
        return client.build_final_url(object_name)

    async def resolve_url(self, object_name: str, profile_name: str) -> Optional[str]:
        """
        按 Profile 的 visibility 把对象 key 解析成可访问地址：
        private 生成签名 URL，public 直接拼接。
        """
        profile = self.factory.get_profile_config(profile_name)
        if profile.visibility == "public":
            return self.build_url_for_object(object_name, profile_name)
        return await self.generate_presigned_get_url(
            object_name, profile_name, expires_in=profile.signed_url_expires_in
        )

    async def resolve_url_or_none(self, object_name: Optional[str], profile_name: str) -> Optional[str]:
        """解析失败只记录日志并返回 None，用于列表里的单张图片。"""
        if not object_name:
            return None
        try:
            return await self.resolve_url(object_name, profile_name)
        except Exception as e:
            self.logger.warning(f"⚠️ 解析 {object_name} 的访问地址失败 (profile={profile_name}): {e}")
            return None

    async def resolve_urls(
        self,
        object_names: Mapping[Hashable, Optional[str]],
        profile_name: str
    ) -> Dict[Hashable, Optional[str]]:
        """
        并发解析一组对象 key，等待全部完成后按原来的键返回。
        单个失败的条目为 None，不影响其它条目。
        """
        keys = list(object_names.keys())
        urls = await asyncio.gather(
            *(self.resolve_url_or_none(object_names[key], profile_name) for key in keys)
        )
        return dict(zip(keys, urls))

    # --- 删除接口 ---

    async def delete_file(self, object_name: str, profile_name: str):
        """根据 Profile 删除一个文件。"""
        client = self.factory.get_client_by_profile(profile_name)
        try:
            await run_in_threadpool(client.remove_object, object_name)
            self.logger.info(f"Deleted {object_name} using profile {profile_name}")
        except (ClientError, BotoCoreError) as e:
            self.logger.error(f"Failed to delete {object_name}: {e}")
            raise FileException(message="File deletion failed.") from e

    async def delete_files(self, object_names: List[str], profile_name: str) -> List[str]:
        """
        批量删除多个文件，返回删除失败的 key。
        单个失败不会中断其它删除。
        """
        results = await asyncio.gather(
            *(self.delete_file(name, profile_name) for name in object_names),
            return_exceptions=True,
        )
        failed = [name for name, result in zip(object_names, results) if isinstance(result, Exception)]
        if failed:
            self.logger.warning(f"⚠️ {len(failed)} 个存储对象删除失败: {failed}")
        return failed
