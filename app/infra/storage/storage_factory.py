import threading
from typing import Dict, Optional

from app.config.settings import settings
from app.config.config_settings.config_schema import (
    AppConfig,
    StorageProfileConfig,
    S3ClientConfig,
)
from app.core.logger import logger
from app.infra.storage.storage_interface import StorageClientInterface
from app.infra.storage.s3_client import S3CompatibleClient


class StorageFactory:
    """
    一个单例的存储客户端工厂。

    该工厂根据配置文件中的 `storage_clients` 部分，创建并管理所有可用的存储客户端实例。
    业务逻辑层通过 `get_client_by_profile()` 传入业务场景名称（如 'recipe_images'）
    即可获取对应的客户端实例，无需关心底层的具体实现。
    客户端在第一次被请求时才创建。
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls, *args, **kwargs):
        if not cls._instance:
            with cls._lock:
                if not cls._instance:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config: Optional[AppConfig] = None):
        if getattr(self, "_initialized", False):
            return

        with self._lock:
            if getattr(self, "_initialized", False):
                return

            config = config or settings
            self._client_configs: Dict[str, S3ClientConfig] = config.storage_clients
            self._profiles: Dict[str, StorageProfileConfig] = config.storage_profiles
            self._clients: Dict[str, StorageClientInterface] = {}
            self._initialized = True
            logger.info(f"StorageFactory initialized with clients: {list(self._client_configs)}")

    def _create_client(self, client_name: str) -> StorageClientInterface:
        client_config = self._client_configs.get(client_name)
        if client_config is None:
            raise KeyError(f"Storage client '{client_name}' is not defined in the configuration.")

        logger.debug(f"Initializing storage client: '{client_name}' of type '{client_config.type}'...")
        return S3CompatibleClient(config=client_config)

    def get_client(self, client_name: str) -> StorageClientInterface:
        """
        通过名称获取客户端实例，必要时创建。

        Raises:
            KeyError: 如果客户端名称未在配置中定义。
        """
        if client_name not in self._clients:
            with self._lock:
                if client_name not in self._clients:
                    self._clients[client_name] = self._create_client(client_name)
                    logger.info(f"Successfully initialized client: '{client_name}'.")
        return self._clients[client_name]

    def get_client_by_profile(self, profile_name: str) -> StorageClientInterface:
        """
        **主要使用方法**：根据业务场景 (Profile) 名称获取对应的客户端实例。

        Raises:
            ValueError: 如果 Profile 名称未在配置中定义。
        """
        profile_config = self.get_profile_config(profile_name)
        logger.debug(f"Request for profile '{profile_name}' maps to client '{profile_config.client}'.")
        return self.get_client(profile_config.client)

    def get_profile_config(self, profile_name: str) -> StorageProfileConfig:
        if profile_name not in self._profiles:
            raise ValueError(f"Storage profile '{profile_name}' is not defined in the configuration.")
        return self._profiles[profile_name]


storage_factory = StorageFactory()


def get_storage_factory() -> StorageFactory:
    return storage_factory
