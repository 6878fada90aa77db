# app/utils/url_builder.py

from typing import Optional

from app.config.config_settings.config_schema import StorageCapabilities
from app.core.logger import logger


def build_public_storage_url(
    object_name: str,
    cdn_base_url: Optional[str],
    public_base_url: Optional[str],
    internal_base_url: Optional[str],
    bucket_name: str,
    capabilities: StorageCapabilities
) -> Optional[str]:
    """
    根据传入的上下文构建公共 URL，不读取任何全局设置。

    URL 生成逻辑:
    1. 【CDN】如果配置了 cdn_base_url 且 capabilities 允许，优先使用。
    2. 【公网 Endpoint】如果配置了 public_base_url，根据 path_style 使用。
    3. 【内网 Endpoint】作为回退，根据 path_style 使用。
    4. 都没有时按标准 AWS S3 的 virtual-hosted 风格拼接。
    """
    if not object_name:
        return None

    key = object_name.lstrip('/')

    if capabilities.supports_cdn_rewrite and cdn_base_url:
        # CDN URL 总是 "path" 风格 (e.g., cdn.com/object_name)
        return f"{cdn_base_url.rstrip('/')}/{key}"

    if public_base_url:
        base_url = public_base_url.rstrip('/')
        if capabilities.path_style == "path":
            return f"{base_url}/{bucket_name}/{key}"
        return f"{base_url}/{key}"

    if internal_base_url:
        logger.warning(
            f"Building public URL for {object_name} using internal endpoint. "
            f"Consider setting 'public_endpoint' for this client."
        )
        base_url = internal_base_url.rstrip('/')
        if capabilities.path_style == "path":
            return f"{base_url}/{bucket_name}/{key}"
        return f"{base_url}/{key}"

    logger.debug(f"Building default AWS S3 URL for {object_name}")
    return f"https://{bucket_name}.s3.amazonaws.com/{key}"
