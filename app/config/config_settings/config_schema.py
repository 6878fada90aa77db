from typing import Dict, List, Optional, Literal

from pydantic import BaseModel, Field, model_validator


class StorageCapabilities(BaseModel):
    """
    描述对象存储服务的特性与能力集。
    默认值代表一个“功能齐全”的 S3 兼容服务 (如 MinIO, AWS S3)。
    """

    supports_bucket_creation: bool = Field(
        default=True,
        description="是否允许在启动时检查并创建 bucket (托管服务的 bucket 通常已存在)"
    )

    supports_cdn_rewrite: bool = Field(
        default=True,
        description="是否支持将内网URL重写为CDN URL"
    )

    rewrite_presigned_host: bool = Field(
        default=False,
        description="是否应将 Boto3 生成的预签名 URL 的 host 替换为 public_endpoint (仅 MinIO 等内网部署需要)"
    )

    signature_version: Literal["v2", "v4"] = Field(
        default="v4",
        description="签名算法版本 (v4 是现代标准)"
    )

    path_style: Literal["auto", "path", "virtual"] = Field(
        default="auto",
        description="寻址风格 (auto 适用于 S3/R2，本地 MinIO 可能需要手动设为 'path')"
    )


class S3Params(BaseModel):
    """
    MinIO 或 S3 兼容服务的客户端参数
    """

    endpoint: Optional[str] = None
    """
    服务地址 (不含 http/https)。
    - AWS S3: 留空 (None)，Boto3 会根据 region 自动生成。
    - MinIO/Supabase Storage/R2: 必须填写。
    """

    region: str = "us-east-1"
    access_key: str
    secret_key: str
    bucket_name: str
    secure: bool = True

    public_endpoint: Optional[str] = None
    """公网访问端点 (不含 http/https, 不含 bucket)"""

    cdn_base_url: Optional[str] = None
    """CDN 完整域名 (不含 bucket)"""

    secure_cdn: bool = True

    connect_timeout: int = 10
    read_timeout: int = 30

    capabilities: StorageCapabilities = Field(
        default_factory=StorageCapabilities,
        description="描述当前存储服务的特性与行为差异"
    )


class S3ClientConfig(BaseModel):
    type: Literal['minio', 's3']
    params: S3Params


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"
    api_prefix: str = "/api/v1"
    env: str = "dev"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class DatabaseConfig(BaseModel):
    url: str
    echo: bool = False


class LoggingConfig(BaseModel):
    enable_file: bool = True
    log_dir: str = "logs"
    rotation: str = "1 week"
    retention: str = "1 month"


class SecuritySettings(BaseModel):
    """
    外部身份服务签发的 JWT 的校验参数。
    本服务只校验 token，不负责签发。
    """
    secret: str
    jwt_algorithm: str = "HS256"
    jwt_issuer: Optional[str] = None
    jwt_audience: Optional[str] = None


class StorageProfileConfig(BaseModel):
    """单个存储策略的配置"""
    client: str = Field(..., description="该策略使用的客户端名称")
    default_folder: str = Field("", description="对象键的默认前缀")
    visibility: Literal["private", "public"] = Field(
        "private",
        description="private 生成带签名的临时 URL，public 直接拼接公开 URL"
    )
    signed_url_expires_in: int = Field(3600, gt=0, description="签名 URL 的有效期 (秒)")


class DiscoveryConfig(BaseModel):
    """菜谱发现列表的分页与存储设置"""
    default_page_size: int = Field(12, gt=0)
    max_page_size: int = Field(60, gt=0)
    image_profile: str = "recipe_images"
    vegetarian_tag_name: str = "vegetarian"
    vegan_tag_name: str = "vegan"

    @model_validator(mode='after')
    def check_page_sizes(self) -> 'DiscoveryConfig':
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size cannot exceed max_page_size.")
        return self


# ========================================================================================
#
#   所有配置模型都要写在APPconfig上方
#
# ========================================================================================
class AppConfig(BaseModel):
    server: ServerConfig
    database: DatabaseConfig
    logging: LoggingConfig
    security_settings: SecuritySettings
    storage_clients: Dict[str, S3ClientConfig]
    storage_profiles: Dict[str, StorageProfileConfig]
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)

    @model_validator(mode='after')
    def check_profile_clients(self) -> 'AppConfig':
        for name, profile in self.storage_profiles.items():
            if profile.client not in self.storage_clients:
                raise ValueError(f"Storage profile '{name}' refers to unknown client '{profile.client}'.")
        return self
