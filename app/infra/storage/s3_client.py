from typing import Optional
from urllib.parse import urlparse, urlunparse

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import ClientError

from app.core.logger import logger
from app.config.config_settings.config_schema import S3ClientConfig
from app.infra.storage.storage_interface import StorageClientInterface
from app.utils.url_builder import build_public_storage_url


class S3CompatibleClient(StorageClientInterface):
    def __init__(self, config: S3ClientConfig):
        self.s3_conf = config.params
        self.capabilities = self.s3_conf.capabilities
        self.endpoint_url = self._get_base_url()
        self.bucket_name = self.s3_conf.bucket_name
        self.public_base_url = self._get_public_base_url()

        # Boto3 的寻址风格: 'auto' 对应 None
        addressing_style = self.capabilities.path_style
        if addressing_style == 'auto':
            addressing_style = None

        # Pydantic: "v4" -> Boto3: "s3v4", "v2" -> "s3"
        signature_version_map = {"v4": "s3v4", "v2": "s3"}
        signature_version = signature_version_map.get(self.capabilities.signature_version, "s3v4")

        client_config = BotoConfig(
            signature_version=signature_version,
            s3={'addressing_style': addressing_style},
            connect_timeout=self.s3_conf.connect_timeout,
            read_timeout=self.s3_conf.read_timeout
        )

        self.s3 = boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            aws_access_key_id=self.s3_conf.access_key,
            aws_secret_access_key=self.s3_conf.secret_key,
            config=client_config,
            region_name=self.s3_conf.region
        )

        if self.capabilities.supports_bucket_creation:
            self.create_bucket_if_not_exists(self.bucket_name)
        else:
            logger.debug(
                f"[S3 Driver] Skipping bucket check/creation for '{self.bucket_name}' (disabled by capabilities).")

    def _get_base_url(self) -> Optional[str]:
        # endpoint 为空时是 AWS S3，由 boto3 根据 region 推导
        if not self.s3_conf.endpoint:
            return None
        protocol = "https" if self.s3_conf.secure else "http"
        return f"{protocol}://{self.s3_conf.endpoint}"

    def _get_public_base_url(self) -> Optional[str]:
        if not self.s3_conf.public_endpoint:
            return None
        protocol = "https" if self.s3_conf.secure_cdn else "http"
        return f"{protocol}://{self.s3_conf.public_endpoint}"

    def build_final_url(self, object_name: str) -> str:
        """
        构建最终可访问的 URL (可能是 CDN URL)
        """
        return build_public_storage_url(
            object_name=object_name,
            cdn_base_url=self.s3_conf.cdn_base_url,
            public_base_url=self.public_base_url,
            internal_base_url=self.endpoint_url,
            bucket_name=self.bucket_name,
            capabilities=self.capabilities
        )

    def remove_object(self, object_name: str):
        logger.info(f"[S3 Driver] Removing object: {object_name}")
        return self.s3.delete_object(Bucket=self.bucket_name, Key=object_name)

    def stat_object(self, object_name: str):
        return self.s3.head_object(Bucket=self.bucket_name, Key=object_name)

    def get_presigned_url(self, client_method: str, object_name: str, expires_in: int) -> str:
        """
        生成预签名 URL。
        需要时会把 Boto3 生成的内网 host 替换为 public_endpoint。
        """
        presigned_url = self.s3.generate_presigned_url(
            ClientMethod=client_method,
            Params={"Bucket": self.bucket_name, "Key": object_name},
            ExpiresIn=expires_in
        )

        if self.capabilities.rewrite_presigned_host and self.public_base_url:
            logger.debug(f"[S3 Driver] Rewriting {client_method} URL host using public_endpoint.")
            original_parts = urlparse(presigned_url)
            public_parts = urlparse(self.public_base_url)
            presigned_url = urlunparse((
                public_parts.scheme,
                public_parts.netloc,
                original_parts.path,
                original_parts.params,
                original_parts.query,
                original_parts.fragment
            ))

        return presigned_url

    def create_bucket_if_not_exists(self, bucket_name: str):
        try:
            self.s3.head_bucket(Bucket=bucket_name)
            logger.debug(f"[S3 Driver] Bucket '{bucket_name}' already exists.")
        except ClientError as e:
            if e.response['Error']['Code'] != '404':
                logger.error(f"[S3 Driver] Error checking bucket: {e}")
                raise

            logger.info(f"[S3 Driver] Bucket '{bucket_name}' not found. Creating...")
            # 对于非 us-east-1 的 AWS S3，创建时必须指定区域
            if self.s3_conf.region != "us-east-1" and not self.s3_conf.endpoint:
                self.s3.create_bucket(
                    Bucket=bucket_name,
                    CreateBucketConfiguration={'LocationConstraint': self.s3_conf.region}
                )
            else:
                self.s3.create_bucket(Bucket=bucket_name)
            logger.info(f"[S3 Driver] Successfully created bucket '{bucket_name}'.")
