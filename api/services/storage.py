from typing import Protocol
from urllib.parse import quote

import boto3
from botocore.client import Config
from loguru import logger

from api.config import Settings

NO_RETRIES = {"total_max_attempts": 1, "mode": "standard"}


class ObjectStore(Protocol):
    def presign_upload(self, key: str, content_type: str, expires_in: int) -> str: ...

    def public_url(self, key: str) -> str: ...


class ObjectStoreNotConfigured(RuntimeError):
    pass


class S3ObjectStore:
    """Object store backed by S3 (or any S3-compatible endpoint).

    Upload credentials are presigned ``PutObject`` URLs: they cover a single
    key, carry the declared content type as a signed header and expire after
    ``expires_in`` seconds. They grant no read access.
    """

    def __init__(
        self,
        *,
        bucket: str | None,
        region: str,
        endpoint_url: str | None = None,
        client=None,
    ):
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None
        self._client = client or self._build_client()

    def _build_client(self):
        s3_options = {"addressing_style": "path"} if self.endpoint_url else {}
        return boto3.client(
            "s3",
            region_name=self.region,
            endpoint_url=self.endpoint_url,
            config=Config(signature_version="s3v4", retries=NO_RETRIES, s3=s3_options),
        )

    def _require_bucket(self) -> str:
        if not self.bucket:
            raise ObjectStoreNotConfigured("Bucket name not found in configuration (BUCKET_NAME)")
        return self.bucket

    def presign_upload(self, key: str, content_type: str, expires_in: int) -> str:
        bucket = self._require_bucket()
        url = self._client.generate_presigned_url(
            "put_object",
            Params={"Bucket": bucket, "Key": key, "ContentType": content_type},
            ExpiresIn=expires_in,
            HttpMethod="PUT",
        )
        logger.debug(
            "Upload URL presigned bucket={} key={} content_type={} expires_in={}",
            bucket,
            key,
            content_type,
            expires_in,
        )
        return url

    def public_url(self, key: str) -> str:
        bucket = self._require_bucket()
        quoted_key = quote(key, safe="/")
        if self.endpoint_url:
            return f"{self.endpoint_url}/{bucket}/{quoted_key}"
        return f"https://{bucket}.s3.{self.region}.amazonaws.com/{quoted_key}"


def build_object_store(app_settings: Settings) -> S3ObjectStore:
    return S3ObjectStore(
        bucket=app_settings.bucket_name,
        region=app_settings.aws_region,
        endpoint_url=app_settings.s3_endpoint_url,
    )
