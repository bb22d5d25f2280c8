from typing import Any, Protocol

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.client import Config
from loguru import logger

from api.config import Settings
from api.models.image import ImageRecord
from api.services.storage import NO_RETRIES


class MetadataStore(Protocol):
    def put(self, record: ImageRecord) -> None: ...

    def scan_all(self) -> list[dict[str, Any]]: ...


class DynamoMetadataStore:
    """Image metadata kept as one DynamoDB item per image, keyed by ``imageId``."""

    def __init__(
        self,
        *,
        table_name: str,
        region: str,
        endpoint_url: str | None = None,
        client=None,
    ):
        self.table_name = table_name
        self._client = client or boto3.client(
            "dynamodb",
            region_name=region,
            endpoint_url=endpoint_url,
            config=Config(retries=NO_RETRIES),
        )
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    def _to_item(self, record: ImageRecord) -> dict[str, Any]:
        item: dict[str, Any] = {
            "imageId": record.image_id,
            "fileName": record.file_name,
            "fileUrl": record.file_url,
            "fileType": record.file_type,
            "uploadedAt": record.uploaded_at,
            "s3Key": record.storage_key,
        }
        if record.file_size is not None:
            item["fileSize"] = record.file_size
        return {name: self._serializer.serialize(value) for name, value in item.items()}

    def put(self, record: ImageRecord) -> None:
        self._client.put_item(
            TableName=self.table_name,
            Item=self._to_item(record),
            ConditionExpression="attribute_not_exists(imageId)",
        )
        logger.debug("Metadata stored table={} image_id={}", self.table_name, record.image_id)

    def scan_all(self) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        pages = 0
        paginator = self._client.get_paginator("scan")
        for page in paginator.paginate(TableName=self.table_name):
            pages += 1
            for raw in page.get("Items", []):
                items.append({name: self._deserializer.deserialize(value) for name, value in raw.items()})
        logger.debug("Metadata scanned table={} pages={} items={}", self.table_name, pages, len(items))
        return items


def build_metadata_store(app_settings: Settings) -> DynamoMetadataStore:
    return DynamoMetadataStore(
        table_name=app_settings.table_name,
        region=app_settings.aws_region,
        endpoint_url=app_settings.dynamodb_endpoint_url,
    )
