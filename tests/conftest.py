"""Shared fixtures: in-memory collaborators and a TestClient wired to them."""

from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient

from api.config import Settings
from api.dependencies import get_metadata_store, get_object_store, get_settings
from api.main import app
from api.models.image import ImageRecord

BUCKET = "gallery-bucket"
REGION = "ap-south-1"


class FakeObjectStore:
    def __init__(self) -> None:
        self.calls = 0
        self.presigned: list[tuple[str, str, int]] = []
        self.error: Exception | None = None

    def presign_upload(self, key: str, content_type: str, expires_in: int) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        self.presigned.append((key, content_type, expires_in))
        return f"https://{BUCKET}.s3.{REGION}.amazonaws.com/{key}?X-Amz-Expires={expires_in}"

    def public_url(self, key: str) -> str:
        return f"https://{BUCKET}.s3.{REGION}.amazonaws.com/{key}"


class FakeMetadataStore:
    def __init__(self) -> None:
        self.items: list[dict[str, Any]] = []
        self.put_calls = 0
        self.scan_calls = 0
        self.put_error: Exception | None = None
        self.scan_error: Exception | None = None

    def put(self, record: ImageRecord) -> None:
        self.put_calls += 1
        if self.put_error is not None:
            raise self.put_error
        self.items.append(record.model_dump(by_alias=True, exclude_none=True))

    def scan_all(self) -> list[dict[str, Any]]:
        self.scan_calls += 1
        if self.scan_error is not None:
            raise self.scan_error
        return [dict(item) for item in self.items]


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(_env_file=None, bucket_name=BUCKET, table_name="images-test", aws_region=REGION)


@pytest.fixture()
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture()
def metadata_store() -> FakeMetadataStore:
    return FakeMetadataStore()


@pytest.fixture()
def client(
    object_store: FakeObjectStore,
    metadata_store: FakeMetadataStore,
    test_settings: Settings,
) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_object_store] = lambda: object_store
    app.dependency_overrides[get_metadata_store] = lambda: metadata_store
    app.dependency_overrides[get_settings] = lambda: test_settings

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
