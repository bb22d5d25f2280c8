from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from loguru import logger

from api.config import Settings
from api.errors import (
    CredentialIssuanceFailed,
    InvalidRequest,
    PayloadTooLarge,
    PersistFailed,
    UnsupportedMediaType,
)
from api.models.image import ImageRecord
from api.models.upload import UploadAuthorization, UploadRequest, ValidatedUpload
from api.services.metadata import MetadataStore
from api.services.storage import ObjectStore


def validate_upload_request(request: UploadRequest, app_settings: Settings) -> ValidatedUpload:
    if not request.file_name or not request.file_type:
        raise InvalidRequest("Missing required fields: fileName and fileType")

    allowed = {content_type.lower() for content_type in app_settings.allowed_content_types}
    if request.file_type.lower() not in allowed:
        logger.warning("Upload rejected file_name={} file_type={}", request.file_name, request.file_type)
        raise UnsupportedMediaType(
            "Invalid file type. Only image files are allowed (jpeg, jpg, png, gif, webp)"
        )

    file_size = _declared_size(request.file_size)
    if file_size is not None and file_size > app_settings.max_file_size_bytes:
        logger.warning("Upload rejected file_name={} file_size={}", request.file_name, file_size)
        raise PayloadTooLarge(f"File size exceeds the limit ({app_settings.max_file_size_label})")

    return ValidatedUpload(
        file_name=request.file_name,
        file_type=request.file_type,
        file_size=file_size,
    )


def _declared_size(value: Any) -> int | None:
    if value is None:
        return None
    # bool is an int subclass; JSON true/false is not a size.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidRequest("fileSize must be a non-negative integer")
    if isinstance(value, float) and not value.is_integer():
        raise InvalidRequest("fileSize must be a non-negative integer")
    if value < 0:
        raise InvalidRequest("fileSize must be a non-negative integer")
    return int(value)


def build_storage_key(image_id: str, file_name: str) -> str:
    return f"{image_id}-{file_name}"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def authorize_upload(
    request: UploadRequest,
    object_store: ObjectStore,
    metadata_store: MetadataStore,
    app_settings: Settings,
) -> UploadAuthorization:
    """Issue a presigned upload URL for one image and record its metadata.

    The record is written when the credential is issued, before any bytes
    reach the object store. A metadata failure after a successful presign
    leaves an unused credential behind; nothing is retried.
    """
    upload = validate_upload_request(request, app_settings)

    image_id = str(uuid4())
    storage_key = build_storage_key(image_id, upload.file_name)

    try:
        upload_url = object_store.presign_upload(
            storage_key,
            upload.file_type,
            app_settings.upload_url_expires_seconds,
        )
        file_url = object_store.public_url(storage_key)
    except Exception as exc:
        logger.exception("Upload credential failed image_id={} storage_key={}", image_id, storage_key)
        raise CredentialIssuanceFailed("Could not issue an upload URL") from exc

    record = ImageRecord(
        image_id=image_id,
        file_name=upload.file_name,
        file_url=file_url,
        file_type=upload.file_type,
        file_size=upload.file_size,
        uploaded_at=utc_timestamp(),
        storage_key=storage_key,
    )
    try:
        metadata_store.put(record)
    except Exception as exc:
        logger.exception("Metadata write failed image_id={} storage_key={}", image_id, storage_key)
        raise PersistFailed("Could not record image metadata") from exc

    logger.info(
        "Upload authorized image_id={} file_name={} file_type={} file_size={}",
        image_id,
        upload.file_name,
        upload.file_type,
        upload.file_size,
    )
    return UploadAuthorization(upload_url=upload_url, file_url=file_url, image_id=image_id)
