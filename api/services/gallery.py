from datetime import datetime, timezone
from typing import Any

from loguru import logger

from api.errors import ListFailed
from api.models.image import ImageList, ImageRecord
from api.services.metadata import MetadataStore
from api.services.uploads import build_storage_key


def _coerce_size(value: Any) -> int:
    if value is None or value == "":
        return 0
    return int(value)


def normalize_record(item: dict[str, Any]) -> ImageRecord:
    image_id = str(item["imageId"])
    file_name = str(item["fileName"])
    storage_key = item.get("storageKey") or item.get("s3Key") or build_storage_key(image_id, file_name)
    return ImageRecord(
        image_id=image_id,
        file_name=file_name,
        file_url=str(item["fileUrl"]),
        file_type=str(item["fileType"]),
        file_size=_coerce_size(item.get("fileSize")),
        uploaded_at=str(item["uploadedAt"]),
        storage_key=str(storage_key),
    )


def _uploaded_at(record: ImageRecord) -> datetime:
    moment = datetime.fromisoformat(record.uploaded_at)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def list_images(metadata_store: MetadataStore) -> ImageList:
    # Equal timestamps keep the order the store returned them in.
    logger.info("Fetching all image records")
    try:
        items = metadata_store.scan_all()
        images = [normalize_record(item) for item in items]
        images.sort(key=_uploaded_at, reverse=True)
    except Exception as exc:
        logger.exception("Image listing failed")
        raise ListFailed("Could not retrieve image records") from exc

    logger.info("Image records fetched count={}", len(images))
    return ImageList(images=images, count=len(images))
