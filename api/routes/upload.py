from fastapi import APIRouter, Depends
from loguru import logger

from api.config import Settings
from api.dependencies import get_metadata_store, get_object_store, get_settings
from api.models.upload import UploadAuthorization, UploadRequest
from api.services.metadata import MetadataStore
from api.services.storage import ObjectStore
from api.services.uploads import authorize_upload

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("", response_model=UploadAuthorization)
def create_upload_url(
    request: UploadRequest,
    object_store: ObjectStore = Depends(get_object_store),
    metadata_store: MetadataStore = Depends(get_metadata_store),
    app_settings: Settings = Depends(get_settings),
) -> UploadAuthorization:
    logger.info(
        "Upload URL requested file_name={} file_type={} file_size={}",
        request.file_name,
        request.file_type,
        request.file_size,
    )
    return authorize_upload(request, object_store, metadata_store, app_settings)
