from fastapi import APIRouter, Depends

from api.dependencies import get_metadata_store
from api.models.image import ImageList
from api.services.gallery import list_images
from api.services.metadata import MetadataStore

router = APIRouter(prefix="/images", tags=["images"])


@router.get("", response_model=ImageList)
def get_images(metadata_store: MetadataStore = Depends(get_metadata_store)) -> ImageList:
    return list_images(metadata_store)
