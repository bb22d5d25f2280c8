from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ImageRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    image_id: str
    file_name: str
    file_url: str
    file_type: str
    file_size: int | None = None
    uploaded_at: str
    storage_key: str


class ImageList(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    images: list[ImageRecord]
    count: int
