from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UploadRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    file_name: str | None = None
    file_type: str | None = None
    # Shape is checked after the type allow-list, not during parsing.
    file_size: Any = None


class ValidatedUpload(BaseModel):
    file_name: str = Field(min_length=1)
    file_type: str = Field(min_length=1)
    file_size: int | None = None


class UploadAuthorization(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    upload_url: str
    file_url: str
    image_id: str
    message: str = "Upload URL generated successfully"
