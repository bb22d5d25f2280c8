from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_TYPES = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Image Gallery API"
    debug: bool = False
    log_level: str = "INFO"
    aws_region: str = "ap-south-1"
    bucket_name: str | None = None
    table_name: str = "images"
    s3_endpoint_url: str | None = None
    dynamodb_endpoint_url: str | None = None
    upload_url_expires_seconds: int = Field(default=300, ge=1, le=3600)
    max_file_size_bytes: int = Field(default=5 * 1024 * 1024, ge=1)
    allowed_content_types: tuple[str, ...] = DEFAULT_ALLOWED_TYPES

    @property
    def max_file_size_label(self) -> str:
        mib = self.max_file_size_bytes / (1024 * 1024)
        return f"{mib:g}MB"


settings = Settings()
