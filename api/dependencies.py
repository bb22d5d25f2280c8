from fastapi import Request

from api.config import Settings
from api.services.metadata import MetadataStore
from api.services.storage import ObjectStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_object_store(request: Request) -> ObjectStore:
    return request.app.state.object_store


def get_metadata_store(request: Request) -> MetadataStore:
    return request.app.state.metadata_store
