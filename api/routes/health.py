from fastapi import APIRouter, Depends

from api.config import Settings
from api.dependencies import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health(app_settings: Settings = Depends(get_settings)) -> dict[str, str]:
    return {"status": "ok", "app_name": app_settings.app_name}
