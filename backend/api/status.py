import time

from fastapi import APIRouter, Depends

from api.deps import get_app_settings
from config import Settings

router = APIRouter(tags=["status"])


@router.get("/health")
def health(settings: Settings = Depends(get_app_settings)):
    return {"ok": True, "service": settings.SERVICE_NAME, "time": int(time.time())}
