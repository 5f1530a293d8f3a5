# api/deps.py
from __future__ import annotations
import hmac
from typing import Optional

from fastapi import Depends, Header, Path, Request

from api._resp import fail
from config import Settings
from core.interfaces import TransitStore

USER_ID_PATTERN = r"^[A-Za-z0-9_\-]+$"


def get_store(request: Request) -> TransitStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_user_key(
    request: Request,
    user_id: str = Path(..., pattern=USER_ID_PATTERN),
    x_api_key: Optional[str] = Header(None),
    store: TransitStore = Depends(get_store),
) -> str:
    """Resolve the path user and check its X-API-Key. Returns the user id."""
    if not x_api_key or not store.check_api_key(user_id, x_api_key):
        fail(401, "unauthorized")
    # picked up by the request-log middleware
    request.state.user_id = user_id
    return user_id


def require_admin(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_app_settings),
) -> None:
    prefix = "Bearer "
    if not settings.ADMIN_API_KEY or not authorization:
        fail(401, "unauthorized")
    if not authorization.startswith(prefix):
        fail(401, "unauthorized")
    token = authorization[len(prefix):]
    if not hmac.compare_digest(token, settings.ADMIN_API_KEY):
        fail(401, "unauthorized")
