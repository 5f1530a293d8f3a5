# api/users_routes.py
from __future__ import annotations
import logging

from fastapi import APIRouter, Depends

from api._resp import fail, ok
from api.deps import get_app_settings, get_store, require_user_key
from config import Settings
from core.exceptions import ValidationError
from core.interfaces import TransitStore
from models.emissions import AnalyticsOut, FootprintOut, SuggestionsOut
from models.transit import RegisterIn, RegisterOut, TransitEvent, TransitIn
from services.auth import new_api_key, new_user_id

log = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

HIGH_FOOTPRINT_TIPS = [
    "Try switching short taxi rides to subway or bus.",
    "Batch trips to reduce total distance.",
]
LOW_FOOTPRINT_TIPS = [
    "Nice work! Consider biking or walking for short hops.",
]


@router.post("/register", status_code=201, response_model=RegisterOut)
def register(body: RegisterIn, store: TransitStore = Depends(get_store)):
    if not body.app_name:
        fail(400, "missing_app_name")
    user_id = new_user_id()
    api_key = new_api_key()
    store.set_api_key(user_id, api_key, body.app_name)
    log.info("Registered %s for app %r", user_id, body.app_name)
    return RegisterOut(user_id=user_id, api_key=api_key, app_name=body.app_name)


@router.post("/{user_id}/transit", status_code=201)
def add_transit(
    body: TransitIn,
    uid: str = Depends(require_user_key),
    store: TransitStore = Depends(get_store),
):
    if body.mode is None or body.distance_km is None:
        fail(400, "missing_fields")
    try:
        ev = TransitEvent(
            user_id=uid,
            mode=body.mode,
            distance_km=body.distance_km,
            ts=body.ts or 0,
            fuel_type=body.fuel_type,
            vehicle_size=body.vehicle_size,
            occupancy=body.occupancy,
        )
    except ValidationError as e:
        log.warning("Rejected transit event for %s: %s", uid, e.reason)
        fail(400, e.reason)
    store.add_event(ev)
    return ok()


@router.get("/{user_id}/lifetime-footprint", response_model=FootprintOut)
def lifetime_footprint(
    uid: str = Depends(require_user_key),
    store: TransitStore = Depends(get_store),
):
    return FootprintOut.from_summary(uid, store.summarize(uid))


@router.get("/{user_id}/analytics", response_model=AnalyticsOut)
def analytics(
    uid: str = Depends(require_user_key),
    store: TransitStore = Depends(get_store),
):
    week = store.summarize(uid).week_kg_co2
    peer_avg = store.global_average_weekly()
    return AnalyticsOut(
        user_id=uid,
        this_week_kg_co2=week,
        peer_week_avg_kg_co2=peer_avg,
        above_peer_avg=week > peer_avg,
    )


@router.get("/{user_id}/suggestions", response_model=SuggestionsOut)
def suggestions(
    uid: str = Depends(require_user_key),
    store: TransitStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    week = store.summarize(uid).week_kg_co2
    if week > settings.SUGGESTION_THRESHOLD_KG:
        tips = list(HIGH_FOOTPRINT_TIPS)
    else:
        tips = list(LOW_FOOTPRINT_TIPS)
    return SuggestionsOut(user_id=uid, suggestions=tips)
