# api/admin_routes.py
from __future__ import annotations
import logging
from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, Path

from api._resp import fail, ok
from api.deps import USER_ID_PATTERN, get_store, require_admin
from core.exceptions import FactorLoadError
from core.interfaces import TransitStore
from models.emissions import (
    EmissionFactorModel,
    LoadFactorsRequest,
    LoadFactorsResponse,
)
from models.transit import ApiLogOut, TransitEventOut
from services.emissions.loader import (
    load_from_csv,
    load_from_items,
    load_into_store,
    load_preset,
)

log = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)]
)

LOG_LIMIT = 1000


# ---------- Request logs ----------


@router.get("/logs", response_model=List[ApiLogOut])
def list_logs(store: TransitStore = Depends(get_store)):
    return [ApiLogOut(**asdict(r)) for r in store.get_logs(LOG_LIMIT)]


@router.delete("/logs")
def clear_logs(store: TransitStore = Depends(get_store)):
    store.clear_logs()
    return ok()


# ---------- Clients ----------


@router.get("/clients", response_model=List[str])
def list_clients(store: TransitStore = Depends(get_store)):
    return store.get_clients()


@router.get("/clients/{client_id}/data", response_model=List[TransitEventOut])
def client_data(
    client_id: str = Path(..., pattern=USER_ID_PATTERN),
    store: TransitStore = Depends(get_store),
):
    return [TransitEventOut.from_event(e) for e in store.get_client_data(client_id)]


@router.post("/clear-db-events")
def clear_db_events(store: TransitStore = Depends(get_store)):
    store.clear_db_events()
    log.warning("All transit events cleared by admin")
    return ok()


@router.post("/clear-db")
def clear_db(store: TransitStore = Depends(get_store)):
    store.clear_db()
    log.warning("Database cleared by admin")
    return ok()


# ---------- Emission factors ----------


@router.get("/emission-factors", response_model=List[EmissionFactorModel])
def list_emission_factors(store: TransitStore = Depends(get_store)):
    return [EmissionFactorModel.from_dc(f) for f in store.get_all_emission_factors()]


@router.post("/emission-factors/load", response_model=LoadFactorsResponse)
def load_emission_factors(
    req: LoadFactorsRequest, store: TransitStore = Depends(get_store)
):
    """Replace the persisted table with explicit rows, a CSV body, or a preset."""
    try:
        if req.factors is not None:
            factors = load_from_items(m.model_dump() for m in req.factors)
            source = "json"
        elif req.csv is not None:
            factors = load_from_csv(req.csv)
            source = "csv"
        else:
            source = req.preset or "defra_2024"
            factors = load_preset(source)
    except FactorLoadError as e:
        log.warning("Rejected emission factor load: %s", e)
        fail(400, str(e))

    loaded = load_into_store(store, factors)
    return LoadFactorsResponse(source=source, loaded=loaded)


@router.delete("/emission-factors")
def clear_emission_factors(store: TransitStore = Depends(get_store)):
    store.clear_emission_factors()
    return ok()
