# api/emissions_routes.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from typing import List

from api._resp import fail
from api.deps import get_store
from core.exceptions import InvalidInput
from core.interfaces import TransitStore
from services.emissions.calculator import EmissionCalculator
from services.emissions.resolver import FactorResolver

router = APIRouter(prefix="/emissions", tags=["emissions"])


class TripModel(BaseModel):
    mode: str
    distance_km: float
    fuel_type: str = ""
    vehicle_size: str = ""
    occupancy: float = 1.0


class EstimateRequest(BaseModel):
    trips: List[TripModel] = Field(..., min_length=1)


class TripEstimate(BaseModel):
    mode: str
    kg_co2e: float
    factor_kg_per_km: float
    factor_source: str


class EstimateResponse(BaseModel):
    status: str = "success"
    total_kgco2e: float
    per_trip: List[TripEstimate]
    units: str = "kgCO2e"


@router.post("/estimate", response_model=EstimateResponse)
def estimate_emissions(req: EstimateRequest, store: TransitStore = Depends(get_store)):
    """Price trips with the live factor table without recording anything."""
    resolver = FactorResolver(store)
    calc = EmissionCalculator(resolver)
    per_trip: List[TripEstimate] = []
    for t in req.trips:
        try:
            kg = calc.calculate(t.mode, t.fuel_type, t.vehicle_size, t.occupancy, t.distance_km)
        except InvalidInput as e:
            fail(400, e.reason)
        factor = resolver.resolve(t.mode, t.fuel_type, t.vehicle_size)
        per_trip.append(
            TripEstimate(
                mode=t.mode,
                kg_co2e=kg,
                factor_kg_per_km=factor.kg_co2_per_km,
                factor_source=factor.source,
            )
        )
    return EstimateResponse(
        total_kgco2e=float(sum(p.kg_co2e for p in per_trip)),
        per_trip=per_trip,
    )
