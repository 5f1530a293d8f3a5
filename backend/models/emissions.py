# models/emissions.py
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from core.exceptions import ValidationError

FactorKey = Tuple[str, str, str]  # (mode, fuel_type, vehicle_size)


@dataclass(frozen=True)
class EmissionFactor:
    """One factor-table row: per-passenger kg CO2e per km, well-to-wheel."""

    mode: str
    fuel_type: str
    vehicle_size: str
    kg_co2_per_km: float
    source: str = "UNKNOWN"  # e.g. "DEFRA-2024", "BASIC-DEFAULT", "FALLBACK"
    updated_at: int = 0  # epoch seconds

    def __post_init__(self) -> None:
        if not self.mode:
            raise ValidationError("emission factor mode must not be empty")
        if not math.isfinite(self.kg_co2_per_km):
            raise ValidationError("emission factor must be finite")
        if self.kg_co2_per_km < 0.0:
            raise ValidationError("negative emission factor")
        object.__setattr__(self, "kg_co2_per_km", float(self.kg_co2_per_km))

    @property
    def key(self) -> FactorKey:
        return (self.mode, self.fuel_type, self.vehicle_size)

    def to_doc(self) -> dict:
        return {
            "mode": self.mode,
            "fuel_type": self.fuel_type,
            "vehicle_size": self.vehicle_size,
            "kg_co2_per_km": self.kg_co2_per_km,
            "source": self.source,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_doc(cls, doc: dict) -> "EmissionFactor":
        return cls(
            mode=str(doc["mode"]),
            fuel_type=str(doc.get("fuel_type") or ""),
            vehicle_size=str(doc.get("vehicle_size") or ""),
            kg_co2_per_km=float(doc["kg_co2_per_km"]),
            source=str(doc.get("source") or "UNKNOWN"),
            updated_at=int(doc.get("updated_at") or 0),
        )


@dataclass(frozen=True)
class FootprintSummary:
    lifetime_kg_co2: float = 0.0
    week_kg_co2: float = 0.0  # trailing 7 days
    month_kg_co2: float = 0.0  # trailing 30 days


# ---------- Wire models ----------


class EmissionFactorModel(BaseModel):
    mode: str
    fuel_type: str = ""
    vehicle_size: str = ""
    kg_co2_per_km: float = Field(..., ge=0)
    source: str = "UNKNOWN"
    updated_at: int = 0

    @classmethod
    def from_dc(cls, f: EmissionFactor) -> "EmissionFactorModel":
        return cls(**f.to_doc())


class LoadFactorsRequest(BaseModel):
    # Exactly one source is used: factors > csv > preset
    preset: Optional[Literal["defra_2024", "basic"]] = "defra_2024"
    factors: Optional[List[EmissionFactorModel]] = None
    csv: Optional[str] = None


class LoadFactorsResponse(BaseModel):
    status: str = "ok"
    source: str
    loaded: int


class FootprintOut(BaseModel):
    user_id: str
    lifetime_kg_co2: float
    week_kg_co2: float
    month_kg_co2: float
    # legacy names kept for older clients
    last_7d_kg_co2: float
    last_30d_kg_co2: float

    @classmethod
    def from_summary(cls, user_id: str, s: FootprintSummary) -> "FootprintOut":
        return cls(
            user_id=user_id,
            lifetime_kg_co2=s.lifetime_kg_co2,
            week_kg_co2=s.week_kg_co2,
            month_kg_co2=s.month_kg_co2,
            last_7d_kg_co2=s.week_kg_co2,
            last_30d_kg_co2=s.month_kg_co2,
        )


class AnalyticsOut(BaseModel):
    user_id: str
    this_week_kg_co2: float
    peer_week_avg_kg_co2: float
    above_peer_avg: bool


class SuggestionsOut(BaseModel):
    user_id: str
    suggestions: List[str]
