from __future__ import annotations
import math
import time
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel

from core.exceptions import ValidationError

# Allowed transit modes
TRANSIT_MODES = frozenset({"taxi", "car", "bus", "subway", "train", "bike", "walk"})

# Per-vehicle modes: emissions are shared between the riders
PRIVATE_VEHICLE_MODES = frozenset({"car", "taxi"})

MIN_OCCUPANCY = 1.0


def now_epoch() -> int:
    return int(time.time())


@dataclass(frozen=True)
class TransitEvent:
    """
    One recorded trip. Validated on construction and immutable afterwards.

    ``fuel_type`` / ``vehicle_size`` only mean something for car/taxi and are
    blanked for every other mode so factor lookups hit the mode-only key.
    A ``ts`` of 0 means "now".
    """

    user_id: str
    mode: str
    distance_km: float
    ts: int = 0
    fuel_type: str = ""
    vehicle_size: str = ""
    occupancy: float = 1.0

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValidationError("user_id must not be empty")
        if not math.isfinite(self.distance_km):
            raise ValidationError("distance must be finite")
        if self.distance_km < 0.0:
            raise ValidationError("negative distance")
        if self.mode not in TRANSIT_MODES:
            raise ValidationError("invalid mode")
        if not math.isfinite(self.occupancy):
            raise ValidationError("occupancy must be finite")
        if self.occupancy < MIN_OCCUPANCY:
            raise ValidationError("occupancy below minimum")

        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "distance_km", float(self.distance_km))
        object.__setattr__(self, "occupancy", float(self.occupancy))
        object.__setattr__(self, "ts", int(self.ts) if self.ts else now_epoch())
        if self.mode not in PRIVATE_VEHICLE_MODES:
            object.__setattr__(self, "fuel_type", "")
            object.__setattr__(self, "vehicle_size", "")

    @property
    def is_private_vehicle(self) -> bool:
        return self.mode in PRIVATE_VEHICLE_MODES


@dataclass
class ApiLogRecord:
    ts: int = 0  # epoch seconds
    method: str = ""
    path: str = ""
    status: int = 0
    duration_ms: float = 0.0
    client_ip: str = ""
    user_id: str = ""  # empty if unknown


# ---------- Wire models ----------


class TransitIn(BaseModel):
    # mode/distance are checked by the route so a missing field maps to
    # "missing_fields" rather than a generic 422
    mode: Optional[str] = None
    distance_km: Optional[float] = None
    ts: Optional[int] = None
    fuel_type: str = ""
    vehicle_size: str = ""
    occupancy: float = 1.0


class RegisterIn(BaseModel):
    app_name: Optional[str] = None


class RegisterOut(BaseModel):
    user_id: str
    api_key: str
    app_name: str


class TransitEventOut(BaseModel):
    mode: str
    distance_km: float
    ts: int
    fuel_type: str = ""
    vehicle_size: str = ""
    occupancy: float = 1.0

    @classmethod
    def from_event(cls, ev: TransitEvent) -> "TransitEventOut":
        return cls(
            mode=ev.mode,
            distance_km=ev.distance_km,
            ts=ev.ts,
            fuel_type=ev.fuel_type,
            vehicle_size=ev.vehicle_size,
            occupancy=ev.occupancy,
        )


class ApiLogOut(BaseModel):
    ts: int
    method: str
    path: str
    status: int
    duration_ms: float
    client_ip: str
    user_id: str = ""
