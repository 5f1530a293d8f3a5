from __future__ import annotations
import math
from typing import Optional

from core.exceptions import InvalidInput
from models.transit import MIN_OCCUPANCY, PRIVATE_VEHICLE_MODES, TransitEvent

from .resolver import FactorResolver


class EmissionCalculator:
    """Per-trip kg CO2e using factors from a ``FactorResolver``."""

    def __init__(self, resolver: Optional[FactorResolver] = None) -> None:
        self.resolver = resolver or FactorResolver()

    def calculate(
        self,
        mode: str,
        fuel_type: str,
        vehicle_size: str,
        occupancy: float,
        distance_km: float,
    ) -> float:
        if not math.isfinite(distance_km):
            raise InvalidInput("distance must be finite")
        if distance_km < 0.0:
            raise InvalidInput("negative distance")
        if not math.isfinite(occupancy):
            raise InvalidInput("occupancy must be finite")
        if occupancy < MIN_OCCUPANCY:
            raise InvalidInput("occupancy below minimum")

        factor = self.resolver.resolve(mode, fuel_type, vehicle_size)
        kg = factor.kg_co2_per_km * distance_km

        # Car/taxi factors are per vehicle, so riders share the trip.
        # Public transit factors are already per passenger.
        if mode in PRIVATE_VEHICLE_MODES:
            kg = kg / occupancy
        return kg

    def for_event(self, ev: TransitEvent) -> float:
        return self.calculate(
            ev.mode, ev.fuel_type, ev.vehicle_size, ev.occupancy, ev.distance_km
        )


def calculate_co2_emissions(
    mode: str,
    fuel_type: str,
    vehicle_size: str,
    occupancy: float,
    distance_km: float,
    resolver: Optional[FactorResolver] = None,
) -> float:
    """Module-level shortcut; without a resolver only built-in tables are used."""
    return EmissionCalculator(resolver).calculate(
        mode, fuel_type, vehicle_size, occupancy, distance_km
    )
