# services/emissions/factors.py
from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Tuple

from models.emissions import EmissionFactor, FactorKey

# Rows are (mode, fuel_type, vehicle_size, kg CO2e per passenger-km).
Row = Tuple[str, str, str, float]

BASIC_SOURCE = "BASIC-DEFAULT"
DEFRA_2024_SOURCE = "DEFRA-2024"
FALLBACK_SOURCE = "FALLBACK"

# Conservative approximations: one factor per fuel regardless of car size.
BASIC_ROWS: Tuple[Row, ...] = (
    # cars
    ("car", "petrol", "small", 0.200),
    ("car", "petrol", "medium", 0.200),
    ("car", "petrol", "large", 0.200),
    ("car", "diesel", "small", 0.180),
    ("car", "diesel", "medium", 0.180),
    ("car", "diesel", "large", 0.180),
    ("car", "electric", "small", 0.100),
    ("car", "electric", "medium", 0.100),
    ("car", "electric", "large", 0.100),
    ("car", "hybrid", "small", 0.150),
    ("car", "hybrid", "medium", 0.150),
    ("car", "hybrid", "large", 0.150),
    # taxis
    ("taxi", "petrol", "medium", 0.200),
    ("taxi", "diesel", "medium", 0.180),
    ("taxi", "electric", "medium", 0.100),
    ("taxi", "hybrid", "medium", 0.150),
    # public transit
    ("bus", "", "", 0.100),
    ("subway", "", "", 0.050),
    ("train", "", "", 0.070),
    # zero-emission
    ("bike", "", "", 0.0),
    ("walk", "", "", 0.0),
)

# UK Government GHG conversion factors 2024, well-to-wheel.
# https://www.gov.uk/guidance/greenhouse-gas-reporting-conversion-factors-2024
# Car/taxi rows are per vehicle-km (occupancy is applied by the calculator);
# public transit rows are already per passenger-km.
DEFRA_2024_ROWS: Tuple[Row, ...] = (
    ("car", "petrol", "small", 0.167),
    ("car", "petrol", "medium", 0.203),
    ("car", "petrol", "large", 0.291),
    ("car", "diesel", "small", 0.142),
    ("car", "diesel", "medium", 0.168),
    ("car", "diesel", "large", 0.241),
    ("car", "electric", "small", 0.074),
    ("car", "electric", "medium", 0.088),
    ("car", "electric", "large", 0.115),
    ("car", "hybrid", "small", 0.132),
    ("car", "hybrid", "medium", 0.155),
    ("car", "hybrid", "large", 0.210),
    ("taxi", "petrol", "medium", 0.203),
    ("taxi", "diesel", "medium", 0.168),
    ("taxi", "electric", "medium", 0.088),
    ("taxi", "hybrid", "medium", 0.155),
    ("bus", "", "", 0.073),
    ("subway", "", "", 0.041),
    ("train", "", "", 0.051),
    ("bike", "", "", 0.0),
    ("walk", "", "", 0.0),
)

# Last resort, keyed on mode only.
FALLBACK_RATES: Dict[str, float] = {
    "car": 0.18,
    "taxi": 0.18,
    "bus": 0.073,
    "subway": 0.041,
    "train": 0.041,
    "underground": 0.041,
    "rail": 0.041,
    "bike": 0.0,
    "walk": 0.0,
}
FALLBACK_UNKNOWN_RATE = 0.1


def _build(rows: Sequence[Row], source: str) -> List[EmissionFactor]:
    return [EmissionFactor(m, f, s, kg, source, 0) for (m, f, s, kg) in rows]


def basic_defaults() -> List[EmissionFactor]:
    """Simple conservative factors, usable without any external data."""
    return _build(BASIC_ROWS, BASIC_SOURCE)


def defra_2024_factors() -> List[EmissionFactor]:
    """Detailed DEFRA 2024 factors; the standard built-in table."""
    return _build(DEFRA_2024_ROWS, DEFRA_2024_SOURCE)


_STANDARD_INDEX: Dict[FactorKey, EmissionFactor] = {
    f.key: f for f in defra_2024_factors()
}


def get_default_factor(
    mode: str, fuel_type: str, vehicle_size: str
) -> Optional[EmissionFactor]:
    """Exact-key lookup in the standard (DEFRA 2024) table."""
    return _STANDARD_INDEX.get((mode, fuel_type, vehicle_size))


def fallback_factor(mode: str, fuel_type: str = "", vehicle_size: str = "") -> EmissionFactor:
    """Coarse per-mode factor; never fails, unknown modes get a conservative rate."""
    rate = FALLBACK_RATES.get(mode, FALLBACK_UNKNOWN_RATE)
    if mode in ("car", "taxi"):
        return EmissionFactor(mode, fuel_type, vehicle_size, rate, FALLBACK_SOURCE, 0)
    return EmissionFactor(mode or "unknown", "", "", rate, FALLBACK_SOURCE, 0)
