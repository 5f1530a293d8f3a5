# services/emissions/resolver.py
from __future__ import annotations
from typing import Optional

from core.interfaces import FactorSource
from models.emissions import EmissionFactor

from .factors import fallback_factor, get_default_factor


class FactorResolver:
    """
    Resolution order:
      1. persisted factors (``source``), exact key
      2. built-in DEFRA 2024 table, exact key
      3. per-mode fallback rate
    Never raises on a miss.
    """

    def __init__(self, source: Optional[FactorSource] = None) -> None:
        self.source = source

    def resolve(self, mode: str, fuel_type: str, vehicle_size: str) -> EmissionFactor:
        if self.source is not None:
            stored = self.source.get_emission_factor(mode, fuel_type, vehicle_size)
            if stored is not None:
                return stored

        standard = get_default_factor(mode, fuel_type, vehicle_size)
        if standard is not None:
            return standard

        return fallback_factor(mode, fuel_type, vehicle_size)
