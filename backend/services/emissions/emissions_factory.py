# services/emissions/emissions_factory.py
from __future__ import annotations
from functools import lru_cache
from typing import Literal, Tuple

from models.emissions import EmissionFactor

from .factors import basic_defaults, defra_2024_factors

PresetName = Literal[
    "defra_2024",
    "basic",
]

DEFAULT_PRESET: PresetName = "defra_2024"


@lru_cache(maxsize=8)
def get_factors(preset: PresetName = DEFAULT_PRESET) -> Tuple[EmissionFactor, ...]:
    """
    Return a cached, immutable built-in factor table.
    - 'defra_2024' -> detailed DEFRA 2024 factors (the standard table)
    - 'basic'      -> conservative defaults
    """
    if preset == "basic":
        return tuple(basic_defaults())
    if preset == "defra_2024":
        return tuple(defra_2024_factors())
    raise ValueError(f"Unknown emission factor preset '{preset}'.")
