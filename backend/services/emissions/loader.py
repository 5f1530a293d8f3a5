# services/emissions/loader.py
from __future__ import annotations
import io
import json
import logging
import time
from dataclasses import replace
from typing import Any, Iterable, List, Optional

import pandas as pd

from core.exceptions import FactorLoadError, ValidationError
from core.interfaces import TransitStore
from models.emissions import EmissionFactor

from .emissions_factory import get_factors

log = logging.getLogger(__name__)

CSV_COLUMNS = ("mode", "fuel_type", "vehicle_size", "kg_co2_per_km", "source")


def load_preset(preset: str = "defra_2024") -> List[EmissionFactor]:
    """A built-in table by name; no download."""
    try:
        return list(get_factors(preset))  # type: ignore[arg-type]
    except ValueError as e:
        raise FactorLoadError(str(e)) from e


def load_from_items(items: Iterable[Any]) -> List[EmissionFactor]:
    """
    Build factors from already-decoded objects. Only ``mode`` and
    ``kg_co2_per_km`` are required; errors name the item index.
    """
    factors: List[EmissionFactor] = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise FactorLoadError("Each factor item must be a JSON object")
        for required in ("mode", "kg_co2_per_km"):
            if required not in item:
                raise FactorLoadError(f"item {i} is missing '{required}'")
        try:
            factors.append(
                EmissionFactor(
                    mode=str(item["mode"]),
                    fuel_type=str(item.get("fuel_type") or ""),
                    vehicle_size=str(item.get("vehicle_size") or ""),
                    kg_co2_per_km=float(item["kg_co2_per_km"]),
                    source=str(item.get("source") or "UNKNOWN"),
                    updated_at=int(item.get("updated_at") or 0),
                )
            )
        except ValidationError as e:
            raise FactorLoadError(f"item {i}: {e.reason}") from e
        except (TypeError, ValueError) as e:
            raise FactorLoadError(f"item {i}: {e}") from e
    return factors


def load_from_json(json_str: str) -> List[EmissionFactor]:
    """
    Parse a JSON array of objects:
      [{"mode": "car", "fuel_type": "petrol", "vehicle_size": "small",
        "kg_co2_per_km": 0.167, "source": "DEFRA-2024", "updated_at": 0}, ...]
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise FactorLoadError(f"JSON parsing error: {e}") from e

    if not isinstance(data, list):
        raise FactorLoadError("Expected JSON array of factors")
    try:
        return load_from_items(data)
    except FactorLoadError as e:
        raise FactorLoadError(f"JSON parsing error: {e}") from e


def load_from_csv(csv_str: str) -> List[EmissionFactor]:
    """
    Parse CSV with a header line followed by
      mode,fuel_type,vehicle_size,kg_co2_per_km,source
    rows. Columns are positional; header names are not checked.
    """
    try:
        df = pd.read_csv(
            io.StringIO(csv_str),
            header=0,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            skipinitialspace=True,
        )
    except pd.errors.EmptyDataError as e:
        raise FactorLoadError("CSV is empty") from e
    except pd.errors.ParserError as e:
        raise FactorLoadError(f"CSV format error: {e}") from e

    if df.shape[1] < len(CSV_COLUMNS):
        raise FactorLoadError(
            f"CSV format error: expected {len(CSV_COLUMNS)} columns, got {df.shape[1]}"
        )
    df = df.iloc[:, : len(CSV_COLUMNS)]
    df.columns = list(CSV_COLUMNS)

    factors: List[EmissionFactor] = []
    # header is row 1
    for row_num, (_, row) in enumerate(df.iterrows(), start=2):
        if any(pd.isna(row[c]) for c in CSV_COLUMNS):
            raise FactorLoadError(f"CSV format error at row {row_num}")
        mode, fuel_type, vehicle_size, kg_str, source = (
            str(row[c]).strip() for c in CSV_COLUMNS
        )
        try:
            kg = float(kg_str)
        except ValueError as e:
            raise FactorLoadError(
                f"Failed to parse kg_co2_per_km at row {row_num}: {e}"
            ) from e
        try:
            # CSV carries no timestamps
            factors.append(EmissionFactor(mode, fuel_type, vehicle_size, kg, source, 0))
        except ValidationError as e:
            raise FactorLoadError(f"Invalid factor at row {row_num}: {e.reason}") from e
    return factors


def load_into_store(
    store: TransitStore,
    factors: Iterable[EmissionFactor],
    now: Optional[int] = None,
) -> int:
    """Replace the persisted factor table wholesale. Returns the row count."""
    stamp = int(now if now is not None else time.time())
    store.clear_emission_factors()
    count = 0
    for f in factors:
        if not f.updated_at:
            f = replace(f, updated_at=stamp)
        store.store_emission_factor(f)
        count += 1
    log.info("Loaded %d emission factors into %s", count, type(store).__name__)
    return count
