# backend/tests/test_emission_factors.py
import pytest

from core.exceptions import ValidationError
from models.emissions import EmissionFactor
from services.emissions.emissions_factory import get_factors
from services.emissions.factors import (
    basic_defaults,
    defra_2024_factors,
    fallback_factor,
    get_default_factor,
)
from services.emissions.resolver import FactorResolver
from services.storage.memory_store import InMemoryStore


def test_builtin_tables_have_unique_keys():
    for table in (basic_defaults(), defra_2024_factors()):
        keys = [f.key for f in table]
        assert len(keys) == len(set(keys))
        assert all(f.kg_co2_per_km >= 0 for f in table)


def test_builtin_tables_are_tagged_with_their_source():
    assert {f.source for f in basic_defaults()} == {"BASIC-DEFAULT"}
    assert {f.source for f in defra_2024_factors()} == {"DEFRA-2024"}


def test_basic_defaults_are_more_conservative_for_small_petrol_cars():
    basic = {f.key: f for f in basic_defaults()}
    defra = {f.key: f for f in defra_2024_factors()}
    key = ("car", "petrol", "small")
    assert basic[key].kg_co2_per_km == pytest.approx(0.200)
    assert defra[key].kg_co2_per_km == pytest.approx(0.167)


def test_get_default_factor_is_exact_key_match():
    f = get_default_factor("bus", "", "")
    assert f is not None and f.kg_co2_per_km == pytest.approx(0.073)
    # no partial matching on fuel/size
    assert get_default_factor("car", "petrol", "") is None
    assert get_default_factor("bus", "diesel", "") is None
    assert get_default_factor("hovercraft", "", "") is None


@pytest.mark.parametrize(
    "mode,rate",
    [
        ("car", 0.18),
        ("taxi", 0.18),
        ("bus", 0.073),
        ("subway", 0.041),
        ("train", 0.041),
        ("underground", 0.041),
        ("rail", 0.041),
        ("bike", 0.0),
        ("walk", 0.0),
        ("hovercraft", 0.1),
    ],
)
def test_fallback_rates_by_mode(mode, rate):
    f = fallback_factor(mode, "unobtainium", "huge")
    assert f.kg_co2_per_km == pytest.approx(rate)
    assert f.source == "FALLBACK"


def test_presets():
    assert get_factors("defra_2024") == tuple(defra_2024_factors())
    assert get_factors("basic") == tuple(basic_defaults())
    # cached
    assert get_factors("basic") is get_factors("basic")
    with pytest.raises(ValueError):
        get_factors("nope")  # type: ignore[arg-type]


def test_negative_factor_rejected():
    with pytest.raises(ValidationError) as ei:
        EmissionFactor("car", "petrol", "small", -0.1, "X", 0)
    assert ei.value.reason == "negative emission factor"


@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_non_finite_factor_rejected(value):
    with pytest.raises(ValidationError) as ei:
        EmissionFactor("bus", "", "", value, "X", 0)
    assert ei.value.reason == "emission factor must be finite"


# ---------- Resolver tiers ----------


def test_resolver_without_store_uses_standard_table():
    f = FactorResolver().resolve("car", "diesel", "large")
    assert f.source == "DEFRA-2024"
    assert f.kg_co2_per_km == pytest.approx(0.241)


def test_resolver_prefers_persisted_factor():
    store = InMemoryStore()
    store.store_emission_factor(EmissionFactor("bus", "", "", 0.5, "CUSTOM", 1))
    f = FactorResolver(store).resolve("bus", "", "")
    assert f.source == "CUSTOM"
    assert f.kg_co2_per_km == pytest.approx(0.5)


def test_resolver_skips_persisted_tier_on_miss():
    store = InMemoryStore()
    store.store_emission_factor(EmissionFactor("bus", "", "", 0.5, "CUSTOM", 1))
    f = FactorResolver(store).resolve("train", "", "")
    assert f.source == "DEFRA-2024"
    assert f.kg_co2_per_km == pytest.approx(0.051)


def test_resolver_falls_back_when_no_table_matches():
    store = InMemoryStore()
    f = FactorResolver(store).resolve("car", "", "")
    assert f.source == "FALLBACK"
    assert f.kg_co2_per_km == pytest.approx(0.18)


def test_resolver_never_raises_for_unknown_mode():
    f = FactorResolver().resolve("zeppelin", "", "")
    assert f.kg_co2_per_km == pytest.approx(0.1)
