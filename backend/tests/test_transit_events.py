# backend/tests/test_transit_events.py
import dataclasses
import time
import pytest

from core.exceptions import ValidationError
from models.transit import TRANSIT_MODES, TransitEvent


@pytest.mark.parametrize("mode", sorted(TRANSIT_MODES))
def test_every_allowed_mode_constructs(mode):
    ev = TransitEvent("u1", mode, 3.0, 1_700_000_000)
    assert ev.mode == mode
    assert ev.ts == 1_700_000_000
    assert ev.occupancy == 1.0


@pytest.mark.parametrize(
    "kwargs,reason",
    [
        (dict(user_id="", mode="bus", distance_km=1.0), "user_id must not be empty"),
        (dict(user_id="u1", mode="rocket", distance_km=1.0), "invalid mode"),
        (dict(user_id="u1", mode="Bus", distance_km=1.0), "invalid mode"),
        (dict(user_id="u1", mode="bus", distance_km=-0.01), "negative distance"),
        (dict(user_id="u1", mode="car", distance_km=1.0, occupancy=0.5), "occupancy below minimum"),
        (dict(user_id="u1", mode="bus", distance_km=float("nan")), "distance must be finite"),
        (dict(user_id="u1", mode="bus", distance_km=float("inf")), "distance must be finite"),
        (dict(user_id="u1", mode="car", distance_km=1.0, occupancy=float("nan")), "occupancy must be finite"),
        (dict(user_id="u1", mode="taxi", distance_km=1.0, occupancy=float("inf")), "occupancy must be finite"),
    ],
)
def test_invalid_events_rejected_with_reason(kwargs, reason):
    with pytest.raises(ValidationError) as ei:
        TransitEvent(**kwargs)
    assert ei.value.reason == reason
    assert str(ei.value) == reason


def test_zero_or_missing_ts_defaults_to_now():
    before = int(time.time())
    a = TransitEvent("u1", "walk", 1.0)
    b = TransitEvent("u1", "walk", 1.0, 0)
    after = int(time.time())
    assert before <= a.ts <= after
    assert before <= b.ts <= after


def test_fuel_and_size_only_kept_for_private_vehicles():
    car = TransitEvent("u1", "car", 5.0, 1, fuel_type="diesel", vehicle_size="large")
    bus = TransitEvent("u1", "bus", 5.0, 1, fuel_type="diesel", vehicle_size="large")
    assert (car.fuel_type, car.vehicle_size) == ("diesel", "large")
    assert (bus.fuel_type, bus.vehicle_size) == ("", "")
    assert car.is_private_vehicle and not bus.is_private_vehicle


def test_events_are_immutable():
    ev = TransitEvent("u1", "bus", 5.0, 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        ev.distance_km = 10.0  # type: ignore[misc]


def test_zero_distance_allowed():
    assert TransitEvent("u1", "taxi", 0.0, 1).distance_km == 0.0
