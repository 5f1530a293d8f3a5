# services/footprint.py
from __future__ import annotations
from typing import Callable, Iterable

from models.emissions import FootprintSummary
from models.transit import TransitEvent

DAY_S = 24 * 3600
WEEK_S = 7 * DAY_S
MONTH_S = 30 * DAY_S

EventCost = Callable[[TransitEvent], float]


def summarize_events(
    events: Iterable[TransitEvent], cost: EventCost, now: float
) -> FootprintSummary:
    """
    Lifetime / trailing-7d / trailing-30d totals for one user's history.
    Window starts are inclusive and measured from ``now``.
    """
    week_start = now - WEEK_S
    month_start = now - MONTH_S

    lifetime = week = month = 0.0
    for ev in events:
        kg = cost(ev)
        lifetime += kg
        if ev.ts >= week_start:
            week += kg
        if ev.ts >= month_start:
            month += kg
    return FootprintSummary(
        lifetime_kg_co2=lifetime, week_kg_co2=week, month_kg_co2=month
    )


def average_weekly(
    histories: Iterable[Iterable[TransitEvent]], cost: EventCost, now: float
) -> float:
    """
    Mean weekly total over users with at least one event in the last 7 days.
    Users without such an event are left out of the denominator.
    """
    week_start = now - WEEK_S
    total = 0.0
    users_with_data = 0
    for events in histories:
        u_week = 0.0
        has = False
        for ev in events:
            if ev.ts >= week_start:
                u_week += cost(ev)
                has = True
        if has:
            total += u_week
            users_with_data += 1
    if users_with_data == 0:
        return 0.0
    return total / users_with_data
