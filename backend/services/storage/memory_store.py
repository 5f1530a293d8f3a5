# services/storage/memory_store.py
from __future__ import annotations
import threading
import time
from typing import Callable, Dict, List, Optional

from core.cache import GenerationCache
from core.interfaces import TransitStore
from models.emissions import EmissionFactor, FactorKey, FootprintSummary
from models.transit import ApiLogRecord, TransitEvent
from services.auth import hash_key, key_matches
from services.emissions.calculator import EmissionCalculator
from services.emissions.resolver import FactorResolver
from services.footprint import average_weekly, summarize_events


class InMemoryStore(TransitStore):
    """
    Process-local store. Every read and write of shared state happens under
    one re-entrant lock (re-entrant because summarize() resolves factors
    through this same store).
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._mu = threading.RLock()
        self._clock = clock
        self._api_keys: Dict[str, str] = {}
        self._app_names: Dict[str, str] = {}
        self._events: Dict[str, List[TransitEvent]] = {}
        self._summaries: GenerationCache[FootprintSummary] = GenerationCache()
        self._logs: List[ApiLogRecord] = []
        self._factors: Dict[FactorKey, EmissionFactor] = {}
        self._calculator = EmissionCalculator(FactorResolver(self))

    # ---------- API keys ----------
    def set_api_key(self, user: str, key: str, app_name: str = "") -> None:
        with self._mu:
            self._api_keys[user] = hash_key(key)
            if app_name:
                self._app_names[user] = app_name

    def check_api_key(self, user: str, key: str) -> bool:
        with self._mu:
            stored = self._api_keys.get(user)
        if stored is None:
            return False
        return key_matches(key, stored)

    # ---------- Request logs / admin ----------
    def append_log(self, rec: ApiLogRecord) -> None:
        with self._mu:
            self._logs.append(rec)

    def get_logs(self, limit: int = 100) -> List[ApiLogRecord]:
        with self._mu:
            if limit <= 0:
                return []
            return list(self._logs[-limit:])

    def clear_logs(self) -> None:
        with self._mu:
            self._logs.clear()

    def get_clients(self) -> List[str]:
        with self._mu:
            return list(self._events.keys())

    def clear_db_events(self) -> None:
        with self._mu:
            self._events.clear()
            self._summaries.clear()

    def clear_db(self) -> None:
        with self._mu:
            self._events.clear()
            self._api_keys.clear()
            self._app_names.clear()
            self._summaries.clear()
            self._logs.clear()
            self._factors.clear()

    # ---------- Events & footprint ----------
    def add_event(self, ev: TransitEvent) -> None:
        with self._mu:
            self._events.setdefault(ev.user_id, []).append(ev)
            self._summaries.invalidate(ev.user_id)

    def get_events(self, user: str) -> List[TransitEvent]:
        with self._mu:
            return list(self._events.get(user, ()))

    def summarize(self, user: str) -> FootprintSummary:
        with self._mu:
            cached = self._summaries.get(user)
            if cached is not None:
                return cached

            events = self._events.get(user)
            if not events:
                return FootprintSummary()

            generation = self._summaries.generation(user)
            s = summarize_events(events, self._calculator.for_event, self._clock())
            self._summaries.put(user, s, generation)
            return s

    def global_average_weekly(self) -> float:
        with self._mu:
            return average_weekly(
                self._events.values(), self._calculator.for_event, self._clock()
            )

    # ---------- Emission factors ----------
    def store_emission_factor(self, factor: EmissionFactor) -> None:
        with self._mu:
            self._factors[factor.key] = factor
            # summaries were computed with the old table
            self._summaries.clear()

    def get_emission_factor(
        self, mode: str, fuel_type: str, vehicle_size: str
    ) -> Optional[EmissionFactor]:
        with self._mu:
            return self._factors.get((mode, fuel_type, vehicle_size))

    def get_all_emission_factors(self) -> List[EmissionFactor]:
        with self._mu:
            return list(self._factors.values())

    def clear_emission_factors(self) -> None:
        with self._mu:
            self._factors.clear()
            self._summaries.clear()
