# services/storage/mongo_store.py
from __future__ import annotations
import functools
import logging
import time
from dataclasses import asdict
from typing import Any, Callable, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.errors import PyMongoError

from core.cache import GenerationCache
from core.exceptions import StoreUnavailableError
from core.interfaces import TransitStore
from models.emissions import EmissionFactor, FootprintSummary
from models.transit import ApiLogRecord, TransitEvent
from services.auth import hash_key, key_matches
from services.emissions.calculator import EmissionCalculator
from services.emissions.resolver import FactorResolver
from services.footprint import WEEK_S, average_weekly, summarize_events

log = logging.getLogger(__name__)


def _factor_id(mode: str, fuel_type: str, vehicle_size: str) -> str:
    return f"{mode}|{fuel_type}|{vehicle_size}"


def _driver_errors(fn):
    """Surface pymongo failures as ``StoreUnavailableError`` (HTTP 503)."""

    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except PyMongoError as e:
            log.error("MongoDB %s failed: %s", fn.__name__, e)
            raise StoreUnavailableError(f"MongoDB unreachable: {e}") from e

    return wrapper


def _event_to_doc(ev: TransitEvent) -> Dict[str, Any]:
    return {
        "user_id": ev.user_id,
        "mode": ev.mode,
        "fuel_type": ev.fuel_type,
        "vehicle_size": ev.vehicle_size,
        "occupancy": ev.occupancy,
        "distance_km": ev.distance_km,
        "ts": ev.ts,
    }


def _doc_to_event(d: Dict[str, Any]) -> TransitEvent:
    return TransitEvent(
        user_id=d["user_id"],
        mode=d["mode"],
        distance_km=float(d["distance_km"]),
        ts=int(d["ts"]),
        fuel_type=d.get("fuel_type") or "",
        vehicle_size=d.get("vehicle_size") or "",
        occupancy=float(d.get("occupancy") or 1.0),
    )


class MongoStore(TransitStore):
    """
    MongoDB-backed store. Collections: events, api_keys, api_logs,
    emission_factors. The summary cache stays in-process; its generation
    markers take the place of a lock around network calls.
    """

    def __init__(
        self,
        uri: str = "mongodb://localhost:27017",
        dbname: str = "transit_footprint",
        *,
        client: Optional[MongoClient] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client or MongoClient(uri, serverSelectionTimeoutMS=5000)
        self._db = self._client[dbname]
        self._clock = clock
        self._summaries: GenerationCache[FootprintSummary] = GenerationCache()
        self._calculator = EmissionCalculator(FactorResolver(self))

    @_driver_errors
    def ping(self) -> None:
        self._client.admin.command("ping")

    # ---------- API keys ----------
    @_driver_errors
    def set_api_key(self, user: str, key: str, app_name: str = "") -> None:
        self._db.api_keys.update_one(
            {"_id": user},
            {"$set": {"api_key_hash": hash_key(key), "app_name": app_name}},
            upsert=True,
        )

    @_driver_errors
    def check_api_key(self, user: str, key: str) -> bool:
        doc = self._db.api_keys.find_one({"_id": user})
        if not doc or "api_key_hash" not in doc:
            return False
        return key_matches(key, doc["api_key_hash"])

    # ---------- Request logs / admin ----------
    @_driver_errors
    def append_log(self, rec: ApiLogRecord) -> None:
        self._db.api_logs.insert_one(asdict(rec))

    @_driver_errors
    def get_logs(self, limit: int = 100) -> List[ApiLogRecord]:
        if limit <= 0:
            return []
        cursor = (
            self._db.api_logs.find({}, {"_id": 0})
            .sort("_id", DESCENDING)
            .limit(limit)
        )
        out = [ApiLogRecord(**d) for d in cursor]
        out.reverse()
        return out

    @_driver_errors
    def clear_logs(self) -> None:
        self._db.api_logs.delete_many({})

    @_driver_errors
    def get_clients(self) -> List[str]:
        return list(self._db.events.distinct("user_id"))

    @_driver_errors
    def clear_db_events(self) -> None:
        self._db.events.delete_many({})
        self._summaries.clear()

    @_driver_errors
    def clear_db(self) -> None:
        for name in ("events", "api_keys", "api_logs", "emission_factors"):
            self._db[name].delete_many({})
        self._summaries.clear()

    # ---------- Events & footprint ----------
    @_driver_errors
    def add_event(self, ev: TransitEvent) -> None:
        self._db.events.insert_one(_event_to_doc(ev))
        self._summaries.invalidate(ev.user_id)

    @_driver_errors
    def get_events(self, user: str) -> List[TransitEvent]:
        cursor = self._db.events.find({"user_id": user}).sort("_id", ASCENDING)
        return [_doc_to_event(d) for d in cursor]

    def summarize(self, user: str) -> FootprintSummary:
        cached = self._summaries.get(user)
        if cached is not None:
            return cached

        # snapshot the generation before reading so a concurrent add wins
        generation = self._summaries.generation(user)
        events = self.get_events(user)
        if not events:
            return FootprintSummary()

        s = summarize_events(events, self._calculator.for_event, self._clock())
        self._summaries.put(user, s, generation)
        return s

    @_driver_errors
    def global_average_weekly(self) -> float:
        now = self._clock()
        by_user: Dict[str, List[TransitEvent]] = {}
        cursor = self._db.events.find({"ts": {"$gte": now - WEEK_S}})
        for d in cursor:
            ev = _doc_to_event(d)
            by_user.setdefault(ev.user_id, []).append(ev)
        return average_weekly(by_user.values(), self._calculator.for_event, now)

    # ---------- Emission factors ----------
    @_driver_errors
    def store_emission_factor(self, factor: EmissionFactor) -> None:
        self._db.emission_factors.replace_one(
            {"_id": _factor_id(*factor.key)},
            factor.to_doc(),
            upsert=True,
        )
        self._summaries.clear()

    @_driver_errors
    def get_emission_factor(
        self, mode: str, fuel_type: str, vehicle_size: str
    ) -> Optional[EmissionFactor]:
        doc = self._db.emission_factors.find_one(
            {"_id": _factor_id(mode, fuel_type, vehicle_size)}
        )
        if not doc:
            return None
        return EmissionFactor.from_doc(doc)

    @_driver_errors
    def get_all_emission_factors(self) -> List[EmissionFactor]:
        cursor = self._db.emission_factors.find({})
        return [EmissionFactor.from_doc(d) for d in cursor]

    @_driver_errors
    def clear_emission_factors(self) -> None:
        self._db.emission_factors.delete_many({})
        self._summaries.clear()
