from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

from models.emissions import EmissionFactor, FootprintSummary
from models.transit import ApiLogRecord, TransitEvent


class FactorSource(ABC):
    """Anything that can answer exact-key emission factor lookups."""

    @abstractmethod
    def get_emission_factor(
        self, mode: str, fuel_type: str, vehicle_size: str
    ) -> Optional[EmissionFactor]: ...


class TransitStore(FactorSource):
    """All storage backends (in-memory, MongoDB, …) must implement this."""

    # ---------- API keys ----------
    @abstractmethod
    def set_api_key(self, user: str, key: str, app_name: str = "") -> None: ...

    @abstractmethod
    def check_api_key(self, user: str, key: str) -> bool: ...

    # ---------- Request logs / admin ----------
    @abstractmethod
    def append_log(self, rec: ApiLogRecord) -> None: ...

    @abstractmethod
    def get_logs(self, limit: int = 100) -> List[ApiLogRecord]: ...

    @abstractmethod
    def clear_logs(self) -> None: ...

    @abstractmethod
    def get_clients(self) -> List[str]: ...

    def get_client_data(self, client_id: str) -> List[TransitEvent]:
        return self.get_events(client_id)

    @abstractmethod
    def clear_db_events(self) -> None: ...

    @abstractmethod
    def clear_db(self) -> None: ...

    # ---------- Events & footprint ----------
    @abstractmethod
    def add_event(self, ev: TransitEvent) -> None: ...

    @abstractmethod
    def get_events(self, user: str) -> List[TransitEvent]: ...

    @abstractmethod
    def summarize(self, user: str) -> FootprintSummary: ...

    @abstractmethod
    def global_average_weekly(self) -> float: ...

    # ---------- Emission factors ----------
    @abstractmethod
    def store_emission_factor(self, factor: EmissionFactor) -> None: ...

    @abstractmethod
    def get_all_emission_factors(self) -> List[EmissionFactor]: ...

    @abstractmethod
    def clear_emission_factors(self) -> None: ...
