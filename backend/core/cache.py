# core/cache.py
import threading
from typing import Dict, Generic, Optional, Tuple, TypeVar

V = TypeVar("V")


class GenerationCache(Generic[V]):
    """
    Key -> (generation, value) cache with explicit invalidation.

    There is no TTL: an entry lives until ``invalidate(key)`` is called.
    Every invalidation bumps the key's generation, so a value computed
    from a snapshot taken before the invalidation is rejected by ``put``.

        gen = cache.generation(user)
        summary = recompute(user)
        cache.put(user, summary, gen)   # dropped if a write happened meanwhile
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._generations: Dict[str, int] = {}
        self._store: Dict[str, Tuple[int, V]] = {}

    def generation(self, key: str) -> int:
        with self._lock:
            return self._generations.get(key, 0)

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            rec = self._store.get(key)
            if rec is None:
                return None
            gen, val = rec
            if gen != self._generations.get(key, 0):
                self._store.pop(key, None)
                return None
            return val

    def put(self, key: str, val: V, generation: int) -> bool:
        with self._lock:
            if generation != self._generations.get(key, 0):
                return False
            self._store[key] = (generation, val)
            return True

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._generations[key] = self._generations.get(key, 0) + 1
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            # bump every known key so in-flight recomputations are discarded
            for key in list(self._generations.keys() | self._store.keys()):
                self._generations[key] = self._generations.get(key, 0) + 1
            self._store.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
