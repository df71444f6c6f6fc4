from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field

from alerta_rag.application.ports.query_cache_port import CacheStats, QueryEmbeddingCachePort
from alerta_rag.domain.types import Vector

logger = logging.getLogger(__name__)


@dataclass
class InMemoryQueryEmbeddingCache(QueryEmbeddingCachePort):
    """Process-scoped map: normalized query -> embedding vector.

    Entries never expire while the process lives. Vectors are stored as
    tuples, so a hit returns exactly the stored value. Two concurrent misses
    on the same key may both compute; the last put wins.
    """

    enabled: bool = True
    _entries: dict[str, Vector] = field(default_factory=dict, init=False, repr=False)
    _hits: int = field(default=0, init=False)
    _misses: int = field(default=0, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def get(self, key: str) -> Vector | None:
        if not self.enabled:
            return None
        with self._lock:
            vector = self._entries.get(key)
            if vector is None:
                self._misses += 1
            else:
                self._hits += 1
        logger.debug("query cache %s for key %r", "HIT" if vector is not None else "MISS", key)
        return vector

    def put(self, key: str, vector: Sequence[float]) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._entries[key] = tuple(vector)

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                total_queries=self._hits + self._misses,
                hits=self._hits,
                misses=self._misses,
                size=len(self._entries),
            )

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
