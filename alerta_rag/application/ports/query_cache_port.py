"""Query embedding cache port.

Why (SAM): The cache is process-scoped state with an explicit lifecycle,
injected into the use case so tests can substitute an isolated instance.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from alerta_rag.domain.types import Vector


@dataclass(frozen=True)
class CacheStats:
    total_queries: int = 0
    hits: int = 0
    misses: int = 0
    size: int = 0

    @property
    def hit_rate(self) -> float:
        return self.hits / self.total_queries if self.total_queries > 0 else 0.0


@runtime_checkable
class QueryEmbeddingCachePort(Protocol):
    def get(self, key: str) -> Vector | None:
        """Return the memoized vector for a normalized query, or None on miss."""
        ...

    def put(self, key: str, vector: Sequence[float]) -> None:
        """Store a vector under a normalized query. Last writer wins."""
        ...

    def stats(self) -> CacheStats: ...

    def clear(self) -> None: ...
