from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass, field

from alerta_rag.application.ports.vector_store_port import RuleVectorStorePort
from alerta_rag.domain.errors import VectorStoreError
from alerta_rag.domain.similarity import cosine
from alerta_rag.domain.types import Vector

DEFAULT_MIN_SIMILARITY = 0.1


@dataclass
class InMemoryRuleVectorStore(RuleVectorStorePort):
    """Ephemeral rule-id -> embedding store with brute-force cosine search.

    Results below ``min_similarity`` are dropped. Ties keep insertion order.
    """

    min_similarity: float = DEFAULT_MIN_SIMILARITY
    _vectors: dict[str, Vector] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def save(self, rule_id: str, vector: Sequence[float]) -> None:
        if not vector:
            raise VectorStoreError(f"refusing to store empty embedding for rule {rule_id}")
        with self._lock:
            self._vectors[rule_id] = tuple(float(x) for x in vector)

    def get_embedding(self, rule_id: str) -> Vector | None:
        with self._lock:
            return self._vectors.get(rule_id)

    def find_top_k(self, query_vector: Sequence[float], k: int) -> list[str]:
        if k <= 0:
            return []
        with self._lock:
            items = list(self._vectors.items())
        scored = [(rule_id, cosine(query_vector, vec)) for rule_id, vec in items]
        scored = [pair for pair in scored if pair[1] >= self.min_similarity]
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return [rule_id for rule_id, _ in scored[:k]]

    def size(self) -> int:
        with self._lock:
            return len(self._vectors)
