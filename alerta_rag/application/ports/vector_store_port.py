from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from alerta_rag.domain.types import Vector

__all__ = ["RuleVectorStorePort"]


@runtime_checkable
class RuleVectorStorePort(Protocol):
    """Nearest-neighbour lookup over rule embeddings.

    Retrieval only calls find_top_k/get_embedding; save/size belong to the
    indexing side and must not be invoked during a query.
    """

    def find_top_k(self, query_vector: Sequence[float], k: int) -> list[str]: ...

    def get_embedding(self, rule_id: str) -> Vector | None: ...

    def save(self, rule_id: str, vector: Sequence[float]) -> None: ...

    def size(self) -> int: ...
