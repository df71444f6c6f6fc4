from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, cast

from alerta_rag.application.ports.vector_store_port import RuleVectorStorePort
from alerta_rag.domain.errors import VectorStoreError
from alerta_rag.domain.types import Vector

try:  # pragma: no cover - exercised via tests with monkeypatch
    import chromadb
except Exception:  # noqa: BLE001
    chromadb = None


@dataclass
class ChromaRuleVectorStore(RuleVectorStorePort):
    """Persistent rule embeddings in a Chroma collection (cosine space).

    Only ids and embeddings are stored; rule text stays in the repositories.
    """

    persist_dir: str = "var/chroma/business_rules"
    collection: str = "business_rule_embeddings"
    _client: Any | None = None
    _coll: Any | None = None

    def __post_init__(self) -> None:
        if chromadb is None:
            raise VectorStoreError("chromadb not installed.")
        os.makedirs(self.persist_dir, exist_ok=True)
        try:
            self._client = chromadb.PersistentClient(path=self.persist_dir)
            self._coll = self._client.get_or_create_collection(
                name=self.collection,
                metadata={"hnsw:space": "cosine"},
            )
        except Exception as ex:  # noqa: BLE001
            raise VectorStoreError(f"Failed to init Chroma at '{self.persist_dir}': {ex}") from ex

    def save(self, rule_id: str, vector: Sequence[float]) -> None:
        try:
            self._coll.upsert(ids=[rule_id], embeddings=[[float(x) for x in vector]])
        except Exception as ex:  # noqa: BLE001
            raise VectorStoreError(f"Saving embedding for rule '{rule_id}' failed: {ex}") from ex

    def get_embedding(self, rule_id: str) -> Vector | None:
        try:
            result = cast(dict[str, Any], self._coll.get(ids=[rule_id], include=["embeddings"]))
        except Exception as ex:  # noqa: BLE001
            raise VectorStoreError(f"Reading embedding for rule '{rule_id}' failed: {ex}") from ex
        embeddings = result.get("embeddings")
        if embeddings is None or len(embeddings) == 0:
            return None
        return tuple(float(x) for x in embeddings[0])

    def find_top_k(self, query_vector: Sequence[float], k: int) -> list[str]:
        if k <= 0:
            return []
        try:
            count = int(self._coll.count())
            if count == 0:
                return []
            result = cast(
                dict[str, list[list[Any]]],
                self._coll.query(
                    query_embeddings=[[float(x) for x in query_vector]],
                    n_results=min(k, count),
                ),
            )
        except Exception as ex:  # noqa: BLE001
            raise VectorStoreError(f"Search failed: {ex}") from ex
        # Chroma returns ids ordered by ascending distance
        ids = (result.get("ids") or [[]])[0]
        return [str(rule_id) for rule_id in ids]

    def size(self) -> int:
        try:
            return int(self._coll.count())
        except Exception as ex:  # noqa: BLE001
            raise VectorStoreError(f"Count failed: {ex}") from ex
