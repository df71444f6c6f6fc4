from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from alerta_rag.application.ports.embedding_port import EmbeddingPort
from alerta_rag.domain.errors import EmbeddingError

# Module attribute so tests can monkeypatch a fake model class
SentenceTransformer: Any | None
try:  # pragma: no cover - depends on the environment
    from sentence_transformers import SentenceTransformer as _SentenceTransformer
except Exception:  # noqa: BLE001
    SentenceTransformer = None
else:  # pragma: no cover
    SentenceTransformer = _SentenceTransformer


@dataclass
class SentenceTransformersEmbeddingAdapter(EmbeddingPort):
    """Multilingual sentence-transformers model (PT-BR capable), loaded on first use.

    Vectors are L2-normalized by the model, so cosine equals dot product.
    """

    model_name: str = "sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2"
    device: str = "cpu"
    local_files_only: bool = False
    _model: Any | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def _load(self) -> Any:
        with self._lock:
            if self._model is None:
                if SentenceTransformer is None:
                    raise EmbeddingError("sentence-transformers is not installed")
                try:
                    self._model = SentenceTransformer(
                        self.model_name,
                        device=self.device,
                        local_files_only=self.local_files_only,
                    )
                except Exception as ex:  # noqa: BLE001
                    raise EmbeddingError(
                        f"cannot load model '{self.model_name}': {ex}"
                    ) from ex
            return self._model

    def _encode(self, payload: str | list[str]) -> Any:
        model = self._load()
        try:
            return model.encode(
                payload, normalize_embeddings=True, convert_to_numpy=True, show_progress_bar=False
            )
        except Exception as ex:  # noqa: BLE001
            raise EmbeddingError(f"encoding with '{self.model_name}' failed: {ex}") from ex

    def embed(self, text: str) -> list[float]:
        return [float(x) for x in self._encode(text)]

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        if not texts:
            return []
        return [[float(x) for x in row] for row in self._encode(list(texts))]
