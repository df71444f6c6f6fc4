from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from alerta_rag.application.ports.embedding_port import EmbeddingPort
from alerta_rag.domain.errors import EmbeddingError

logger = logging.getLogger(__name__)


@dataclass
class FallbackEmbeddingAdapter(EmbeddingPort):
    """Primary embedder with a secondary one taking over after the first failure.

    Once switched, the secondary is used for the rest of the process so that
    stored and query vectors keep coming from the same model.
    """

    primary: EmbeddingPort
    secondary: EmbeddingPort
    _degraded: bool = field(default=False, init=False)

    @property
    def degraded(self) -> bool:
        return self._degraded

    def _switch(self, ex: Exception) -> None:
        logger.warning("primary embedding backend failed, switching to fallback: %s", ex)
        self._degraded = True

    def embed(self, text: str) -> list[float]:
        if not self._degraded:
            try:
                return self.primary.embed(text)
            except EmbeddingError as ex:
                self._switch(ex)
        return self.secondary.embed(text)

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        if not self._degraded:
            try:
                return self.primary.embed_texts(texts)
            except EmbeddingError as ex:
                self._switch(ex)
        return self.secondary.embed_texts(texts)
