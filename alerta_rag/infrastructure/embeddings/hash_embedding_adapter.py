from __future__ import annotations

import hashlib
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass

from alerta_rag.application.ports.embedding_port import EmbeddingPort
from alerta_rag.domain.services.normalization import fold_text

DEFAULT_DIMENSION = 2048
SLOTS_PER_TOKEN = 4
_TOKEN = re.compile(r"\w+")


@dataclass
class HashEmbeddingAdapter(EmbeddingPort):
    """Deterministic, dependency-free embedding derived from SHA-256.

    Signed feature hashing over accent-folded word tokens: every token adds
    +1/-1 to SLOTS_PER_TOKEN positions chosen by its digest. Texts sharing
    words get a positive cosine; texts without common words stay close to 0,
    below the vector store threshold. Useful for tests, demos and as the
    last-resort fallback. Text without word tokens yields the zero vector.
    """

    dimension: int = DEFAULT_DIMENSION

    def _token_slots(self, token: str) -> list[tuple[int, float]]:
        digest = hashlib.sha256(token.encode("utf-8")).digest()
        slots = []
        for s in range(SLOTS_PER_TOKEN):
            chunk = digest[4 * s : 4 * s + 4]
            index = int.from_bytes(chunk[:3], "big") % self.dimension
            slots.append((index, 1.0 if chunk[3] & 1 else -1.0))
        return slots

    def embed(self, text: str) -> list[float]:
        vector = [0.0] * self.dimension
        for token in _TOKEN.findall(fold_text(text)):
            for index, sign in self._token_slots(token):
                vector[index] += sign
        norm = math.sqrt(sum(x * x for x in vector))
        if norm == 0.0:
            return vector
        return [x / norm for x in vector]

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        return [self.embed(t) for t in texts]
