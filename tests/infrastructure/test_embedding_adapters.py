import math
import threading
import time

import pytest

import alerta_rag.infrastructure.embeddings.sentence_transformers_adapter as st_mod
from alerta_rag.domain.errors import EmbeddingError
from alerta_rag.domain.similarity import cosine
from alerta_rag.infrastructure.embeddings.fallback_embedding_adapter import (
    FallbackEmbeddingAdapter,
)
from alerta_rag.infrastructure.embeddings.hash_embedding_adapter import HashEmbeddingAdapter


def _norm(vec):
    return math.sqrt(sum(x * x for x in vec))


class TestHashEmbeddingAdapter:
    def test_deterministic_and_normalized(self):
        emb = HashEmbeddingAdapter()
        a = emb.embed("Validação PIX")
        b = emb.embed("  validação pix ")

        assert a == b
        assert len(a) == 2048
        assert 0.999 < _norm(a) < 1.001

    def test_different_texts_differ(self):
        emb = HashEmbeddingAdapter()
        assert emb.embed("pix") != emb.embed("fatura")

    def test_accents_fold_to_same_token(self):
        emb = HashEmbeddingAdapter()
        assert emb.embed("Validação") == emb.embed("validacao")

    def test_shared_words_score_above_unrelated_words(self):
        emb = HashEmbeddingAdapter()
        pix = emb.embed("pix")

        assert cosine(pix, emb.embed("chave pix")) > 0.5
        # signed components: unrelated words are not pulled together
        assert cosine(pix, emb.embed("fatura")) < 0.1
        assert cosine(emb.embed("zzz qwerty lorem ipsum"), emb.embed("calculo de horas pj")) < 0.1

    def test_empty_text_is_zero_vector(self):
        emb = HashEmbeddingAdapter(dimension=8)
        assert emb.embed("   ") == [0.0] * 8
        assert emb.embed("?!") == [0.0] * 8

    def test_embed_texts(self):
        emb = HashEmbeddingAdapter(dimension=16)
        vectors = emb.embed_texts(["a", "b"])
        assert len(vectors) == 2 and all(len(v) == 16 for v in vectors)


class _FakeArray(list):
    """List standing in for a numpy array."""


class _FakeST:
    loads = 0

    def __init__(self, *args, **kwargs):  # noqa: ANN001
        type(self).loads += 1

    def encode(self, inputs, normalize_embeddings=True, convert_to_numpy=True, show_progress_bar=False):
        def _vec(text):
            raw = [float(len(text)), 1.0, 0.0]
            n = _norm(raw)
            return _FakeArray([x / n for x in raw]) if normalize_embeddings else _FakeArray(raw)

        if isinstance(inputs, str):
            return _vec(inputs)
        return [_vec(t) for t in inputs]


class _SlowST(_FakeST):
    def __init__(self, *args, **kwargs):  # noqa: ANN001
        time.sleep(0.05)
        super().__init__(*args, **kwargs)


class _BrokenST:
    def __init__(self, *args, **kwargs):  # noqa: ANN001
        raise OSError("model not found")


class TestSentenceTransformersAdapter:
    def test_embed_and_embed_texts_with_fake_model(self, monkeypatch):
        _FakeST.loads = 0
        monkeypatch.setattr(st_mod, "SentenceTransformer", _FakeST)
        adapter = st_mod.SentenceTransformersEmbeddingAdapter(device="cpu")

        vec = adapter.embed("pix")
        assert len(vec) == 3
        assert 0.999 < _norm(vec) < 1.001
        assert len(adapter.embed_texts(["a", "bb"])) == 2
        # model is loaded lazily, once
        assert _FakeST.loads == 1

    def test_concurrent_first_calls_load_model_once(self, monkeypatch):
        _SlowST.loads = 0
        monkeypatch.setattr(st_mod, "SentenceTransformer", _SlowST)
        adapter = st_mod.SentenceTransformersEmbeddingAdapter()
        results: list[list[float]] = []

        threads = [
            threading.Thread(target=lambda: results.append(adapter.embed("pix"))) for _ in range(8)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert _SlowST.loads == 1
        assert len(results) == 8

    def test_missing_library_raises_embedding_error(self, monkeypatch):
        monkeypatch.setattr(st_mod, "SentenceTransformer", None)
        adapter = st_mod.SentenceTransformersEmbeddingAdapter()
        with pytest.raises(EmbeddingError):
            adapter.embed("x")

    def test_model_load_failure_is_wrapped(self, monkeypatch):
        monkeypatch.setattr(st_mod, "SentenceTransformer", _BrokenST)
        adapter = st_mod.SentenceTransformersEmbeddingAdapter()
        with pytest.raises(EmbeddingError):
            adapter.embed_texts(["x"])


class _FailingEmbedding:
    def __init__(self):
        self.calls = 0

    def embed(self, text):
        self.calls += 1
        raise EmbeddingError("primary down")

    def embed_texts(self, texts):
        self.calls += 1
        raise EmbeddingError("primary down")


class TestFallbackEmbeddingAdapter:
    def test_uses_primary_when_healthy(self):
        primary = HashEmbeddingAdapter(dimension=4)
        adapter = FallbackEmbeddingAdapter(primary=primary, secondary=HashEmbeddingAdapter(8))
        assert len(adapter.embed("x")) == 4
        assert adapter.degraded is False

    def test_switches_after_first_failure_and_stays_switched(self):
        primary = _FailingEmbedding()
        adapter = FallbackEmbeddingAdapter(primary=primary, secondary=HashEmbeddingAdapter(8))

        assert len(adapter.embed("x")) == 8
        assert adapter.degraded is True
        assert len(adapter.embed_texts(["y", "z"])) == 2
        assert primary.calls == 1
