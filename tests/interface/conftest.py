import pytest

BACKEND_ENV = (
    "VECTOR_BACKEND",
    "EMBEDDING_BACKEND",
    "ANSWER_BACKEND",
    "SEED_DATA_PATH",
    "KEYWORD_TABLE_PATH",
)


@pytest.fixture(autouse=True)
def offline_backends(monkeypatch):
    """Interface tests always run against the built-in demo catalogue."""
    for name in BACKEND_ENV:
        monkeypatch.delenv(name, raising=False)
