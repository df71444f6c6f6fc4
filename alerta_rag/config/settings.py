"""Application settings with environment-driven configuration.

Why: Only place reading the environment; backends are switched by name
     (vector store, embeddings, answer generator) without code changes.
"""

import os
from dataclasses import dataclass, field


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class AppSettings:
    """Application settings loaded from environment variables.

    This is the ONLY place where environment variables are read.
    All other layers receive settings via dependency injection.

    Backends:
    - vector_backend: "memory" (ephemeral) | "chroma" (persistent)
    - embedding_backend: "hash" (deterministic, offline) | "sentence_transformers"
    - answer_backend: "dummy" (offline phrasing) | "openai" (chat completions)
    """

    # ===== Vector Store Configuration =====
    vector_backend: str = field(
        default_factory=lambda: os.getenv("VECTOR_BACKEND", "memory").lower()
    )
    chroma_dir: str = field(
        default_factory=lambda: os.getenv("CHROMA_DIR", "var/chroma/business_rules")
    )
    collection: str = field(
        default_factory=lambda: os.getenv("VECTOR_COLLECTION", "business_rule_embeddings")
    )

    # ===== Embedding Configuration =====
    embedding_backend: str = field(
        default_factory=lambda: os.getenv("EMBEDDING_BACKEND", "hash").lower()
    )
    embedding_model: str = field(
        default_factory=lambda: os.getenv(
            "EMBEDDING_MODEL", "sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2"
        )
    )
    embedding_device: str = field(default_factory=lambda: os.getenv("EMBEDDING_DEVICE", "cpu"))
    # Supported: "cpu" | "cuda" | "mps"

    embedding_fallback: bool = field(default_factory=lambda: _flag("EMBEDDING_FALLBACK", "true"))
    # Wrap the primary embedder with the hash embedder after its first failure

    embedding_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("EMBEDDING_TIMEOUT_S", "5"))
    )
    # Upper bound for the query embedding; on timeout the query runs keyword-only

    # ===== Answer Generator Configuration =====
    answer_backend: str = field(
        default_factory=lambda: os.getenv("ANSWER_BACKEND", "dummy").lower()
    )
    llm_base_url: str = field(default_factory=lambda: os.getenv("LLM_BASE_URL", ""))
    # Empty string = api.openai.com
    llm_api_key: str = field(default_factory=lambda: os.getenv("LLM_API_KEY", "EMPTY"))
    llm_model: str = field(default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"))
    llm_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("LLM_TIMEOUT_S", "15"))
    )

    # ===== Retrieval Configuration =====
    query_cache_enabled: bool = field(
        default_factory=lambda: _flag("QUERY_CACHE_ENABLED", "true")
    )
    keyword_table_path: str = field(default_factory=lambda: os.getenv("KEYWORD_TABLE_PATH", ""))
    # Empty string = built-in keyword categories

    rank_criticality_weight: int = field(
        default_factory=lambda: int(os.getenv("RANK_CRITICALITY_WEIGHT", "10"))
    )
    rank_incident_weight: int = field(
        default_factory=lambda: int(os.getenv("RANK_INCIDENT_WEIGHT", "5"))
    )
    rank_incident_cap: int = field(
        default_factory=lambda: int(os.getenv("RANK_INCIDENT_CAP", "20"))
    )
    fallback_size: int = field(default_factory=lambda: int(os.getenv("FALLBACK_SIZE", "3")))

    # ===== Data / Runtime =====
    seed_data_path: str = field(default_factory=lambda: os.getenv("SEED_DATA_PATH", ""))
    # Empty string = built-in demo catalogue

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
