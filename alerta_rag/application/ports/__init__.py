"""Application ports package.

Re-exports the retrieval ports so adapters and tests can import them from one place.
"""

from alerta_rag.application.ports.answer_generator_port import (
    AnswerGeneratorPort,
    GeneratedAnswer,
)
from alerta_rag.application.ports.embedding_port import EmbeddingPort
from alerta_rag.application.ports.query_cache_port import CacheStats, QueryEmbeddingCachePort
from alerta_rag.application.ports.repository_port import (
    BusinessRuleRepositoryPort,
    DependencyRepositoryPort,
    IncidentRepositoryPort,
    OwnershipRepositoryPort,
    ProjectRepositoryPort,
)
from alerta_rag.application.ports.vector_store_port import RuleVectorStorePort

__all__ = [
    "AnswerGeneratorPort",
    "GeneratedAnswer",
    "EmbeddingPort",
    "CacheStats",
    "QueryEmbeddingCachePort",
    "BusinessRuleRepositoryPort",
    "DependencyRepositoryPort",
    "IncidentRepositoryPort",
    "OwnershipRepositoryPort",
    "ProjectRepositoryPort",
    "RuleVectorStorePort",
]
