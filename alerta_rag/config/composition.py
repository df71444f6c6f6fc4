"""Composition root: the only place choosing concrete adapters."""

from __future__ import annotations

import logging

from alerta_rag.application.ports.answer_generator_port import AnswerGeneratorPort
from alerta_rag.application.ports.embedding_port import EmbeddingPort
from alerta_rag.application.ports.query_cache_port import QueryEmbeddingCachePort
from alerta_rag.application.ports.vector_store_port import RuleVectorStorePort
from alerta_rag.application.use_cases.answer_assembly import AnswerAssembler
from alerta_rag.application.use_cases.index_rules import IndexBusinessRules
from alerta_rag.application.use_cases.query_business_rules import QueryBusinessRules
from alerta_rag.config.settings import AppSettings
from alerta_rag.domain.errors import ValidationError
from alerta_rag.domain.services.keyword_matching import KeywordMatcher
from alerta_rag.domain.services.ranking import RankingPolicy
from alerta_rag.infrastructure.cache.in_memory_query_cache import InMemoryQueryEmbeddingCache
from alerta_rag.infrastructure.embeddings.fallback_embedding_adapter import (
    FallbackEmbeddingAdapter,
)
from alerta_rag.infrastructure.embeddings.hash_embedding_adapter import HashEmbeddingAdapter
from alerta_rag.infrastructure.embeddings.sentence_transformers_adapter import (
    SentenceTransformersEmbeddingAdapter,
)
from alerta_rag.infrastructure.keywords.yaml_keyword_table import load_keyword_matcher
from alerta_rag.infrastructure.llm.dummy_answer_generator import DummyAnswerGenerator
from alerta_rag.infrastructure.llm.openai_answer_generator import OpenAIAnswerGenerator
from alerta_rag.infrastructure.repositories.demo_catalogue import demo_repositories
from alerta_rag.infrastructure.repositories.in_memory_repositories import (
    Repositories,
    load_seed_file,
)
from alerta_rag.infrastructure.vectorstore.chroma_vector_store import ChromaRuleVectorStore
from alerta_rag.infrastructure.vectorstore.in_memory_vector_store import InMemoryRuleVectorStore

logger = logging.getLogger(__name__)


def build_embedding(settings: AppSettings) -> EmbeddingPort:
    backend = settings.embedding_backend

    if backend == "hash":
        return HashEmbeddingAdapter()

    if backend == "sentence_transformers":
        primary = SentenceTransformersEmbeddingAdapter(
            model_name=settings.embedding_model,
            device=settings.embedding_device,
        )
        if settings.embedding_fallback:
            return FallbackEmbeddingAdapter(primary=primary, secondary=HashEmbeddingAdapter())
        return primary

    raise ValidationError(f"unknown EMBEDDING_BACKEND: {backend}")


def build_vector_store(settings: AppSettings) -> RuleVectorStorePort:
    backend = settings.vector_backend

    if backend == "memory":
        return InMemoryRuleVectorStore()

    if backend == "chroma":
        return ChromaRuleVectorStore(
            persist_dir=settings.chroma_dir,
            collection=settings.collection,
        )

    raise ValidationError(f"unknown VECTOR_BACKEND: {backend}")


def build_answer_generator(settings: AppSettings) -> AnswerGeneratorPort:
    backend = settings.answer_backend

    if backend == "dummy":
        return DummyAnswerGenerator()

    if backend == "openai":
        return OpenAIAnswerGenerator(
            base_url=settings.llm_base_url or None,
            api_key=settings.llm_api_key,
            model=settings.llm_model,
            timeout_s=settings.llm_timeout_s,
        )

    raise ValidationError(f"unknown ANSWER_BACKEND: {backend}")


def build_query_cache(settings: AppSettings) -> QueryEmbeddingCachePort:
    return InMemoryQueryEmbeddingCache(enabled=settings.query_cache_enabled)


def build_keyword_matcher(settings: AppSettings) -> KeywordMatcher:
    if settings.keyword_table_path:
        return load_keyword_matcher(settings.keyword_table_path)
    return KeywordMatcher()


def build_ranking_policy(settings: AppSettings) -> RankingPolicy:
    try:
        return RankingPolicy(
            criticality_weight=settings.rank_criticality_weight,
            incident_weight=settings.rank_incident_weight,
            incident_cap=settings.rank_incident_cap,
            fallback_size=settings.fallback_size,
        )
    except ValueError as ex:
        raise ValidationError(f"invalid ranking configuration: {ex}") from ex


def build_repositories(settings: AppSettings) -> Repositories:
    if settings.seed_data_path:
        return load_seed_file(settings.seed_data_path)
    logger.info("SEED_DATA_PATH not set; using built-in demo catalogue")
    return demo_repositories()


def build_index_use_case(
    repos: Repositories, embedding: EmbeddingPort, vector_store: RuleVectorStorePort
) -> IndexBusinessRules:
    return IndexBusinessRules(rules=repos.rules, embedding=embedding, vector_store=vector_store)


def build_query_use_case(
    settings: AppSettings | None = None, index_on_start: bool = True
) -> QueryBusinessRules:
    """Build the retrieval engine with every collaborator chosen from settings.

    Args:
        settings: Explicit settings; defaults to AppSettings() from the environment.
        index_on_start: Embed not-yet-indexed rules into the vector store before
                        serving. Indexing never happens inside a query.
    """
    settings = settings or AppSettings()
    repos = build_repositories(settings)
    embedding = build_embedding(settings)
    vector_store = build_vector_store(settings)

    if index_on_start:
        build_index_use_case(repos, embedding, vector_store).execute()

    return QueryBusinessRules(
        rules=repos.rules,
        incidents=repos.incidents,
        ownerships=repos.ownerships,
        embedding=embedding,
        vector_store=vector_store,
        assembler=AnswerAssembler(build_answer_generator(settings)),
        cache=build_query_cache(settings),
        keyword_matcher=build_keyword_matcher(settings),
        projects=repos.projects,
        dependencies=repos.dependencies,
        policy=build_ranking_policy(settings),
        embedding_timeout_s=settings.embedding_timeout_s,
    )
