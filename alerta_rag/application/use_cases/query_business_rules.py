# alerta_rag/application/use_cases/query_business_rules.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout

from alerta_rag.application.dto.query_dto import (
    MAX_SOURCES,
    MIN_SOURCES,
    ProjectScope,
    RetrievalRequest,
    RetrievalResponse,
)
from alerta_rag.application.ports.embedding_port import EmbeddingPort
from alerta_rag.application.ports.query_cache_port import QueryEmbeddingCachePort
from alerta_rag.application.ports.repository_port import (
    BusinessRuleRepositoryPort,
    DependencyRepositoryPort,
    IncidentRepositoryPort,
    OwnershipRepositoryPort,
    ProjectRepositoryPort,
)
from alerta_rag.application.ports.vector_store_port import RuleVectorStorePort
from alerta_rag.application.use_cases.answer_assembly import AnswerAssembler
from alerta_rag.application.use_cases.rule_lookup import RuleSatelliteLookup
from alerta_rag.domain.errors import DomainError, ProjectNotFoundError, ValidationError
from alerta_rag.domain.models import (
    BusinessRule,
    ConfidenceLevel,
    ExplainFocus,
    SourceReference,
)
from alerta_rag.domain.services.keyword_matching import KeywordMatcher
from alerta_rag.domain.services.normalization import normalize_query
from alerta_rag.domain.services.ranking import (
    DEFAULT_POLICY,
    RankingPolicy,
    build_rule_scores,
    fallback_selection,
    merge_candidates,
    rank_rules,
)
from alerta_rag.domain.similarity import relevance
from alerta_rag.domain.types import Result, Vector

logger = logging.getLogger(__name__)

NO_DATA_ANSWER = (
    "Não há regras de negócio cadastradas para responder a esta pergunta. "
    "Cadastre ou importe regras e tente novamente."
)
DEFAULT_EMBEDDING_TIMEOUT_S = 5.0


class QueryBusinessRules:
    """
    Application Use-Case: hybrid (semantic + keyword) retrieval of business rules.

    Flow: validate -> project scope -> semantic & keyword retrieval -> merge
    -> fail-safe fallback -> composite ranking -> answer assembly.

    Only ports are used. Caller errors (blank question, bad max_sources,
    unknown project) come back as Result.failure; sub-system failures
    (embedding, vector store, cache, answer generator) are logged and degraded.
    The vector store is only read here; indexing is a separate use case.
    """

    def __init__(
        self,
        rules: BusinessRuleRepositoryPort,
        incidents: IncidentRepositoryPort,
        ownerships: OwnershipRepositoryPort,
        embedding: EmbeddingPort,
        vector_store: RuleVectorStorePort,
        assembler: AnswerAssembler,
        cache: QueryEmbeddingCachePort | None = None,
        keyword_matcher: KeywordMatcher | None = None,
        projects: ProjectRepositoryPort | None = None,
        dependencies: DependencyRepositoryPort | None = None,
        policy: RankingPolicy = DEFAULT_POLICY,
        embedding_timeout_s: float = DEFAULT_EMBEDDING_TIMEOUT_S,
    ) -> None:
        self.rules = rules
        self.incidents = incidents
        self.ownerships = ownerships
        self.embedding = embedding
        self.vector_store = vector_store
        self.assembler = assembler
        self.cache = cache
        self.keyword_matcher = keyword_matcher or KeywordMatcher()
        self.projects = projects
        self.dependencies = dependencies
        self.policy = policy
        self.embedding_timeout_s = embedding_timeout_s
        # shared by all requests; a timed-out call keeps its worker until it returns
        self._embed_pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="query-embed")

    def execute(self, req: RetrievalRequest) -> Result[RetrievalResponse, DomainError]:
        # 1) Validate
        if not req.question or not req.question.strip():
            return Result.failure(ValidationError("question must not be empty"))
        if not MIN_SOURCES <= req.max_sources <= MAX_SOURCES:
            return Result.failure(
                ValidationError(f"max_sources must be between {MIN_SOURCES} and {MAX_SOURCES}")
            )
        try:
            focus = ExplainFocus(req.focus)
        except ValueError:
            return Result.failure(ValidationError(f"unknown focus: {req.focus}"))

        # 2) Project scope
        scope = ProjectScope.global_scope()
        allowed_ids: set[str] | None = None
        if req.project_id is not None:
            project = self.projects.find_by_id(req.project_id) if self.projects else None
            if project is None:
                return Result.failure(ProjectNotFoundError(str(req.project_id)))
            allowed_ids = {
                link.business_rule_id for link in self.projects.find_rule_links(project.id)
            }
            scope = ProjectScope.scoped_to(project.id, project.name)
            logger.info(
                "project scope %s (%s): %d allowed rule(s)",
                project.name,
                project.id,
                len(allowed_ids),
            )

        catalogue = list(self.rules.find_all())
        scoped = (
            catalogue
            if allowed_ids is None
            else [r for r in catalogue if r.id in allowed_ids]
        )
        if not scoped:
            logger.info("no rules available in scope; returning no-data response")
            return Result.success(self._no_data_response(scope))

        # 3) Semantic and keyword retrieval (both degrade to empty, never fail)
        semantic_scores = self._semantic_hits(req.question, req.max_sources)
        normalized = normalize_query(req.question)
        keyword_scores = self.keyword_matcher.match_all(scoped, normalized)

        # 4) Merge, then fail-safe fallback
        candidates = merge_candidates(
            catalogue, semantic_scores.keys(), keyword_scores.keys(), allowed_ids
        )
        fallback_ids: set[str] = set()
        if not candidates:
            candidates = fallback_selection(scoped, self.policy.fallback_size)
            fallback_ids = {r.id for r in candidates}
            logger.info(
                "no semantic/keyword match; fallback to %d rule(s) by criticality",
                len(candidates),
            )

        # 5) Composite ranking
        lookup = RuleSatelliteLookup(self.incidents, self.ownerships, self.dependencies)
        incident_counts = {r.id: lookup.incident_count(r) for r in candidates}
        ranked = rank_rules(candidates, incident_counts, req.max_sources, self.policy)
        rule_scores = build_rule_scores(ranked, semantic_scores, keyword_scores, fallback_ids)
        for detail in rule_scores:
            logger.debug(
                "#%d %s match=%s semantic=%.3f keyword=%d incidents=%d",
                detail.final_rank_position,
                detail.rule_name,
                detail.match_type.value,
                detail.semantic_score,
                detail.keyword_score,
                incident_counts.get(detail.rule_id, 0),
            )

        # 6) Answer (generator only phrases; ranking is final at this point)
        assembled = self.assembler.assemble(req.question, focus, ranked, lookup)
        used_fallback = bool(fallback_ids) or assembled.used_template

        logger.info(
            "query answered: %d source(s), semantic=%d keyword=%d fallback=%s confidence=%s",
            len(ranked),
            len(semantic_scores),
            len(keyword_scores),
            used_fallback,
            assembled.confidence.value,
        )
        return Result.success(
            RetrievalResponse(
                answer=assembled.text,
                confidence=assembled.confidence,
                sources=[self._to_source(r) for r in ranked],
                rule_scores=rule_scores,
                used_fallback=used_fallback,
                project_scope=scope,
                ownerships=assembled.ownerships,
                related_impacts=assembled.related_impacts,
            )
        )

    # ------------------------------------------------------------------ helpers

    def _query_vector(self, question: str) -> Vector:
        key = normalize_query(question)
        cached = self._cache_get(key)
        if cached is not None:
            logger.info("query embedding cache HIT")
            return cached
        logger.info("query embedding cache MISS")
        future = self._embed_pool.submit(self.embedding.embed, question)
        vector: Vector = tuple(future.result(timeout=self.embedding_timeout_s))
        self._cache_put(key, vector)
        return vector

    def _cache_get(self, key: str) -> Vector | None:
        if self.cache is None:
            return None
        try:
            return self.cache.get(key)
        except Exception as ex:  # noqa: BLE001
            logger.warning("query cache read failed, treating as miss: %s", ex)
            return None

    def _cache_put(self, key: str, vector: Vector) -> None:
        if self.cache is None:
            return
        try:
            self.cache.put(key, vector)
        except Exception as ex:  # noqa: BLE001
            logger.warning("query cache write failed: %s", ex)

    def _semantic_hits(self, question: str, max_sources: int) -> dict[str, float]:
        """rule id -> relevance in [0, 1]; empty when any semantic sub-system fails."""
        try:
            vector = self._query_vector(question)
            ids = self.vector_store.find_top_k(vector, max_sources * 2)
            scores: dict[str, float] = {}
            for rule_id in ids:
                stored = self.vector_store.get_embedding(rule_id)
                scores[rule_id] = relevance(vector, stored) if stored is not None else 0.0
            return scores
        except FutureTimeout:
            logger.warning(
                "query embedding timed out after %.1fs, continuing keyword-only",
                self.embedding_timeout_s,
            )
            return {}
        except Exception as ex:  # noqa: BLE001
            logger.warning("semantic retrieval unavailable, continuing keyword-only: %s", ex)
            return {}

    @staticmethod
    def _to_source(rule: BusinessRule) -> SourceReference:
        return SourceReference(
            id=rule.id,
            title=rule.name,
            domain=rule.domain,
            criticality=rule.criticality,
            summary=rule.description,
        )

    @staticmethod
    def _no_data_response(scope: ProjectScope) -> RetrievalResponse:
        return RetrievalResponse(
            answer=NO_DATA_ANSWER,
            confidence=ConfidenceLevel.LOW,
            sources=[],
            rule_scores=[],
            used_fallback=True,
            project_scope=scope,
        )

