"""HTTP API for business-rule questions.

Why: Consumable API without business logic; pure delegation to the use case.
"""

import threading
from typing import Any

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from alerta_rag.application.use_cases.query_business_rules import QueryBusinessRules
from alerta_rag.config.composition import build_query_use_case
from alerta_rag.config.log_setup import configure_logging
from alerta_rag.config.settings import AppSettings
from alerta_rag.domain.errors import DomainError, ProjectNotFoundError, ValidationError
from alerta_rag.interface.request_mapping import build_request, response_to_dict


# Pydantic models for request/response validation
class QueryRequestModel(BaseModel):
    """Request model for /v1/rules/query.

    Range checks (max_sources 1..10, non-blank question) live in the use case,
    so violations come back as 400 rather than 422.
    """

    question: str
    focus: str = "BUSINESS"
    max_sources: int = 5
    project_id: str | None = None


class SourceModel(BaseModel):
    type: str
    id: str
    title: str
    domain: str
    criticality: str
    summary: str


class RuleScoreModel(BaseModel):
    rule_id: str
    rule_name: str
    match_type: str
    semantic_score: float
    keyword_score: int
    final_rank_position: int
    included_by_fallback: bool


class ProjectScopeModel(BaseModel):
    scoped: bool
    project_id: str | None = None
    project_name: str | None = None


class OwnershipModel(BaseModel):
    rule_id: str
    rule_name: str
    owner: str
    team: str
    contact: str


class QueryResponseModel(BaseModel):
    """Response model for /v1/rules/query."""

    answer: str
    confidence: str
    sources: list[SourceModel]
    rule_scores: list[RuleScoreModel]
    used_fallback: bool
    project_scope: ProjectScopeModel
    ownerships: list[OwnershipModel]
    related_impacts: list[str]
    disclaimer: str


class CacheStatsModel(BaseModel):
    total_queries: int
    hits: int
    misses: int
    size: int
    hit_rate: float


app = FastAPI(title="Alerta RAG - Business Rule Retrieval API", version="1.0.0")
_engine: QueryBusinessRules | None = None
_engine_lock = threading.Lock()


def get_engine() -> QueryBusinessRules:
    """Engine built once per process (vector store + query cache live with it)."""
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                settings = AppSettings()
                configure_logging(settings.log_level)
                _engine = build_query_use_case(settings)
    return _engine


@app.on_event("startup")
def startup_event() -> None:
    """Build the engine (indexing + query cache) before the first request."""
    get_engine()


def _http_error(err: DomainError) -> HTTPException:
    if isinstance(err, ProjectNotFoundError):
        return HTTPException(status_code=404, detail=str(err))
    if isinstance(err, ValidationError):
        return HTTPException(status_code=400, detail=str(err))
    return HTTPException(status_code=500, detail=f"{type(err).__name__}: {err}")


@app.post("/v1/rules/query", response_model=QueryResponseModel)
def query_rules(
    req: QueryRequestModel, engine: QueryBusinessRules = Depends(get_engine)
) -> dict[str, Any]:
    """Answer a question with ranked, auditable business-rule sources.

    Example:
        POST /v1/rules/query
        {
            "question": "Onde alterar o cálculo de horas para Pessoa Jurídica?",
            "focus": "TECHNICAL",
            "max_sources": 3
        }
    """
    try:
        dto = build_request(req.question, req.focus, req.max_sources, req.project_id)
    except DomainError as err:
        raise _http_error(err) from err

    result = engine.execute(dto)
    if not result.ok or result.value is None:
        raise _http_error(result.error or DomainError("unknown error"))
    return response_to_dict(result.value)


@app.get("/v1/cache/stats", response_model=CacheStatsModel)
def cache_stats(engine: QueryBusinessRules = Depends(get_engine)) -> CacheStatsModel:
    if engine.cache is None:
        return CacheStatsModel(total_queries=0, hits=0, misses=0, size=0, hit_rate=0.0)
    stats = engine.cache.stats()
    return CacheStatsModel(
        total_queries=stats.total_queries,
        hits=stats.hits,
        misses=stats.misses,
        size=stats.size,
        hit_rate=stats.hit_rate,
    )


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "alerta-rag"}
