# alerta_rag/application/dto/query_dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from alerta_rag.domain.models import (
    ConfidenceLevel,
    ExplainFocus,
    RuleScoreDetail,
    SourceReference,
)

MIN_SOURCES = 1
MAX_SOURCES = 10

DISCLAIMER = (
    "Esta resposta é baseada exclusivamente em dados reais do sistema e não constitui "
    "decisão executiva nem aprovação de mudança. Para ações críticas, consulte os "
    "responsáveis técnicos e de negócio."
)


@dataclass(frozen=True)
class RetrievalRequest:
    """
    DTO for querying business rules.

    - question:     user question (non-blank)
    - focus:        audience of the explanation
    - max_sources:  number of rules to return (1..10)
    - project_id:   optional project scope; unknown ids are rejected
    """

    question: str
    focus: ExplainFocus = ExplainFocus.BUSINESS
    max_sources: int = 5
    project_id: UUID | None = None


@dataclass(frozen=True)
class ProjectScope:
    scoped: bool
    project_id: UUID | None = None
    project_name: str | None = None

    @staticmethod
    def scoped_to(project_id: UUID, project_name: str) -> "ProjectScope":
        return ProjectScope(scoped=True, project_id=project_id, project_name=project_name)

    @staticmethod
    def global_scope() -> "ProjectScope":
        return ProjectScope(scoped=False)


@dataclass(frozen=True)
class OwnershipSummary:
    rule_id: str
    rule_name: str
    owner: str
    team: str
    contact: str


@dataclass(frozen=True)
class RetrievalResponse:
    """Answer plus the auditable trail of which rules were used and why.

    sources and rule_scores always have equal length and matching order.
    """

    answer: str
    confidence: ConfidenceLevel
    sources: list[SourceReference]
    rule_scores: list[RuleScoreDetail]
    used_fallback: bool
    project_scope: ProjectScope = field(default_factory=ProjectScope.global_scope)
    ownerships: list[OwnershipSummary] = field(default_factory=list)
    related_impacts: list[str] = field(default_factory=list)
    disclaimer: str = DISCLAIMER
