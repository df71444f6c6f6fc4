# alerta_rag/domain/models.py
# Domain models must be pure (no I/O, no external libs)
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class Criticality(str, Enum):
    """Business-importance tier of a rule. Strictly ordered BAIXA < MEDIA < ALTA < CRITICA."""

    BAIXA = "BAIXA"
    MEDIA = "MEDIA"
    ALTA = "ALTA"
    CRITICA = "CRITICA"

    @property
    def ordinal(self) -> int:
        return _CRITICALITY_ORDINALS[self]


_CRITICALITY_ORDINALS = {
    Criticality.BAIXA: 1,
    Criticality.MEDIA: 2,
    Criticality.ALTA: 3,
    Criticality.CRITICA: 4,
}


class Domain(str, Enum):
    PAYMENT = "PAYMENT"
    BILLING = "BILLING"
    ORDER = "ORDER"
    USER = "USER"
    GENERIC = "GENERIC"


class IncidentSeverity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class TeamType(str, Enum):
    ENGINEERING = "ENGINEERING"
    PRODUCT = "PRODUCT"
    OPERATIONS = "OPERATIONS"
    BUSINESS = "BUSINESS"


class OwnershipRole(str, Enum):
    PRIMARY_OWNER = "PRIMARY_OWNER"
    SECONDARY_OWNER = "SECONDARY_OWNER"
    BACKUP = "BACKUP"


class MatchType(str, Enum):
    """Why a rule was retrieved."""

    SEMANTIC = "SEMANTIC"
    KEYWORD = "KEYWORD"
    HYBRID = "HYBRID"
    FALLBACK = "FALLBACK"


class ConfidenceLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ExplainFocus(str, Enum):
    BUSINESS = "BUSINESS"
    TECHNICAL = "TECHNICAL"
    EXECUTIVE = "EXECUTIVE"


@dataclass(frozen=True)
class BusinessRule:
    """
    Immutable business rule as seen by the retrieval engine (read-only per query).

    - id:           stable identifier (UUID string for seeded rules, free-form otherwise)
    - name:         rule code name, e.g. REGRA_CALCULO_HORAS_PJ
    - content:      full markdown/file content, empty when unknown
    - source_file:  path of the rule document in the repository, if any
    """

    id: str
    name: str
    domain: Domain
    description: str
    criticality: Criticality
    content: str = ""
    source_file: str | None = None
    owner: str | None = None


@dataclass(frozen=True)
class BusinessRuleIncident:
    id: UUID
    business_rule_id: UUID
    title: str
    description: str
    severity: IncidentSeverity
    occurred_at: datetime


@dataclass(frozen=True)
class BusinessRuleOwnership:
    id: UUID
    business_rule_id: UUID
    team_name: str
    team_type: TeamType
    role: OwnershipRole
    contact_email: str
    approval_required: bool = False


@dataclass(frozen=True)
class BusinessRuleDependency:
    """Directed edge: source rule depends on target rule."""

    source_rule_id: str
    target_rule_id: str
    dependency_type: str = "DEPENDS_ON"
    description: str = ""


@dataclass(frozen=True)
class Project:
    id: UUID
    name: str
    active: bool = True


@dataclass(frozen=True)
class ProjectBusinessRule:
    project_id: UUID
    business_rule_id: str


@dataclass(frozen=True)
class RuleScoreDetail:
    """Audit trail of why a returned rule was selected and where it ranked."""

    rule_id: str
    rule_name: str
    match_type: MatchType
    semantic_score: float
    keyword_score: int
    final_rank_position: int
    included_by_fallback: bool


@dataclass(frozen=True)
class SourceReference:
    id: str
    title: str
    domain: Domain
    criticality: Criticality
    summary: str
    type: str = "BUSINESS_RULE"
