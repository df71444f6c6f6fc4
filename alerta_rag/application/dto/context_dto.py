# alerta_rag/application/dto/context_dto.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class RuleContext:
    id: str
    name: str
    description: str
    domain: str
    criticality: str
    content: str | None = None
    source_file: str | None = None


@dataclass(frozen=True)
class IncidentContext:
    rule_id: str
    severity: str
    title: str
    description: str


@dataclass(frozen=True)
class OwnershipContext:
    rule_id: str
    team_name: str
    team_type: str
    contact_email: str


@dataclass(frozen=True)
class DependencyCount:
    """upstream: rules this rule depends on; downstream: rules depending on it."""

    upstream: int = 0
    downstream: int = 0


@dataclass(frozen=True)
class AnswerContext:
    """
    Fixed, explicitly-typed context handed to the answer generator.

    - rules:              ranked rules, in final rank order
    - incidents:          incidents of those rules (most recent first per rule)
    - ownerships:         first ownership per rule, when known
    - dependency_counts:  rule id -> DependencyCount
    """

    rules: list[RuleContext] = field(default_factory=list)
    incidents: list[IncidentContext] = field(default_factory=list)
    ownerships: list[OwnershipContext] = field(default_factory=list)
    dependency_counts: dict[str, DependencyCount] = field(default_factory=dict)

    @property
    def total_sources(self) -> int:
        return len(self.rules) + len(self.incidents) + len(self.ownerships)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready view for text-generation backends."""
        return asdict(self)
