"""Read-only repository ports for rules and their satellite data."""

from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from alerta_rag.domain.models import (
    BusinessRule,
    BusinessRuleDependency,
    BusinessRuleIncident,
    BusinessRuleOwnership,
    Project,
    ProjectBusinessRule,
)


class BusinessRuleRepositoryPort(Protocol):
    def find_all(self) -> list[BusinessRule]:
        """All rules in stable catalogue order."""
        ...

    def find_by_id(self, rule_id: str) -> BusinessRule | None: ...


class IncidentRepositoryPort(Protocol):
    def find_by_business_rule_id(self, rule_id: UUID) -> Sequence[BusinessRuleIncident]:
        """Incidents for a rule, most recent first."""
        ...


class OwnershipRepositoryPort(Protocol):
    def find_by_business_rule_id(self, rule_id: UUID) -> Sequence[BusinessRuleOwnership]: ...


class DependencyRepositoryPort(Protocol):
    def find_by_source_rule_id(self, rule_id: str) -> Sequence[BusinessRuleDependency]: ...

    def find_by_target_rule_id(self, rule_id: str) -> Sequence[BusinessRuleDependency]: ...


class ProjectRepositoryPort(Protocol):
    def find_by_id(self, project_id: UUID) -> Project | None: ...

    def find_rule_links(self, project_id: UUID) -> Sequence[ProjectBusinessRule]: ...
