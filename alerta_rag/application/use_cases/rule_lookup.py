# alerta_rag/application/use_cases/rule_lookup.py
from __future__ import annotations

import logging
from collections.abc import Sequence
from uuid import UUID

from alerta_rag.application.dto.context_dto import DependencyCount
from alerta_rag.application.ports.repository_port import (
    DependencyRepositoryPort,
    IncidentRepositoryPort,
    OwnershipRepositoryPort,
)
from alerta_rag.domain.models import BusinessRule, BusinessRuleIncident, BusinessRuleOwnership

logger = logging.getLogger(__name__)


def parse_rule_uuid(rule_id: str) -> UUID | None:
    """Incident/ownership stores are keyed by UUID; other ids have no satellite data."""
    try:
        return UUID(str(rule_id))
    except ValueError:
        return None


class RuleSatelliteLookup:
    """
    Per-request, memoized access to incidents, ownerships and dependencies.

    Rules whose id cannot be parsed into a UUID are skipped (logged once),
    never fatal to the request.
    """

    def __init__(
        self,
        incidents: IncidentRepositoryPort,
        ownerships: OwnershipRepositoryPort,
        dependencies: DependencyRepositoryPort | None = None,
    ) -> None:
        self.incidents = incidents
        self.ownerships = ownerships
        self.dependencies = dependencies
        self._incidents: dict[str, Sequence[BusinessRuleIncident]] = {}
        self._ownerships: dict[str, Sequence[BusinessRuleOwnership]] = {}
        self._skipped: set[str] = set()

    def _uuid_of(self, rule: BusinessRule) -> UUID | None:
        parsed = parse_rule_uuid(rule.id)
        if parsed is None and rule.id not in self._skipped:
            self._skipped.add(rule.id)
            logger.debug("rule id %r is not a UUID; skipping incident/ownership lookup", rule.id)
        return parsed

    def incidents_for(self, rule: BusinessRule) -> Sequence[BusinessRuleIncident]:
        if rule.id not in self._incidents:
            rule_uuid = self._uuid_of(rule)
            self._incidents[rule.id] = (
                list(self.incidents.find_by_business_rule_id(rule_uuid))
                if rule_uuid is not None
                else []
            )
        return self._incidents[rule.id]

    def incident_count(self, rule: BusinessRule) -> int:
        return len(self.incidents_for(rule))

    def ownerships_for(self, rule: BusinessRule) -> Sequence[BusinessRuleOwnership]:
        if rule.id not in self._ownerships:
            rule_uuid = self._uuid_of(rule)
            self._ownerships[rule.id] = (
                list(self.ownerships.find_by_business_rule_id(rule_uuid))
                if rule_uuid is not None
                else []
            )
        return self._ownerships[rule.id]

    def dependency_count(self, rule: BusinessRule) -> DependencyCount:
        if self.dependencies is None:
            return DependencyCount()
        return DependencyCount(
            upstream=len(self.dependencies.find_by_source_rule_id(rule.id)),
            downstream=len(self.dependencies.find_by_target_rule_id(rule.id)),
        )
