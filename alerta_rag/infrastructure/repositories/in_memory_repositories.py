"""Read-only in-memory repositories, loadable from a JSON seed.

Seed layout (every section optional except ``rules``)::

    {
      "rules":       [{"id", "name", "domain", "description", "criticality",
                       "content", "source_file", "owner"}],
      "incidents":   [{"id", "business_rule_id", "title", "description",
                       "severity", "occurred_at"}],
      "ownerships":  [{"id", "business_rule_id", "team_name", "team_type",
                       "role", "contact_email", "approval_required"}],
      "dependencies":[{"source_rule_id", "target_rule_id", "dependency_type",
                       "description"}],
      "projects":    [{"id", "name", "active", "rule_ids": [...]}]
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import UUID

from alerta_rag.domain.errors import RepositoryError
from alerta_rag.domain.models import (
    BusinessRule,
    BusinessRuleDependency,
    BusinessRuleIncident,
    BusinessRuleOwnership,
    Criticality,
    Domain,
    IncidentSeverity,
    OwnershipRole,
    Project,
    ProjectBusinessRule,
    TeamType,
)

logger = logging.getLogger(__name__)


class InMemoryBusinessRuleRepository:
    def __init__(self, rules: Iterable[BusinessRule] = ()) -> None:
        self._rules: dict[str, BusinessRule] = {}
        for rule in rules:
            if rule.id in self._rules:
                raise RepositoryError(f"duplicate rule id: {rule.id}")
            self._rules[rule.id] = rule

    def find_all(self) -> list[BusinessRule]:
        # dicts keep insertion order, which is the catalogue order
        return list(self._rules.values())

    def find_by_id(self, rule_id: str) -> BusinessRule | None:
        return self._rules.get(rule_id)


class InMemoryIncidentRepository:
    def __init__(self, incidents: Iterable[BusinessRuleIncident] = ()) -> None:
        self._by_rule: dict[UUID, list[BusinessRuleIncident]] = {}
        for incident in incidents:
            self._by_rule.setdefault(incident.business_rule_id, []).append(incident)
        for items in self._by_rule.values():
            items.sort(key=lambda i: i.occurred_at, reverse=True)

    def find_by_business_rule_id(self, rule_id: UUID) -> list[BusinessRuleIncident]:
        return list(self._by_rule.get(rule_id, ()))


class InMemoryOwnershipRepository:
    def __init__(self, ownerships: Iterable[BusinessRuleOwnership] = ()) -> None:
        self._by_rule: dict[UUID, list[BusinessRuleOwnership]] = {}
        for own in ownerships:
            self._by_rule.setdefault(own.business_rule_id, []).append(own)

    def find_by_business_rule_id(self, rule_id: UUID) -> list[BusinessRuleOwnership]:
        return list(self._by_rule.get(rule_id, ()))


class InMemoryDependencyRepository:
    def __init__(self, dependencies: Iterable[BusinessRuleDependency] = ()) -> None:
        self._deps = list(dependencies)

    def find_by_source_rule_id(self, rule_id: str) -> list[BusinessRuleDependency]:
        return [d for d in self._deps if d.source_rule_id == rule_id]

    def find_by_target_rule_id(self, rule_id: str) -> list[BusinessRuleDependency]:
        return [d for d in self._deps if d.target_rule_id == rule_id]


class InMemoryProjectRepository:
    def __init__(
        self,
        projects: Iterable[Project] = (),
        links: Iterable[ProjectBusinessRule] = (),
    ) -> None:
        self._projects = {p.id: p for p in projects}
        self._links: dict[UUID, list[ProjectBusinessRule]] = {}
        for link in links:
            self._links.setdefault(link.project_id, []).append(link)

    def find_by_id(self, project_id: UUID) -> Project | None:
        return self._projects.get(project_id)

    def find_rule_links(self, project_id: UUID) -> list[ProjectBusinessRule]:
        return list(self._links.get(project_id, ()))


@dataclass
class Repositories:
    rules: InMemoryBusinessRuleRepository = field(default_factory=InMemoryBusinessRuleRepository)
    incidents: InMemoryIncidentRepository = field(default_factory=InMemoryIncidentRepository)
    ownerships: InMemoryOwnershipRepository = field(default_factory=InMemoryOwnershipRepository)
    dependencies: InMemoryDependencyRepository = field(
        default_factory=InMemoryDependencyRepository
    )
    projects: InMemoryProjectRepository = field(default_factory=InMemoryProjectRepository)


# ---------------------------------------------------------------- seed parsing


def _rule(raw: Mapping[str, Any]) -> BusinessRule:
    return BusinessRule(
        id=str(raw["id"]),
        name=str(raw["name"]),
        domain=Domain(raw.get("domain", Domain.GENERIC.value)),
        description=str(raw.get("description", "")),
        criticality=Criticality(raw["criticality"]),
        content=str(raw.get("content") or ""),
        source_file=raw.get("source_file"),
        owner=raw.get("owner"),
    )


def _incident(raw: Mapping[str, Any]) -> BusinessRuleIncident:
    return BusinessRuleIncident(
        id=UUID(str(raw["id"])),
        business_rule_id=UUID(str(raw["business_rule_id"])),
        title=str(raw["title"]),
        description=str(raw.get("description", "")),
        severity=IncidentSeverity(raw["severity"]),
        occurred_at=datetime.fromisoformat(str(raw["occurred_at"])),
    )


def _ownership(raw: Mapping[str, Any]) -> BusinessRuleOwnership:
    return BusinessRuleOwnership(
        id=UUID(str(raw["id"])),
        business_rule_id=UUID(str(raw["business_rule_id"])),
        team_name=str(raw["team_name"]),
        team_type=TeamType(raw["team_type"]),
        role=OwnershipRole(raw.get("role", OwnershipRole.PRIMARY_OWNER.value)),
        contact_email=str(raw.get("contact_email", "")),
        approval_required=bool(raw.get("approval_required", False)),
    )


def _dependency(raw: Mapping[str, Any]) -> BusinessRuleDependency:
    return BusinessRuleDependency(
        source_rule_id=str(raw["source_rule_id"]),
        target_rule_id=str(raw["target_rule_id"]),
        dependency_type=str(raw.get("dependency_type", "DEPENDS_ON")),
        description=str(raw.get("description", "")),
    )


def _section(seed: Mapping[str, Any], key: str) -> Sequence[Mapping[str, Any]]:
    items = seed.get(key) or []
    if not isinstance(items, list):
        raise RepositoryError(f"seed section '{key}' must be a list")
    return items


def repositories_from_seed(seed: Mapping[str, Any]) -> Repositories:
    """Build all repositories from an already-parsed seed mapping."""
    try:
        rules = [_rule(r) for r in _section(seed, "rules")]
        incidents = [_incident(i) for i in _section(seed, "incidents")]
        ownerships = [_ownership(o) for o in _section(seed, "ownerships")]
        dependencies = [_dependency(d) for d in _section(seed, "dependencies")]
        projects: list[Project] = []
        links: list[ProjectBusinessRule] = []
        for raw in _section(seed, "projects"):
            project = Project(
                id=UUID(str(raw["id"])),
                name=str(raw["name"]),
                active=bool(raw.get("active", True)),
            )
            projects.append(project)
            links.extend(
                ProjectBusinessRule(project_id=project.id, business_rule_id=str(rule_id))
                for rule_id in raw.get("rule_ids", [])
            )
    except (KeyError, ValueError, TypeError) as ex:
        raise RepositoryError(f"invalid seed data: {ex}") from ex

    return Repositories(
        rules=InMemoryBusinessRuleRepository(rules),
        incidents=InMemoryIncidentRepository(incidents),
        ownerships=InMemoryOwnershipRepository(ownerships),
        dependencies=InMemoryDependencyRepository(dependencies),
        projects=InMemoryProjectRepository(projects, links),
    )


def load_seed_file(path: str | Path) -> Repositories:
    try:
        with open(path, encoding="utf-8") as f:
            seed = json.load(f)
    except (OSError, json.JSONDecodeError) as ex:
        raise RepositoryError(f"cannot read seed file '{path}': {ex}") from ex
    if not isinstance(seed, dict):
        raise RepositoryError(f"seed file '{path}' must contain a JSON object")
    repos = repositories_from_seed(seed)
    logger.info("loaded %d rule(s) from seed %s", len(repos.rules.find_all()), path)
    return repos
