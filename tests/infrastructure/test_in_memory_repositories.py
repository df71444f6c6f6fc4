import json
from uuid import UUID

import pytest

from alerta_rag.domain.errors import RepositoryError
from alerta_rag.domain.models import Criticality
from alerta_rag.infrastructure.repositories.demo_catalogue import (
    DEMO_SEED,
    PAYMENTS_PROJECT_ID,
    PIX_ID,
    PJ_HOURS_ID,
    demo_repositories,
)
from alerta_rag.infrastructure.repositories.in_memory_repositories import (
    load_seed_file,
    repositories_from_seed,
)


class TestDemoCatalogue:
    def test_rules_in_seed_order(self):
        repos = demo_repositories()
        names = [r.name for r in repos.rules.find_all()]
        assert names == [r["name"] for r in DEMO_SEED["rules"]]
        assert repos.rules.find_by_id(PIX_ID).criticality is Criticality.CRITICA

    def test_incidents_most_recent_first(self):
        repos = demo_repositories()
        incidents = repos.incidents.find_by_business_rule_id(UUID(PJ_HOURS_ID))
        assert len(incidents) == 2
        assert incidents[0].occurred_at > incidents[1].occurred_at

    def test_ownerships_and_dependencies(self):
        repos = demo_repositories()
        owners = repos.ownerships.find_by_business_rule_id(UUID(PIX_ID))
        assert owners[0].team_name == "Squad Pagamentos"
        assert owners[0].approval_required is True
        assert len(repos.dependencies.find_by_source_rule_id(PIX_ID)) == 1

    def test_project_links(self):
        repos = demo_repositories()
        project = repos.projects.find_by_id(UUID(PAYMENTS_PROJECT_ID))
        assert project is not None and project.active
        links = repos.projects.find_rule_links(project.id)
        assert PIX_ID in {link.business_rule_id for link in links}

    def test_unknown_lookups_are_empty(self):
        repos = demo_repositories()
        assert repos.rules.find_by_id("missing") is None
        assert repos.projects.find_by_id(UUID(int=0)) is None
        assert repos.incidents.find_by_business_rule_id(UUID(int=0)) == []


class TestSeedLoading:
    def test_load_seed_file(self, tmp_path):
        path = tmp_path / "seed.json"
        path.write_text(
            json.dumps(
                {"rules": [{"id": "r1", "name": "REGRA", "criticality": "ALTA"}]}
            ),
            encoding="utf-8",
        )
        repos = load_seed_file(path)
        rule = repos.rules.find_all()[0]
        assert rule.id == "r1"
        assert rule.domain.value == "GENERIC"
        assert repos.projects.find_rule_links(UUID(int=1)) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(RepositoryError):
            load_seed_file(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "seed.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RepositoryError):
            load_seed_file(path)

    @pytest.mark.parametrize(
        "seed",
        [
            {"rules": [{"id": "r1", "name": "X", "criticality": "URGENTE"}]},
            {"rules": [{"name": "X", "criticality": "ALTA"}]},
            {"rules": "not-a-list"},
            {
                "rules": [
                    {"id": "r1", "name": "X", "criticality": "ALTA"},
                    {"id": "r1", "name": "Y", "criticality": "ALTA"},
                ]
            },
        ],
    )
    def test_invalid_seed_rejected(self, seed):
        with pytest.raises(RepositoryError):
            repositories_from_seed(seed)
