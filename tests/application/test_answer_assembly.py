"""Tests for AnswerAssembler and the deterministic template answer."""

from datetime import datetime
from uuid import UUID, uuid4

from alerta_rag.application.dto.context_dto import AnswerContext, DependencyCount
from alerta_rag.application.ports.answer_generator_port import GeneratedAnswer
from alerta_rag.application.use_cases.answer_assembly import (
    NO_INCIDENTS_IMPACT,
    TEMPLATE_NOTE,
    AnswerAssembler,
    build_template_answer,
)
from alerta_rag.application.use_cases.rule_lookup import RuleSatelliteLookup
from alerta_rag.domain.models import (
    BusinessRule,
    BusinessRuleDependency,
    BusinessRuleIncident,
    BusinessRuleOwnership,
    ConfidenceLevel,
    Criticality,
    Domain,
    ExplainFocus,
    IncidentSeverity,
    OwnershipRole,
    TeamType,
)

R1 = "00000000-0000-4000-8000-00000000000a"
R2 = "00000000-0000-4000-8000-00000000000b"


def make_rule(id_: str, name: str, criticality: Criticality = Criticality.ALTA) -> BusinessRule:
    return BusinessRule(
        id=id_,
        name=name,
        domain=Domain.PAYMENT,
        description=f"descricao de {name}",
        criticality=criticality,
    )


class FakeIncidents:
    def __init__(self, by_rule: dict[str, int]) -> None:
        self.by_rule = by_rule
        self.calls = 0

    def find_by_business_rule_id(self, rule_id: UUID) -> list[BusinessRuleIncident]:
        self.calls += 1
        n = self.by_rule.get(str(rule_id), 0)
        return [
            BusinessRuleIncident(
                id=uuid4(),
                business_rule_id=rule_id,
                title=f"incidente {i}",
                description="",
                severity=IncidentSeverity.HIGH,
                occurred_at=datetime(2024, 1, i + 1),
            )
            for i in range(n)
        ]


class FakeOwnerships:
    def __init__(self, owned: set[str]) -> None:
        self.owned = owned

    def find_by_business_rule_id(self, rule_id: UUID) -> list[BusinessRuleOwnership]:
        if str(rule_id) not in self.owned:
            return []
        return [
            BusinessRuleOwnership(
                id=uuid4(),
                business_rule_id=rule_id,
                team_name="Squad Pagamentos",
                team_type=TeamType.ENGINEERING,
                role=OwnershipRole.PRIMARY_OWNER,
                contact_email="pagamentos@empresa.com",
            )
        ]


class FakeDependencies:
    def __init__(self, deps: list[BusinessRuleDependency]) -> None:
        self.deps = deps

    def find_by_source_rule_id(self, rule_id: str) -> list[BusinessRuleDependency]:
        return [d for d in self.deps if d.source_rule_id == rule_id]

    def find_by_target_rule_id(self, rule_id: str) -> list[BusinessRuleDependency]:
        return [d for d in self.deps if d.target_rule_id == rule_id]


class FakeGenerator:
    def __init__(self, answer: GeneratedAnswer | None = None, error: Exception | None = None):
        self.answer = answer or GeneratedAnswer(text="ok", confidence=ConfidenceLevel.HIGH)
        self.error = error
        self.contexts: list[AnswerContext] = []

    def generate(self, question, context, focus):  # type: ignore[no-untyped-def]
        self.contexts.append(context)
        if self.error is not None:
            raise self.error
        return self.answer


def make_lookup(incidents: dict[str, int] | None = None, owned: set[str] | None = None):
    return RuleSatelliteLookup(
        incidents=FakeIncidents(incidents or {}),
        ownerships=FakeOwnerships(owned or set()),
        dependencies=FakeDependencies(
            [BusinessRuleDependency(source_rule_id=R1, target_rule_id=R2)]
        ),
    )


class TestTemplateAnswer:
    def test_lists_at_most_three_rules(self):
        rules = [make_rule(f"r{i}", f"REGRA_{i}") for i in range(5)]
        text, confidence = build_template_answer(rules)

        assert text.startswith("Encontrei 5 regra(s) relevante(s) no sistema:")
        assert "- REGRA_0 (PAYMENT, ALTA)" in text
        assert "- REGRA_2 (PAYMENT, ALTA)" in text
        assert "REGRA_3" not in text
        assert "... e mais 2 regra(s)." in text
        assert text.endswith(TEMPLATE_NOTE)
        assert confidence is ConfidenceLevel.MEDIUM

    def test_low_confidence_below_three_rules(self):
        _, confidence = build_template_answer([make_rule("r1", "REGRA_1")])
        assert confidence is ConfidenceLevel.LOW

    def test_no_more_line_for_three_rules(self):
        rules = [make_rule(f"r{i}", f"REGRA_{i}") for i in range(3)]
        text, _ = build_template_answer(rules)
        assert "e mais" not in text


class TestAnswerAssembler:
    def test_generator_answer_passed_through(self):
        assembler = AnswerAssembler(
            FakeGenerator(GeneratedAnswer(text="texto", confidence=ConfidenceLevel.HIGH))
        )
        out = assembler.assemble("q", ExplainFocus.BUSINESS, [make_rule(R1, "A")], make_lookup())

        assert out.text == "texto"
        assert out.confidence is ConfidenceLevel.HIGH
        assert out.used_template is False

    def test_unsuccessful_answer_uses_template(self):
        assembler = AnswerAssembler(
            FakeGenerator(GeneratedAnswer(text="x", confidence=ConfidenceLevel.HIGH, success=False))
        )
        out = assembler.assemble("q", ExplainFocus.BUSINESS, [make_rule(R1, "A")], make_lookup())

        assert out.used_template is True
        assert out.confidence is ConfidenceLevel.LOW
        assert "Encontrei 1 regra(s)" in out.text

    def test_blank_answer_uses_template(self):
        assembler = AnswerAssembler(FakeGenerator(GeneratedAnswer(text="   ")))
        out = assembler.assemble("q", ExplainFocus.BUSINESS, [make_rule(R1, "A")], make_lookup())
        assert out.used_template is True

    def test_exception_uses_template(self):
        assembler = AnswerAssembler(FakeGenerator(error=ValueError("bad json")))
        out = assembler.assemble("q", ExplainFocus.EXECUTIVE, [make_rule(R1, "A")], make_lookup())
        assert out.used_template is True

    def test_context_goes_to_generator_only(self):
        generator = FakeGenerator()
        lookup = make_lookup(incidents={R1: 1}, owned={R1})
        out = AnswerAssembler(generator).assemble(
            "q", ExplainFocus.TECHNICAL, [make_rule(R1, "A")], lookup
        )

        assert len(generator.contexts) == 1
        assert [r.id for r in generator.contexts[0].rules] == [R1]
        assert generator.contexts[0].total_sources == 3
        assert not hasattr(out, "context")

    def test_context_is_typed_and_complete(self):
        lookup = make_lookup(incidents={R1: 2}, owned={R1})
        ctx = AnswerAssembler.build_context([make_rule(R1, "A"), make_rule(R2, "B")], lookup)

        assert isinstance(ctx, AnswerContext)
        assert [r.id for r in ctx.rules] == [R1, R2]
        assert len(ctx.incidents) == 2
        assert [o.rule_id for o in ctx.ownerships] == [R1]
        assert ctx.dependency_counts[R1] == DependencyCount(upstream=1, downstream=0)
        assert ctx.dependency_counts[R2] == DependencyCount(upstream=0, downstream=1)
        assert ctx.total_sources == 5
        assert ctx.to_dict()["rules"][0]["name"] == "A"

    def test_ownerships_and_impacts(self):
        lookup = make_lookup(incidents={R1: 3}, owned={R1})
        out = AnswerAssembler(FakeGenerator()).assemble(
            "q", ExplainFocus.BUSINESS, [make_rule(R1, "A"), make_rule(R2, "B")], lookup
        )

        assert [o.rule_id for o in out.ownerships] == [R1]
        assert out.ownerships[0].owner == "Squad Pagamentos"
        assert out.ownerships[0].team == "ENGINEERING"
        assert out.related_impacts == ["Regra 'A' tem 3 incidente(s) registrado(s)"]

    def test_no_incidents_line(self):
        out = AnswerAssembler(FakeGenerator()).assemble(
            "q", ExplainFocus.BUSINESS, [make_rule(R1, "A")], make_lookup()
        )
        assert out.related_impacts == [NO_INCIDENTS_IMPACT]


class TestRuleSatelliteLookup:
    def test_lookups_are_memoized(self):
        incidents = FakeIncidents({R1: 1})
        lookup = RuleSatelliteLookup(incidents=incidents, ownerships=FakeOwnerships(set()))
        rule = make_rule(R1, "A")

        assert lookup.incident_count(rule) == 1
        assert len(lookup.incidents_for(rule)) == 1
        assert incidents.calls == 1

    def test_non_uuid_id_skipped(self):
        incidents = FakeIncidents({})
        lookup = RuleSatelliteLookup(incidents=incidents, ownerships=FakeOwnerships(set()))
        rule = make_rule("REGRA-LEGADA", "A")

        assert lookup.incident_count(rule) == 0
        assert lookup.ownerships_for(rule) == []
        assert incidents.calls == 0

    def test_no_dependency_repository(self):
        lookup = RuleSatelliteLookup(incidents=FakeIncidents({}), ownerships=FakeOwnerships(set()))
        assert lookup.dependency_count(make_rule(R1, "A")) == DependencyCount()
