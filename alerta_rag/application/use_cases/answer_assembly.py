"""Answer assembly: typed context -> answer generator -> deterministic fallback.

Why (SAM): The generator only phrases the answer. Whatever it returns (or
raises), the ranked rules stay untouched and the caller always gets text.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from alerta_rag.application.dto.context_dto import (
    AnswerContext,
    IncidentContext,
    OwnershipContext,
    RuleContext,
)
from alerta_rag.application.dto.query_dto import OwnershipSummary
from alerta_rag.application.ports.answer_generator_port import AnswerGeneratorPort
from alerta_rag.application.use_cases.rule_lookup import RuleSatelliteLookup
from alerta_rag.domain.models import BusinessRule, ConfidenceLevel, ExplainFocus

logger = logging.getLogger(__name__)

TEMPLATE_LIST_LIMIT = 3
TEMPLATE_MEDIUM_MIN_RULES = 3
TEMPLATE_NOTE = "Resposta gerada de forma determinística (gerador de respostas indisponível)."
NO_INCIDENTS_IMPACT = "Nenhum incidente registrado para as regras encontradas"


@dataclass(frozen=True)
class AssembledAnswer:
    text: str
    confidence: ConfidenceLevel
    used_template: bool
    ownerships: list[OwnershipSummary] = field(default_factory=list)
    related_impacts: list[str] = field(default_factory=list)


def build_template_answer(rules: Sequence[BusinessRule]) -> tuple[str, ConfidenceLevel]:
    """Deterministic answer used whenever the generator is unavailable.

    Restates the number of rules, lists the first ranked ones with
    name/domain/criticality and appends a fixed note.
    """
    lines = [f"Encontrei {len(rules)} regra(s) relevante(s) no sistema:", ""]
    for rule in rules[:TEMPLATE_LIST_LIMIT]:
        lines.append(f"- {rule.name} ({rule.domain.value}, {rule.criticality.value})")
        if rule.description:
            lines.append(f"  {rule.description}")
        lines.append("")
    remaining = len(rules) - TEMPLATE_LIST_LIMIT
    if remaining > 0:
        lines.append(f"... e mais {remaining} regra(s). Veja as fontes abaixo.")
        lines.append("")
    lines.append(TEMPLATE_NOTE)

    confidence = (
        ConfidenceLevel.MEDIUM
        if len(rules) >= TEMPLATE_MEDIUM_MIN_RULES
        else ConfidenceLevel.LOW
    )
    return "\n".join(lines), confidence


class AnswerAssembler:
    def __init__(self, generator: AnswerGeneratorPort) -> None:
        self.generator = generator

    @staticmethod
    def build_context(
        rules: Sequence[BusinessRule], lookup: RuleSatelliteLookup
    ) -> AnswerContext:
        rule_ctx = [
            RuleContext(
                id=r.id,
                name=r.name,
                description=r.description,
                domain=r.domain.value,
                criticality=r.criticality.value,
                content=r.content or None,
                source_file=r.source_file or None,
            )
            for r in rules
        ]
        incidents = [
            IncidentContext(
                rule_id=r.id,
                severity=i.severity.value,
                title=i.title,
                description=i.description,
            )
            for r in rules
            for i in lookup.incidents_for(r)
        ]
        ownerships: list[OwnershipContext] = []
        for r in rules:
            owners = lookup.ownerships_for(r)
            if owners:
                first = owners[0]
                ownerships.append(
                    OwnershipContext(
                        rule_id=r.id,
                        team_name=first.team_name,
                        team_type=first.team_type.value,
                        contact_email=first.contact_email,
                    )
                )
        return AnswerContext(
            rules=rule_ctx,
            incidents=incidents,
            ownerships=ownerships,
            dependency_counts={r.id: lookup.dependency_count(r) for r in rules},
        )

    def assemble(
        self,
        question: str,
        focus: ExplainFocus,
        rules: Sequence[BusinessRule],
        lookup: RuleSatelliteLookup,
    ) -> AssembledAnswer:
        context = self.build_context(rules, lookup)

        text: str | None = None
        confidence = ConfidenceLevel.LOW
        try:
            generated = self.generator.generate(question, context, focus)
            if generated.success and generated.text and generated.text.strip():
                text, confidence = generated.text, generated.confidence
            else:
                logger.warning("answer generator returned no usable text; using template")
        except Exception as ex:  # noqa: BLE001
            logger.warning("answer generator failed, using template: %s", ex)

        used_template = text is None
        if text is None:
            text, confidence = build_template_answer(rules)

        return AssembledAnswer(
            text=text,
            confidence=confidence,
            used_template=used_template,
            ownerships=self._ownership_summaries(rules, lookup),
            related_impacts=self._related_impacts(rules, lookup),
        )

    @staticmethod
    def _ownership_summaries(
        rules: Sequence[BusinessRule], lookup: RuleSatelliteLookup
    ) -> list[OwnershipSummary]:
        out: list[OwnershipSummary] = []
        for r in rules:
            owners = lookup.ownerships_for(r)
            if not owners:
                continue
            own = owners[0]
            out.append(
                OwnershipSummary(
                    rule_id=r.id,
                    rule_name=r.name,
                    owner=own.team_name,
                    team=own.team_type.value,
                    contact=own.contact_email,
                )
            )
        return out

    @staticmethod
    def _related_impacts(
        rules: Sequence[BusinessRule], lookup: RuleSatelliteLookup
    ) -> list[str]:
        impacts = [
            f"Regra '{r.name}' tem {count} incidente(s) registrado(s)"
            for r in rules
            if (count := lookup.incident_count(r)) > 0
        ]
        return impacts or [NO_INCIDENTS_IMPACT]
