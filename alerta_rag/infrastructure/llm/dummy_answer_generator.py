from __future__ import annotations

from dataclasses import dataclass

from alerta_rag.application.dto.context_dto import AnswerContext
from alerta_rag.application.ports.answer_generator_port import AnswerGeneratorPort, GeneratedAnswer
from alerta_rag.domain.models import ConfidenceLevel, ExplainFocus

RECOMMENDATION = "Recomendação: consulte as fontes detalhadas abaixo para decisões críticas."


def confidence_for(context: AnswerContext) -> ConfidenceLevel:
    total = context.total_sources
    if total >= 5:
        return ConfidenceLevel.HIGH
    if total >= 2:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


@dataclass
class DummyAnswerGenerator(AnswerGeneratorPort):
    """Offline generator: fixed, focus-specific phrasing built from context counts.

    Makes no external calls. Default backend for local runs and tests.
    """

    def generate(
        self, question: str, context: AnswerContext, focus: ExplainFocus
    ) -> GeneratedAnswer:
        del question  # phrasing depends on the context only
        rules = len(context.rules)
        incidents = len(context.incidents)
        owners = len(context.ownerships)

        parts = ["Com base nos dados do sistema, "]
        if focus is ExplainFocus.TECHNICAL:
            parts.append(f"identifiquei {rules} regra(s) com dependências técnicas. ")
            parts.append("As implementações seguem padrões de validação em múltiplas camadas. ")
            if incidents:
                parts.append("Incidentes anteriores indicam pontos de atenção em integrações.")
        elif focus is ExplainFocus.EXECUTIVE:
            parts.append(f"analisando {rules} regra(s), ")
            if owners:
                parts.append(f"com {owners} responsável(is) mapeado(s). ")
            parts.append("O impacto envolve múltiplos domínios de negócio. ")
            if incidents:
                parts.append(
                    f"Histórico mostra {incidents} incidente(s), "
                    "sugerindo necessidade de monitoramento."
                )
        else:
            parts.append(f"encontrei {rules} regra(s) de negócio relevante(s). ")
            if incidents:
                parts.append(f"Há registro de {incidents} incidente(s) relacionado(s). ")
            names = ", ".join(r.name for r in context.rules[:3])
            if names:
                parts.append(f"Principais regras: {names}.")

        text = "".join(parts).rstrip() + "\n\n" + RECOMMENDATION
        return GeneratedAnswer(text=text, confidence=confidence_for(context), success=True)
