from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from alerta_rag.application.dto.context_dto import AnswerContext
from alerta_rag.domain.models import ConfidenceLevel, ExplainFocus


@dataclass(frozen=True)
class GeneratedAnswer:
    text: str
    confidence: ConfidenceLevel = ConfidenceLevel.LOW
    success: bool = True


@runtime_checkable
class AnswerGeneratorPort(Protocol):
    def generate(
        self, question: str, context: AnswerContext, focus: ExplainFocus
    ) -> GeneratedAnswer:
        """Phrase an answer from the structured context.

        Args:
            question: Raw user question
            context: Typed context (rules, incidents, ownerships, dependency counts)
            focus: Audience of the explanation

        Returns:
            GeneratedAnswer. success=False or blank text makes the caller
            fall back to its deterministic template.

        Note:
            The generator only phrases. Ranking and sources are decided
            before it is called and are never read back from its output.
        """
        ...
