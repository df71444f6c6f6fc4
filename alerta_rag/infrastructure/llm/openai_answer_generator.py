from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from importlib import import_module
from typing import Any

from alerta_rag.application.dto.context_dto import AnswerContext
from alerta_rag.application.ports.answer_generator_port import AnswerGeneratorPort, GeneratedAnswer
from alerta_rag.domain.errors import AnswerGenerationError
from alerta_rag.domain.models import ConfidenceLevel, ExplainFocus

logger = logging.getLogger(__name__)

FOCUS_DESCRIPTIONS = {
    ExplainFocus.BUSINESS: "Impacto em regras de negócio",
    ExplainFocus.TECHNICAL: "Detalhes técnicos e implementação",
    ExplainFocus.EXECUTIVE: "Resumo executivo para gestores",
}


def build_prompt(question: str, context: AnswerContext, focus: ExplainFocus) -> str:
    """Governance notes, structured context, focus and question, in that order."""
    return (
        "Você é um assistente de análise de regras de negócio.\n\n"
        "AVISOS IMPORTANTES:\n"
        "- Você é CONSULTIVO (somente leitura)\n"
        "- NUNCA invente riscos ou informações\n"
        "- NUNCA altere conclusões, rankings ou scores já calculados\n"
        "- Use APENAS o contexto fornecido\n\n"
        "CONTEXTO DO SISTEMA:\n"
        f"{json.dumps(context.to_dict(), ensure_ascii=False, indent=2)}\n\n"
        f"FOCO DA EXPLICAÇÃO: {FOCUS_DESCRIPTIONS[focus]}\n\n"
        "PERGUNTA DO USUÁRIO:\n"
        f"{question}\n\n"
        "Responda de forma clara, objetiva e baseada APENAS no contexto fornecido. "
        "Se não houver informação suficiente, diga isso explicitamente."
    )


@dataclass
class OpenAIAnswerGenerator(AnswerGeneratorPort):
    """OpenAI-compatible chat completions (OpenAI, vLLM, ...).

    Never raises: any failure comes back as success=False so the caller
    switches to its deterministic template.
    """

    base_url: str | None = None  # None -> api.openai.com
    api_key: str = "EMPTY"
    model: str = "gpt-4o-mini"
    timeout_s: float = 15.0
    temperature: float = 0.3
    max_tokens: int = 500

    def __post_init__(self) -> None:
        # Defer import of openai to first use to avoid a hard dependency in tests
        self._client: Any | None = None

    def _ensure_client(self) -> Any:
        if self._client is None:
            try:
                module = import_module("openai")
            except ImportError as ex:
                raise AnswerGenerationError("openai package not installed.") from ex
            self._client = module.OpenAI(
                base_url=self.base_url, api_key=self.api_key, timeout=self.timeout_s
            )
        return self._client

    def _complete(self, prompt: str) -> str:
        try:
            client = self._ensure_client()
            resp: Any = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            return resp.choices[0].message.content or ""
        except AnswerGenerationError:
            raise
        except Exception as ex:  # noqa: BLE001
            # Translate external errors to domain-specific errors
            raise AnswerGenerationError(f"LLM communication failed: {ex}") from ex

    def generate(
        self, question: str, context: AnswerContext, focus: ExplainFocus
    ) -> GeneratedAnswer:
        logger.info("calling answer model %s", self.model)
        try:
            text = self._complete(build_prompt(question, context, focus))
        except AnswerGenerationError as ex:
            logger.warning("answer generation failed: %s", ex)
            return GeneratedAnswer(text="", confidence=ConfidenceLevel.LOW, success=False)
        if not text.strip():
            return GeneratedAnswer(text="", confidence=ConfidenceLevel.LOW, success=False)
        return GeneratedAnswer(text=text, confidence=ConfidenceLevel.MEDIUM, success=True)
