"""Deterministic, category-based lexical matching of rules against a question.

Why (SAM): Keyword retrieval must work when every semantic sub-system is down,
so it is a pure function over already-loaded rules. No I/O, cannot fail.

The score of a rule is the NUMBER OF CATEGORIES matched, never a term
frequency: a category counts once if the question mentions any of its
trigger terms AND the rule's name+description mentions any of its targets.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from alerta_rag.domain.models import BusinessRule
from alerta_rag.domain.services.normalization import fold_text


@dataclass(frozen=True)
class KeywordCategory:
    name: str
    triggers: tuple[str, ...]
    targets: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.triggers or not self.targets:
            raise ValueError(f"keyword category '{self.name}' needs triggers and targets")
        # terms are compared against folded text, so fold them once here
        object.__setattr__(self, "triggers", tuple(fold_text(t) for t in self.triggers))
        object.__setattr__(self, "targets", tuple(fold_text(t) for t in self.targets))


DEFAULT_CATEGORIES: tuple[KeywordCategory, ...] = (
    KeywordCategory(
        name="pagamento",
        triggers=("pagamento", "payment"),
        targets=("pagamento", "payment", "pagar", "pago"),
    ),
    KeywordCategory(name="pix", triggers=("pix",), targets=("pix",)),
    KeywordCategory(
        name="pessoa_juridica",
        triggers=("pj", "juridica", "corporativo", "empresa", "cnpj"),
        targets=("pj", "juridica", "corporativo", "cnpj", "pessoa juridica"),
    ),
    KeywordCategory(
        name="pessoa_fisica",
        triggers=("cpf", "fisica", "individual"),
        targets=("cpf", "fisica", "pessoa fisica"),
    ),
    KeywordCategory(
        name="validacao",
        triggers=("validar", "validacao", "documento", "cadastro", "registro"),
        targets=("validacao", "validar", "cadastro", "registro", "documento"),
    ),
    KeywordCategory(
        name="calculo",
        triggers=("calculo", "hora", "trabalho"),
        targets=("calculo", "hora", "trabalho"),
    ),
)


def _contains_any(text: str, terms: Iterable[str]) -> bool:
    return any(term in text for term in terms)


class KeywordMatcher:
    """Closed table of keyword categories applied to rules.

    The table is fixed at construction time; swap it by building a new
    matcher (see infrastructure.keywords.yaml_keyword_table).
    """

    def __init__(self, categories: Sequence[KeywordCategory] = DEFAULT_CATEGORIES) -> None:
        self.categories = tuple(categories)

    @staticmethod
    def _rule_text(rule: BusinessRule) -> str:
        return f"{fold_text(rule.name)} {fold_text(rule.description)}"

    def matching_categories(self, rule: BusinessRule, normalized_question: str) -> list[str]:
        """Names of the categories linking the question to this rule, in table order."""
        question = fold_text(normalized_question)
        rule_text = self._rule_text(rule)
        return [
            c.name
            for c in self.categories
            if _contains_any(question, c.triggers) and _contains_any(rule_text, c.targets)
        ]

    def match_score(self, rule: BusinessRule, normalized_question: str) -> int:
        return len(self.matching_categories(rule, normalized_question))

    def match_all(
        self, rules: Iterable[BusinessRule], normalized_question: str
    ) -> dict[str, int]:
        """Keyword hits: rule id -> matched category count, only for scores > 0."""
        hits: dict[str, int] = {}
        for rule in rules:
            score = self.match_score(rule, normalized_question)
            if score > 0:
                hits[rule.id] = score
        return hits
