# alerta_rag/domain/services/ranking.py
# Pure domain services: no I/O, deterministic, no external libraries.
from __future__ import annotations

from collections.abc import Collection, Mapping, Sequence
from dataclasses import dataclass

from alerta_rag.domain.models import BusinessRule, MatchType, RuleScoreDetail


@dataclass(frozen=True)
class RankingPolicy:
    """
    Policy constants for composite ranking and the fail-safe selection.

    score = criticality.ordinal * criticality_weight
            + min(incident_count * incident_weight, incident_cap)

    With the defaults scores fall in [10, 60].
    """

    criticality_weight: int = 10
    incident_weight: int = 5
    incident_cap: int = 20
    fallback_size: int = 3

    def __post_init__(self) -> None:
        if self.fallback_size < 1:
            raise ValueError("fallback_size must be >= 1")
        if min(self.criticality_weight, self.incident_weight, self.incident_cap) < 0:
            raise ValueError("ranking weights must be non-negative")


DEFAULT_POLICY = RankingPolicy()


def composite_score(
    rule: BusinessRule, incident_count: int, policy: RankingPolicy = DEFAULT_POLICY
) -> int:
    incident_part = min(incident_count * policy.incident_weight, policy.incident_cap)
    return rule.criticality.ordinal * policy.criticality_weight + incident_part


def fallback_selection(catalogue: Sequence[BusinessRule], n: int) -> list[BusinessRule]:
    """
    Fail-safe set: top-n rules by criticality (CRITICA first).

    Python's sort is stable, so rules of equal criticality keep their
    catalogue order. Returns [] only for an empty catalogue or n <= 0.
    """
    if n <= 0:
        return []
    ordered = sorted(catalogue, key=lambda r: r.criticality.ordinal, reverse=True)
    return ordered[:n]


def merge_candidates(
    catalogue: Sequence[BusinessRule],
    semantic_ids: Collection[str],
    keyword_ids: Collection[str],
    allowed_ids: Collection[str] | None = None,
) -> list[BusinessRule]:
    """
    Union of both hit sets, restricted to the project allow-list when given.

    Output follows catalogue order so later stable sorts stay deterministic.
    Ids unknown to the catalogue are dropped.
    """
    merged = set(semantic_ids) | set(keyword_ids)
    if allowed_ids is not None:
        merged &= set(allowed_ids)
    return [rule for rule in catalogue if rule.id in merged]


def rank_rules(
    candidates: Sequence[BusinessRule],
    incident_counts: Mapping[str, int],
    max_sources: int,
    policy: RankingPolicy = DEFAULT_POLICY,
) -> list[BusinessRule]:
    """Stable sort (descending) by composite score, truncated to max_sources."""
    if max_sources <= 0:
        return []
    ordered = sorted(
        candidates,
        key=lambda r: composite_score(r, incident_counts.get(r.id, 0), policy),
        reverse=True,
    )
    return ordered[:max_sources]


def classify_match(
    semantic_score: float, keyword_score: int, included_by_fallback: bool
) -> MatchType:
    if included_by_fallback:
        return MatchType.FALLBACK
    if semantic_score > 0.0 and keyword_score > 0:
        return MatchType.HYBRID
    if semantic_score > 0.0:
        return MatchType.SEMANTIC
    if keyword_score > 0:
        return MatchType.KEYWORD
    # retrieved through a path that produced no score
    return MatchType.FALLBACK


def build_rule_scores(
    ranked: Sequence[BusinessRule],
    semantic_scores: Mapping[str, float],
    keyword_scores: Mapping[str, int],
    fallback_ids: Collection[str] = (),
) -> list[RuleScoreDetail]:
    """One RuleScoreDetail per ranked rule, ranks 1..len(ranked) in list order."""
    details: list[RuleScoreDetail] = []
    for position, rule in enumerate(ranked, start=1):
        semantic = semantic_scores.get(rule.id, 0.0)
        keyword = keyword_scores.get(rule.id, 0)
        match_type = classify_match(semantic, keyword, rule.id in fallback_ids)
        details.append(
            RuleScoreDetail(
                rule_id=rule.id,
                rule_name=rule.name,
                match_type=match_type,
                semantic_score=semantic,
                keyword_score=keyword,
                final_rank_position=position,
                included_by_fallback=match_type is MatchType.FALLBACK,
            )
        )
    return details
