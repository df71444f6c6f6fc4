"""Tests for composite ranking, fallback selection and match classification."""

import pytest

from alerta_rag.domain.models import BusinessRule, Criticality, Domain, MatchType
from alerta_rag.domain.services.ranking import (
    RankingPolicy,
    build_rule_scores,
    classify_match,
    composite_score,
    fallback_selection,
    merge_candidates,
    rank_rules,
)


def make_rule(id_: str, criticality: Criticality, name: str | None = None) -> BusinessRule:
    return BusinessRule(
        id=id_,
        name=name or f"REGRA_{id_.upper()}",
        domain=Domain.GENERIC,
        description="",
        criticality=criticality,
    )


class TestCompositeScore:
    def test_example_alta_with_two_incidents(self):
        r1 = make_rule("r1", Criticality.ALTA)
        assert composite_score(r1, 2) == 40

    @pytest.mark.parametrize(
        "criticality,incidents,expected",
        [
            (Criticality.BAIXA, 0, 10),
            (Criticality.MEDIA, 1, 25),
            (Criticality.CRITICA, 4, 60),
            (Criticality.CRITICA, 100, 60),  # incident part capped at 20
        ],
    )
    def test_bounds(self, criticality, incidents, expected):
        assert composite_score(make_rule("x", criticality), incidents) == expected

    def test_custom_policy(self):
        policy = RankingPolicy(criticality_weight=1, incident_weight=1, incident_cap=2)
        assert composite_score(make_rule("x", Criticality.CRITICA), 5, policy) == 6


class TestRankingPolicy:
    def test_rejects_non_positive_fallback(self):
        with pytest.raises(ValueError):
            RankingPolicy(fallback_size=0)

    def test_rejects_negative_weights(self):
        with pytest.raises(ValueError):
            RankingPolicy(incident_weight=-1)


class TestFallbackSelection:
    def test_top3_by_criticality_stable(self):
        catalogue = [
            make_rule("a", Criticality.MEDIA),
            make_rule("b", Criticality.ALTA),
            make_rule("c", Criticality.BAIXA),
            make_rule("d", Criticality.CRITICA),
            make_rule("e", Criticality.ALTA),
        ]
        picked = fallback_selection(catalogue, 3)
        assert [r.id for r in picked] == ["d", "b", "e"]

    def test_small_catalogue(self):
        catalogue = [make_rule("a", Criticality.BAIXA)]
        assert [r.id for r in fallback_selection(catalogue, 3)] == ["a"]

    def test_empty(self):
        assert fallback_selection([], 3) == []


class TestMergeCandidates:
    def test_union_in_catalogue_order(self):
        catalogue = [make_rule(i, Criticality.MEDIA) for i in ("a", "b", "c", "d")]
        merged = merge_candidates(catalogue, {"c", "a"}, {"a", "d"})
        assert [r.id for r in merged] == ["a", "c", "d"]

    def test_allow_list_intersection(self):
        catalogue = [make_rule(i, Criticality.MEDIA) for i in ("a", "b", "c")]
        merged = merge_candidates(catalogue, {"a", "b"}, {"c"}, allowed_ids={"b", "c"})
        assert [r.id for r in merged] == ["b", "c"]

    def test_empty_allow_list_yields_nothing(self):
        catalogue = [make_rule("a", Criticality.MEDIA)]
        assert merge_candidates(catalogue, {"a"}, set(), allowed_ids=set()) == []

    def test_unknown_ids_dropped(self):
        catalogue = [make_rule("a", Criticality.MEDIA)]
        assert [r.id for r in merge_candidates(catalogue, {"zzz", "a"}, set())] == ["a"]


class TestRankRules:
    def test_sorts_descending_and_truncates(self):
        r1 = make_rule("r1", Criticality.ALTA)
        r2 = make_rule("r2", Criticality.MEDIA)
        r3 = make_rule("r3", Criticality.CRITICA)
        ranked = rank_rules([r1, r2, r3], {"r1": 2, "r3": 1}, max_sources=2)
        # r3: 40+5=45, r1: 30+10=40, r2: 20
        assert [r.id for r in ranked] == ["r3", "r1"]

    def test_ties_keep_input_order(self):
        rules = [make_rule(i, Criticality.ALTA) for i in ("x", "y", "z")]
        assert [r.id for r in rank_rules(rules, {}, 10)] == ["x", "y", "z"]


class TestClassifyMatch:
    @pytest.mark.parametrize(
        "semantic,keyword,fallback,expected",
        [
            (0.8, 2, True, MatchType.FALLBACK),
            (0.8, 2, False, MatchType.HYBRID),
            (0.8, 0, False, MatchType.SEMANTIC),
            (0.0, 1, False, MatchType.KEYWORD),
            (0.0, 0, False, MatchType.FALLBACK),
        ],
    )
    def test_priority(self, semantic, keyword, fallback, expected):
        assert classify_match(semantic, keyword, fallback) is expected


class TestBuildRuleScores:
    def test_contiguous_ranks_and_flags(self):
        ranked = [make_rule("r1", Criticality.ALTA), make_rule("r2", Criticality.MEDIA)]
        details = build_rule_scores(ranked, {"r1": 0.82}, {"r1": 2})

        assert [d.final_rank_position for d in details] == [1, 2]
        assert details[0].match_type is MatchType.HYBRID
        assert details[0].semantic_score == pytest.approx(0.82)
        assert details[0].keyword_score == 2
        assert details[0].included_by_fallback is False
        # neither score: classified as fallback
        assert details[1].match_type is MatchType.FALLBACK
        assert details[1].included_by_fallback is True

    def test_fallback_ids_mark_fallback(self):
        ranked = [make_rule("r1", Criticality.CRITICA)]
        details = build_rule_scores(ranked, {}, {}, fallback_ids={"r1"})
        assert details[0].match_type is MatchType.FALLBACK
        assert details[0].included_by_fallback is True
