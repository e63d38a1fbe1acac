"""Tests for ranking, lookup, severity bands and the dashboard summary."""

from __future__ import annotations

import pytest

from readiness.policy.ranking import (
    RankedScores,
    ScoreBand,
    find_by_settlement,
    rank_scores,
    severity_band,
    summarize,
)


class TestRankScores:
    def test_empty(self):
        ranked = rank_scores([])
        assert isinstance(ranked, RankedScores)
        assert len(ranked) == 0

    def test_priority_descending(self, mixed_scores):
        ranked = rank_scores(mixed_scores)
        priorities = [s.priority for s in ranked]
        assert priorities == sorted(priorities, reverse=True)

    def test_ties_keep_master_list_order(self, mixed_scores):
        ranked = rank_scores(mixed_scores)
        assert [s.settlement for s in ranked] == [
            "Ateret", "Rimonim", "Ofra", "Kochav HaShahar", "Beit El",
        ]

    def test_all_equal_priorities_unchanged(self, score_factory):
        scores = [score_factory(name, priority=40) for name in ("C", "A", "B")]
        assert [s.settlement for s in rank_scores(scores)] == ["C", "A", "B"]

    def test_input_not_mutated(self, mixed_scores):
        before = list(mixed_scores)
        rank_scores(mixed_scores)
        assert mixed_scores == before

    def test_indexing(self, mixed_scores):
        ranked = rank_scores(mixed_scores)
        assert ranked[0].settlement == "Ateret"
        assert ranked[-1].settlement == "Beit El"


class TestFind:
    def test_find_existing(self, mixed_scores):
        ranked = rank_scores(mixed_scores)
        score = ranked.find("Ofra")
        assert score is not None
        assert score.priority == 55

    def test_find_missing(self, mixed_scores):
        assert rank_scores(mixed_scores).find("Atlantis") is None
        assert find_by_settlement(mixed_scores, "Atlantis") is None

    def test_find_is_exact_match(self, mixed_scores):
        assert find_by_settlement(mixed_scores, "ofra") is None


class TestSeverityBand:
    @pytest.mark.parametrize(
        "value, expected",
        [(100, ScoreBand.GOOD), (70, ScoreBand.GOOD), (69, ScoreBand.WARNING),
         (40, ScoreBand.WARNING), (39, ScoreBand.CRITICAL), (0, ScoreBand.CRITICAL)],
    )
    def test_readiness_higher_is_better(self, value, expected):
        assert severity_band(value, "readiness") == expected

    @pytest.mark.parametrize("metric", ["risk", "priority"])
    @pytest.mark.parametrize(
        "value, expected",
        [(100, ScoreBand.CRITICAL), (70, ScoreBand.CRITICAL), (69, ScoreBand.WARNING),
         (40, ScoreBand.WARNING), (39, ScoreBand.GOOD), (0, ScoreBand.GOOD)],
    )
    def test_risk_and_priority_lower_is_better(self, metric, value, expected):
        assert severity_band(value, metric) == expected

    def test_unknown_metric(self):
        with pytest.raises(ValueError):
            severity_band(50, "morale")


class TestSummarize:
    def test_totals(self, mixed_scores):
        summary = summarize(mixed_scores)
        assert summary.settlements == 5
        assert summary.active_soldiers == 45
        assert summary.expired_shooting == 5
        assert summary.open_incidents == 2
        assert summary.armed_soldiers == 13
        # (85 + 60 + 20 + 39 + 95) / 5 = 59.8
        assert summary.avg_readiness == 60
        assert summary.critical_settlements == 2

    def test_needs_attention_in_priority_order(self, mixed_scores):
        summary = summarize(mixed_scores)
        assert summary.needs_attention == ("Ateret", "Rimonim", "Ofra")

    def test_scoped_to_one_settlement(self, mixed_scores):
        summary = summarize(mixed_scores, settlement="Ofra")
        assert summary.settlements == 1
        assert summary.active_soldiers == 10
        assert summary.avg_readiness == 39
        assert summary.critical_settlements == 1
        assert summary.needs_attention == ("Ofra",)

    def test_empty(self):
        summary = summarize([])
        assert summary.settlements == 0
        assert summary.avg_readiness == 0
        assert summary.needs_attention == ()
