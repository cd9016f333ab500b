"""Tests for multi-combination analysis."""

import pytest

from lineup_rotation.scheduling.combinations import analyze_all, analyze_combination
from lineup_rotation.models import as_squad_players


class TestAnalyzeAll:
    """Comparison table across simultaneous-substitution counts."""

    def test_one_combination_per_bench_size(self, field_ids, bench_ids):
        result = analyze_all(field_ids, bench_ids, 60)

        assert [c.num_subs for c in result.all_combinations] == [1, 2, 3, 4, 5]

    def test_exactly_one_recommended(self, field_ids, bench_ids):
        result = analyze_all(field_ids, bench_ids, 60)

        recommended = [c for c in result.all_combinations if c.is_recommended]
        assert len(recommended) == 1
        assert recommended[0] == result.recommended_combination

    def test_recommended_has_lowest_variance(self, field_ids, bench_ids):
        result = analyze_all(field_ids, bench_ids, 60)

        best = result.recommended_combination
        assert all(best.variance <= c.variance for c in result.all_combinations)

    def test_single_sub_rotation_is_perfectly_even(self, field_ids, bench_ids):
        """One sub every five minutes gives all twelve players 35 minutes."""
        result = analyze_all(field_ids, bench_ids, 60)

        best = result.recommended_combination
        assert best.num_subs == 1
        assert best.min_rounds == 12
        assert best.round_interval == pytest.approx(5.0)
        assert len(best.rotation_events) == 11
        assert best.variance == pytest.approx(0.0)
        assert best.min_minutes == pytest.approx(35.0)
        assert best.max_minutes == pytest.approx(35.0)
        assert best.minutes_range == pytest.approx(0.0)

    def test_max_subs_caps_the_table(self, field_ids, bench_ids):
        result = analyze_all(field_ids, bench_ids, 60, max_subs=2)
        assert [c.num_subs for c in result.all_combinations] == [1, 2]

    def test_empty_bench_has_no_recommendation(self, field_ids):
        result = analyze_all(field_ids, [], 60)

        assert result.all_combinations == ()
        assert result.recommended_combination is None

    def test_zero_cap_has_no_recommendation(self, field_ids, bench_ids):
        result = analyze_all(field_ids, bench_ids, 60, max_subs=0)
        assert result.recommended_combination is None

    def test_identical_inputs_give_identical_output(self, field_ids, bench_ids):
        first = analyze_all(field_ids, bench_ids, 60)
        second = analyze_all(field_ids, bench_ids, 60)

        assert first.model_dump_json() == second.model_dump_json()

    def test_tie_goes_to_fewest_subs(self):
        """Two field, one bench: only one count exists, so it is recommended."""
        result = analyze_all(["A", "B"], ["C"], 60)

        assert result.recommended_combination.num_subs == 1
        assert result.all_combinations[0].is_recommended


class TestAnalyzeCombination:
    def test_two_subs_metrics(self, field_ids, bench_ids):
        field = as_squad_players(field_ids)
        bench = as_squad_players(bench_ids)

        result = analyze_combination(field, bench, 60, 2)

        assert result.num_subs == 2
        assert result.min_rounds == 6
        assert result.round_interval == pytest.approx(10.0)
        assert len(result.rotation_events) == 10
        assert result.variance == pytest.approx(25.0)
        assert result.min_minutes == pytest.approx(30.0)
        assert result.max_minutes == pytest.approx(40.0)
        assert not result.is_recommended
