"""Tests for the end-to-end substitution planning pipeline."""

import pytest

from lineup_rotation.models import SquadSnapshot
from lineup_rotation.pipelines import PlanPipeline, plan_substitutions


class TestPlanSubstitutions:
    """Full pipeline scenarios."""

    def test_standard_squad(self, standard_snapshot):
        """7 + 5 squad, 60 minutes, cap 2."""
        plan = plan_substitutions(standard_snapshot)

        assert plan.is_feasible
        assert plan.error_message is None
        assert plan.min_rounds.min_rounds == 6
        assert [c.num_subs for c in plan.combinations] == [1, 2]
        assert plan.recommended_num_subs == 1
        assert plan.round_interval == pytest.approx(5.0)
        assert plan.target_minutes == pytest.approx(35.0)
        assert len(plan.events) == 11
        assert not plan.has_balancing_round
        assert plan.variance_after_balancing == pytest.approx(0.0)
        assert plan.validation.is_valid

        bench = [p for p in plan.projected_game_time if not p.is_starting_on_field]
        assert all(p.total_minutes > 0 for p in bench)

    def test_minutes_are_conserved(self, standard_snapshot):
        plan = plan_substitutions(standard_snapshot)

        on = sum(p.total_minutes for p in plan.projected_game_time)
        off = sum(p.total_off_field_time for p in plan.projected_game_time)
        assert on + off == pytest.approx(60 * 12)

    def test_empty_bench(self, field_ids):
        snapshot = SquadSnapshot.from_ids(field_ids, [], total_match_minutes=60, max_simultaneous_subs=2)

        plan = plan_substitutions(snapshot)

        assert plan.is_feasible
        assert plan.events == ()
        assert plan.combinations == ()
        assert plan.recommended_num_subs is None
        assert all(p.total_minutes == 60 for p in plan.projected_game_time)
        assert plan.validation.is_valid

    def test_infeasible_squad_is_reported_not_raised(self, field_ids, bench_ids):
        snapshot = SquadSnapshot.from_ids(field_ids, bench_ids, total_match_minutes=60, max_simultaneous_subs=0)

        plan = plan_substitutions(snapshot)

        assert not plan.is_feasible
        assert plan.error_message.startswith("Max substitutions per round must be greater than 0")
        assert plan.events == ()
        assert plan.validation is None
        assert len(plan.projected_game_time) == 12

    def test_zero_minutes_is_infeasible(self, field_ids, bench_ids):
        snapshot = SquadSnapshot.from_ids(field_ids, bench_ids, total_match_minutes=0, max_simultaneous_subs=2)

        plan = plan_substitutions(snapshot)

        assert not plan.is_feasible
        assert plan.error_message == "Game minutes must be greater than 0"

    def test_goalkeeper_only_bench_player_gets_no_minutes(self, field_ids, bench_ids, outfield_positions):
        snapshot = SquadSnapshot.from_ids(
            field_ids,
            bench_ids,
            total_match_minutes=60,
            max_simultaneous_subs=2,
            eligibility={"B1": ["goalkeeper"]},
            positions=outfield_positions,
        )

        plan = plan_substitutions(snapshot)

        assert plan.is_feasible
        assert all(e.bench_player_id_in != "B1" for e in plan.events)
        b1 = next(p for p in plan.projected_game_time if p.player_id == "B1")
        assert b1.total_minutes == 0

    @pytest.mark.parametrize("restricted", [["goalkeeper"], []])
    def test_restricted_bench_player_with_plain_id_field(self, field_ids, bench_ids, restricted):
        """Goalkeeper-only and no-position bench players sit out the whole match."""
        snapshot = SquadSnapshot.from_ids(
            field_ids,
            bench_ids,
            total_match_minutes=60,
            max_simultaneous_subs=2,
            eligibility={"B1": restricted},
        )

        plan = plan_substitutions(snapshot)

        assert plan.is_feasible
        assert plan.events
        assert all(e.bench_player_id_in != "B1" for e in plan.events)
        b1 = next(p for p in plan.projected_game_time if p.player_id == "B1")
        assert b1.total_minutes == 0
        assert b1.on_field_intervals == ()
        assert plan.validation.is_valid

    def test_balancing_never_increases_players_outside(self, field_ids, bench_ids, outfield_positions):
        snapshot = SquadSnapshot.from_ids(
            field_ids,
            bench_ids,
            total_match_minutes=60,
            max_simultaneous_subs=3,
            eligibility={"B1": ["goalkeeper"], "B2": ["forward"]},
            positions=outfield_positions,
        )

        plan = plan_substitutions(snapshot)

        before = len(plan.players_outside_tolerance_before)
        after = len(plan.players_outside_tolerance_after)
        if plan.has_balancing_round:
            assert after < before
            assert len({e.round_number for e in plan.events if e.is_balancing_round}) == 1
        else:
            assert after == before

    def test_balancing_can_be_disabled(self, standard_snapshot):
        plan = plan_substitutions(standard_snapshot, apply_balancing=False)

        assert not plan.has_balancing_round
        assert plan.players_outside_tolerance_before == plan.players_outside_tolerance_after
        assert not any(e.is_balancing_round for e in plan.events)

    def test_invalid_tolerance(self):
        with pytest.raises(ValueError):
            PlanPipeline(tolerance=0)

    def test_deterministic(self, standard_snapshot):
        first = plan_substitutions(standard_snapshot)
        second = plan_substitutions(standard_snapshot)
        assert first.model_dump_json() == second.model_dump_json()
