"""Tests for the minimum rotation rounds calculation."""

import math

import pytest

from lineup_rotation.errors import InvariantViolationError
from lineup_rotation.scheduling.min_rounds import ceil_div, compute_min_rounds


class TestMinRoundsFormula:
    """The round count always covers the whole squad."""

    @pytest.mark.parametrize("total_players", range(2, 31))
    @pytest.mark.parametrize("max_subs", range(1, 11))
    def test_min_rounds_grid(self, total_players, max_subs):
        """minRounds equals ceil(total / max_subs) whenever a bench exists."""
        result = compute_min_rounds(total_players, 1, 60, max_subs)

        assert result.is_feasible
        assert result.min_rounds == math.ceil(total_players / max_subs)
        assert result.stint_minutes == pytest.approx(60 / result.min_rounds)

    def test_standard_squad(self):
        """Seven on field, five on the bench, two subs per round."""
        result = compute_min_rounds(12, 7, 60, 2)

        assert result.is_feasible
        assert result.error_message is None
        assert result.min_rounds == 6
        assert result.stint_minutes == pytest.approx(10.0)

        details = result.details
        assert details.bench_size == 5
        assert details.total_field_minutes == 420
        assert details.total_bench_minutes == 300
        assert details.target_minutes_per_player == pytest.approx(35.0)

    def test_target_override(self):
        """An explicit target share is reported back untouched."""
        result = compute_min_rounds(12, 7, 60, 2, target_minutes_per_player=30.0)
        assert result.details.target_minutes_per_player == 30.0

    def test_empty_bench_is_feasible_with_zero_rounds(self):
        """No bench means no rotation, not an error."""
        result = compute_min_rounds(7, 7, 60, 2)

        assert result.is_feasible
        assert result.min_rounds == 0
        assert result.stint_minutes == 0

    def test_zero_cap_with_empty_bench_is_feasible(self):
        """A zero substitution cap only matters when someone could come on."""
        result = compute_min_rounds(7, 7, 60, 0)

        assert result.is_feasible
        assert result.min_rounds == 0

    def test_ceil_div(self):
        assert ceil_div(12, 2) == 6
        assert ceil_div(13, 2) == 7
        assert ceil_div(1, 10) == 1
        assert ceil_div(0, 3) == 0


class TestMinRoundsInfeasibility:
    """Infeasible configurations come back as values in a fixed check order."""

    @pytest.mark.parametrize(
        "args,kwargs,expected",
        [
            ((5, 7, 60, 2), {}, "Total players cannot be less than on-field players"),
            ((5, 0, 60, 2), {}, "Number of on-field players must be greater than 0"),
            ((12, 7, 0, 2), {}, "Game minutes must be greater than 0"),
            ((12, 7, 60, 0), {}, "Max substitutions per round must be greater than 0"),
            ((12, 7, 60, 2), {"locked_on_field_count": 8}, "Locked on-field players cannot exceed"),
            ((12, 7, 60, 2), {"locked_off_field_count": 6}, "Locked off-field players cannot exceed"),
        ],
    )
    def test_each_check(self, args, kwargs, expected):
        """Each failing check produces its own reason and no rounds."""
        result = compute_min_rounds(*args, **kwargs)

        assert not result.is_feasible
        assert result.error_message.startswith(expected)
        assert result.min_rounds == 0
        assert result.stint_minutes == 0

    def test_first_failing_check_wins(self):
        """Too few players is reported before zero minutes and zero cap."""
        result = compute_min_rounds(5, 7, 0, 0)
        assert result.error_message == "Total players cannot be less than on-field players"

    def test_zero_minutes_before_zero_cap(self):
        result = compute_min_rounds(12, 7, 0, 0)
        assert result.error_message == "Game minutes must be greater than 0"

    def test_locked_counts_within_bounds(self):
        """Locked counts at their limits are still feasible."""
        result = compute_min_rounds(12, 7, 60, 2, locked_on_field_count=7, locked_off_field_count=5)

        assert result.is_feasible
        assert result.details.locked_on_field_count == 7
        assert result.details.locked_off_field_count == 5

    def test_details_carry_inputs_on_failure(self):
        """Diagnostics are populated even when infeasible."""
        result = compute_min_rounds(12, 7, 60, 0)

        assert result.details.total_players == 12
        assert result.details.on_field == 7
        assert result.details.max_subs_per_round == 0
        assert result.details.is_feasible is False


class TestMinRoundsInvariants:
    """Negative inputs are caller bugs and raise."""

    @pytest.mark.parametrize(
        "args,kwargs",
        [
            ((-1, 7, 60, 2), {}),
            ((12, -7, 60, 2), {}),
            ((12, 7, -60, 2), {}),
            ((12, 7, 60, -2), {}),
            ((12, 7, 60, 2), {"locked_on_field_count": -1}),
            ((12, 7, 60, 2), {"locked_off_field_count": -1}),
        ],
    )
    def test_negative_values_raise(self, args, kwargs):
        with pytest.raises(InvariantViolationError, match="negative value"):
            compute_min_rounds(*args, **kwargs)

    def test_error_is_value_error(self):
        """Callers catching ValueError also catch invariant violations."""
        with pytest.raises(ValueError):
            compute_min_rounds(-1, 7, 60, 2)
