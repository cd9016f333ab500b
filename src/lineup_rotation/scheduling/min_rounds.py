"""Minimum rotation rounds calculation - pure, synchronous.

Computes how many substitution rounds are needed so that every squad member
cycles through both field and bench time, and reports infeasible
configurations as values with a human-readable reason instead of raising.
"""

from typing import Optional

from ..errors import InvariantViolationError
from ..models.schedule_rows import MinRoundsDetails, MinRoundsResult


def ceil_div(numerator: int, denominator: int) -> int:
    """Integer ceiling division for non-negative operands."""
    return -(-numerator // denominator)


def _check_infeasible(
    total_players: int,
    on_field: int,
    game_minutes: float,
    max_subs_per_round: int,
    bench_size: int,
    locked_on: int,
    locked_off: int,
) -> Optional[str]:
    """Return the first failing feasibility reason, or None."""
    if total_players < on_field:
        return "Total players cannot be less than on-field players"
    if on_field == 0:
        return "Number of on-field players must be greater than 0"
    if game_minutes == 0:
        return "Game minutes must be greater than 0"
    if max_subs_per_round == 0 and bench_size > 0:
        return "Max substitutions per round must be greater than 0 when bench players are present"
    if locked_on > on_field:
        return "Locked on-field players cannot exceed total on-field players"
    if locked_off > bench_size:
        return "Locked off-field players cannot exceed bench size"
    return None


def compute_min_rounds(
    total_players: int,
    on_field: int,
    game_minutes: float,
    max_subs_per_round: int,
    target_minutes_per_player: Optional[float] = None,
    locked_on_field_count: Optional[int] = None,
    locked_off_field_count: Optional[int] = None,
) -> MinRoundsResult:
    """Compute the minimum number of rotation rounds and the resulting stint length.

    The round count uses the whole squad, not just the bench:
    ``min_rounds = ceil(total_players / max_subs_per_round)``.

    Args:
        total_players: Field plus bench players
        on_field: Players on the field at any time
        game_minutes: Total match duration in minutes
        max_subs_per_round: Cap on swaps per round
        target_minutes_per_player: Equal share override; defaults to
            ``game_minutes * on_field / total_players``
        locked_on_field_count: Players who never leave the field
        locked_off_field_count: Players who never enter the field

    Returns:
        MinRoundsResult with full diagnostic detail

    Raises:
        InvariantViolationError: if any count or duration is negative
    """
    locked_on = locked_on_field_count or 0
    locked_off = locked_off_field_count or 0

    for label, value in (
        ("total_players", total_players),
        ("on_field", on_field),
        ("game_minutes", game_minutes),
        ("max_subs_per_round", max_subs_per_round),
        ("locked_on_field_count", locked_on),
        ("locked_off_field_count", locked_off),
    ):
        if value < 0:
            raise InvariantViolationError("negative value passed to compute_min_rounds", **{label: value})

    bench_size = total_players - on_field if total_players > on_field else 0
    total_field_minutes = game_minutes * on_field
    total_bench_minutes = game_minutes * bench_size

    if target_minutes_per_player is None:
        target_minutes_per_player = (game_minutes * on_field) / total_players if total_players > 0 else 0.0

    min_rounds = 0
    stint_minutes = 0.0
    error_message = _check_infeasible(
        total_players, on_field, game_minutes, max_subs_per_round, bench_size, locked_on, locked_off
    )

    if error_message is None and bench_size > 0:
        min_rounds = ceil_div(total_players, max_subs_per_round)
        stint_minutes = game_minutes / min_rounds
        # Unreachable while min_rounds >= 1
        if stint_minutes > game_minutes:
            error_message = "Minimum stint minutes cannot exceed game minutes"
            min_rounds = 0
            stint_minutes = 0.0

    details = MinRoundsDetails(
        total_players=total_players,
        on_field=on_field,
        game_minutes=game_minutes,
        max_subs_per_round=max_subs_per_round,
        target_minutes_per_player=target_minutes_per_player,
        locked_on_field_count=locked_on,
        locked_off_field_count=locked_off,
        bench_size=bench_size,
        total_field_minutes=total_field_minutes,
        total_bench_minutes=total_bench_minutes,
        min_rounds=min_rounds,
        min_stint_minutes=stint_minutes,
        is_feasible=error_message is None,
        error_message=error_message,
    )
    return MinRoundsResult(min_rounds=min_rounds, stint_minutes=stint_minutes, details=details)
