"""Multi-combination analysis across simultaneous-substitution counts."""

from typing import List, Mapping, Optional, Sequence

from ..models.schedule_rows import CombinationResult, MultiCombinationResult
from ..models.squad import PlayerLike, SquadPlayer, as_squad_players, ensure_unique_ids
from ..rotation_logging import get_logger
from .projection import population_variance, project_playing_time
from .rotation import round_interval, rotation_round_count, schedule_rotation

logger = get_logger(__name__)


def analyze_combination(
    field: Sequence[SquadPlayer],
    bench: Sequence[SquadPlayer],
    total_match_minutes: float,
    num_subs: int,
) -> CombinationResult:
    """Schedule, project and score a single simultaneous-substitution count."""
    min_rounds = rotation_round_count(len(field) + len(bench), num_subs)
    events = schedule_rotation(field, bench, num_subs, total_match_minutes)
    projections = project_playing_time(events, field, bench, total_match_minutes)
    minutes = [p.total_minutes for p in projections]

    return CombinationResult(
        num_subs=num_subs,
        min_rounds=min_rounds,
        round_interval=round_interval(total_match_minutes, min_rounds),
        rotation_events=tuple(events),
        projected_game_time=tuple(projections),
        variance=population_variance(minutes),
        min_minutes=min(minutes),
        max_minutes=max(minutes),
    )


def analyze_all(
    field_players: Sequence[PlayerLike],
    bench_players: Sequence[PlayerLike],
    total_match_minutes: float,
    player_names: Optional[Mapping[str, str]] = None,
    max_subs: Optional[int] = None,
) -> MultiCombinationResult:
    """Evaluate every simultaneous-substitution count from 1 to the bench size.

    The lowest-variance combination is recommended; on an exact tie the
    smaller count wins. ``all_combinations`` is always in ascending
    ``num_subs`` order. An empty bench yields no combinations and no
    recommendation.

    Args:
        field_players: Starting field players
        bench_players: Starting bench players
        total_match_minutes: Match duration in minutes
        player_names: Optional display names for bare ids
        max_subs: Optional upper bound below the bench size
    """
    field = as_squad_players(field_players, player_names)
    bench = as_squad_players(bench_players, player_names)
    ensure_unique_ids(field, bench)

    upper = len(bench) if max_subs is None else min(max_subs, len(bench))
    if upper < 1:
        return MultiCombinationResult()

    results: List[CombinationResult] = []
    for num_subs in range(1, upper + 1):
        result = analyze_combination(field, bench, total_match_minutes, num_subs)
        logger.debug(
            "Combination analyzed",
            num_subs=num_subs,
            variance=round(result.variance, 4),
            min_minutes=round(result.min_minutes, 2),
            max_minutes=round(result.max_minutes, 2),
        )
        results.append(result)

    best_index = 0
    for index, result in enumerate(results):
        if result.variance < results[best_index].variance:
            best_index = index

    results[best_index] = results[best_index].model_copy(update={"is_recommended": True})
    logger.debug("Combination recommended", num_subs=results[best_index].num_subs)

    return MultiCombinationResult(
        all_combinations=tuple(results),
        recommended_combination=results[best_index],
    )
