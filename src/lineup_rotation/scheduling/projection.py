"""Playing-time projection over a completed rotation schedule - pure, synchronous."""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..errors import InvariantViolationError
from ..models.schedule_rows import PlayerProjection, SubstitutionEvent
from ..models.squad import PlayerLike, as_squad_players, ensure_unique_ids
from .lineup_state import LineupState, group_rounds


def project_playing_time(
    events: Iterable[SubstitutionEvent],
    field_players: Sequence[PlayerLike],
    bench_players: Sequence[PlayerLike],
    total_match_minutes: float,
    player_names: Optional[Mapping[str, str]] = None,
) -> List[PlayerProjection]:
    """Walk the schedule and total each player's on-field and off-field minutes.

    Open stints are closed at ``total_match_minutes``. Projections come back
    in squad order: starting field players first, then the bench.

    Raises:
        InvariantViolationError: if an event falls outside the match or swaps
            a player who is not where the event says they are
    """
    field = as_squad_players(field_players, player_names)
    bench = as_squad_players(bench_players, player_names)
    ensure_unique_ids(field, bench)

    lineup = LineupState.from_players(field, bench)
    stint_start: Dict[str, float] = {p.player_id: 0.0 for p in (*field, *bench)}
    on_minutes: Dict[str, float] = {pid: 0.0 for pid in stint_start}
    bench_events: Dict[str, int] = {pid: 0 for pid in stint_start}
    intervals: Dict[str, List[Tuple[float, float]]] = {pid: [] for pid in stint_start}

    for round_events in group_rounds(events):
        time_minutes = round_events[0].match_time_minutes
        if time_minutes > total_match_minutes:
            raise InvariantViolationError(
                "substitution scheduled after full time",
                round_number=round_events[0].round_number,
                match_time_minutes=time_minutes,
            )
        lineup = lineup.apply_round(round_events)

        for event in round_events:
            out_id = event.field_player_id_out
            on_minutes[out_id] += time_minutes - stint_start[out_id]
            intervals[out_id].append((stint_start[out_id], time_minutes))
            bench_events[out_id] += 1
            stint_start[out_id] = time_minutes
            stint_start[event.bench_player_id_in] = time_minutes

    for pid in lineup.field_ids:
        on_minutes[pid] += total_match_minutes - stint_start[pid]
        intervals[pid].append((stint_start[pid], total_match_minutes))

    starters = {p.player_id for p in field}
    return [
        PlayerProjection(
            player_id=p.player_id,
            player_name=p.name,
            total_minutes=on_minutes[p.player_id],
            total_off_field_time=max(0.0, total_match_minutes - on_minutes[p.player_id]),
            bench_event_count=bench_events[p.player_id],
            is_starting_on_field=p.player_id in starters,
            on_field_intervals=tuple(intervals[p.player_id]),
        )
        for p in (*field, *bench)
    ]


def population_variance(values: Sequence[float]) -> float:
    """Population (not sample) variance; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


def minutes_by_player(projections: Iterable[PlayerProjection]) -> Dict[str, float]:
    return {p.player_id: p.total_minutes for p in projections}
