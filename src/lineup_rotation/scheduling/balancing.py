"""Single-pass playing-time correction near the end of the match."""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..models.schedule_rows import BalanceResult, PlayerProjection, SubstitutionEvent
from ..models.squad import SquadPlayer, as_squad_players
from ..rotation_logging import get_logger
from .lineup_state import LineupState, event_sort_key
from .projection import minutes_by_player, project_playing_time

logger = get_logger(__name__)

DEFAULT_TOLERANCE = 0.05

# Absorbs float drift from re-projection so a player exactly on the bound stays inside
_EPSILON = 1e-9


def target_share(total_match_minutes: float, on_field_count: int, total_players: int) -> float:
    """Equal on-field minutes per player if the whole squad rotated perfectly."""
    if total_players <= 0:
        return 0.0
    return total_match_minutes * on_field_count / total_players


def is_outside_tolerance(minutes: float, target: float, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    if target <= 0:
        return False
    return abs(minutes - target) > tolerance * target + _EPSILON


def players_outside_tolerance(
    projections: Iterable[PlayerProjection],
    target: float,
    tolerance: float = DEFAULT_TOLERANCE,
) -> Tuple[str, ...]:
    return tuple(p.player_id for p in projections if is_outside_tolerance(p.total_minutes, target, tolerance))


def _squad_from_projections(
    projections: Sequence[PlayerProjection],
    players: Optional[Iterable[SquadPlayer]],
    player_names: Optional[Mapping[str, str]] = None,
) -> Tuple[Tuple[SquadPlayer, ...], Tuple[SquadPlayer, ...]]:
    """Recover field and bench squads in projection order, with eligibility when known."""
    known: Dict[str, SquadPlayer] = {p.player_id: p for p in (players or ())}
    names = {p.player_id: p.player_name for p in projections}
    names.update(player_names or {})

    def resolve(projection: PlayerProjection) -> SquadPlayer:
        return known.get(projection.player_id) or as_squad_players([projection.player_id], names)[0]

    field = tuple(resolve(p) for p in projections if p.is_starting_on_field)
    bench = tuple(resolve(p) for p in projections if not p.is_starting_on_field)
    return field, bench


def _pick_swaps(
    lineup: LineupState,
    lookup: Mapping[str, SquadPlayer],
    minutes: Mapping[str, float],
    target: float,
    tolerance: float,
    shift: float,
    num_subs: int,
) -> List[Tuple[str, str]]:
    """Pair over-served field players with under-served eligible bench players.

    A pair is kept only if at least one of its players lands inside
    tolerance, so every accepted swap shrinks the outside set.
    """
    over = sorted(
        (pid for pid in lineup.field_ids if minutes[pid] > target and is_outside_tolerance(minutes[pid], target, tolerance)),
        key=lambda pid: -minutes[pid],
    )
    under = sorted(
        (pid for pid in lineup.bench if minutes[pid] < target and is_outside_tolerance(minutes[pid], target, tolerance)),
        key=lambda pid: minutes[pid],
    )

    swaps: List[Tuple[str, str]] = []
    taken = set()
    for out_id in over:
        if len(swaps) >= num_subs:
            break
        role = lineup.slot_role(out_id)
        for in_id in under:
            if in_id in taken or not lookup[in_id].eligibility.allows(role):
                continue
            out_after = minutes[out_id] - shift
            in_after = minutes[in_id] + shift
            if is_outside_tolerance(out_after, target, tolerance) and is_outside_tolerance(in_after, target, tolerance):
                continue
            swaps.append((out_id, in_id))
            taken.add(in_id)
            break
    return swaps


def balance(
    events: Sequence[SubstitutionEvent],
    projections: Sequence[PlayerProjection],
    total_match_minutes: float,
    round_interval: float,
    num_subs: int,
    player_names: Optional[Mapping[str, str]] = None,
    players: Optional[Iterable[SquadPlayer]] = None,
    tolerance: float = DEFAULT_TOLERANCE,
) -> BalanceResult:
    """Insert at most one corrective round when projections drift outside tolerance.

    The extra round sits at ``total_match_minutes - round_interval / 2`` and
    swaps the most over-served field players for the most under-served
    eligible bench players, up to ``num_subs`` pairs. Its events carry
    ``is_balancing_round=True``.

    An eligible pair is still rejected when neither player would end inside
    tolerance after the swap, so the round can only shrink the set of players
    outside tolerance. The schedule comes back unchanged when nobody is
    outside tolerance, when there is no room after the last base round, when
    no bench player is eligible for an over-served slot, or when every
    eligible pair is rejected by that rule. ``has_balancing_round`` is False
    in all of these cases.

    Args:
        events: Base schedule of the recommended combination
        projections: Projections of that schedule
        total_match_minutes: Match duration in minutes
        round_interval: Interval between base rounds
        num_subs: Cap on swaps in the corrective round
        player_names: Optional display-name overrides for re-projection
        players: Squad players carrying position and eligibility; ids
            without an entry are treated as fully eligible
        tolerance: Relative deviation allowed around the equal share
    """
    events = tuple(events)
    projections = tuple(projections)
    field, bench = _squad_from_projections(projections, players, player_names)
    target = target_share(total_match_minutes, len(field), len(projections))
    outside_before = players_outside_tolerance(projections, target, tolerance)

    unchanged = BalanceResult(
        events=events,
        projected_game_time=projections,
        has_balancing_round=False,
        target_minutes=target,
        players_outside_tolerance_before=outside_before,
        players_outside_tolerance_after=outside_before,
    )
    if not outside_before or num_subs < 1:
        return unchanged

    balancing_time = total_match_minutes - round_interval / 2
    last_time = max((e.match_time_minutes for e in events), default=0.0)
    if balancing_time <= last_time or balancing_time >= total_match_minutes:
        logger.debug("No room for a balancing round", balancing_time=balancing_time, last_round_time=last_time)
        return unchanged

    lineup = LineupState.from_players(field, bench).replay(events)
    lookup = {p.player_id: p for p in (*field, *bench)}
    swaps = _pick_swaps(
        lineup,
        lookup,
        minutes_by_player(projections),
        target,
        tolerance,
        total_match_minutes - balancing_time,
        num_subs,
    )
    if not swaps:
        logger.debug("No balancing swap eligible and within tolerance", outside=len(outside_before))
        return unchanged

    round_number = max((e.round_number for e in events), default=0) + 1
    balancing_events = tuple(
        SubstitutionEvent.at(round_number, balancing_time, out_id, in_id, is_balancing_round=True)
        for out_id, in_id in swaps
    )
    updated_events = tuple(sorted(events + balancing_events, key=event_sort_key))
    updated_projections = tuple(
        project_playing_time(updated_events, field, bench, total_match_minutes)
    )
    outside_after = players_outside_tolerance(updated_projections, target, tolerance)

    logger.debug(
        "Balancing round inserted",
        round_number=round_number,
        swaps=len(swaps),
        outside_before=len(outside_before),
        outside_after=len(outside_after),
    )
    return BalanceResult(
        events=updated_events,
        projected_game_time=updated_projections,
        has_balancing_round=True,
        target_minutes=target,
        players_outside_tolerance_before=outside_before,
        players_outside_tolerance_after=outside_after,
    )
