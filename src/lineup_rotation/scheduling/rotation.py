"""Cyclic fair-rotation scheduler - pure, synchronous.

Each round takes the longest-serving field players off and brings on the
eligible bench player with the fewest simulated minutes so far, falling
back to bench-queue order. Queues and lineup are immutable snapshots that
are rebuilt after every round, so concurrent runs never share state.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..errors import InvariantViolationError
from ..models.schedule_rows import SubstitutionEvent
from ..models.squad import PlayerLike, SquadPlayer, as_squad_players, ensure_unique_ids
from ..rotation_logging import get_logger
from .lineup_state import LineupState
from .min_rounds import ceil_div

logger = get_logger(__name__)

# Minutes closer than this are treated as equal when breaking ties
_MINUTE_PRECISION = 9


@dataclass(frozen=True)
class FairnessQueue:
    """Persistent FIFO: the front has waited longest, used players rotate to the back."""

    order: Tuple[str, ...] = ()

    def __iter__(self) -> Iterator[str]:
        return iter(self.order)

    def __len__(self) -> int:
        return len(self.order)

    def __contains__(self, player_id: object) -> bool:
        return player_id in self.order

    def without(self, player_ids: Iterable[str]) -> "FairnessQueue":
        removed = set(player_ids)
        return FairnessQueue(tuple(pid for pid in self.order if pid not in removed))

    def extended(self, player_ids: Iterable[str]) -> "FairnessQueue":
        return FairnessQueue(self.order + tuple(player_ids))


def rotation_round_count(squad_size: int, num_simultaneous_subs: int) -> int:
    """Rounds needed for the whole squad to cycle: ceil(squad / subs per round)."""
    return ceil_div(squad_size, num_simultaneous_subs)


def round_interval(total_match_minutes: float, min_rounds: int) -> float:
    return total_match_minutes / min_rounds if min_rounds > 0 else 0.0


def round_times(total_match_minutes: float, min_rounds: int) -> List[float]:
    """Multiples of the round interval that fall strictly inside the match.

    Computed as ``total * k / rounds`` so the would-be final round lands
    exactly on full time and is dropped rather than slipping just under it.
    """
    if min_rounds <= 0 or total_match_minutes <= 0:
        return []
    times = (total_match_minutes * k / min_rounds for k in range(1, min_rounds + 1))
    return [t for t in times if t < total_match_minutes]


def _accrue(minutes: Mapping[str, float], on_field: Iterable[str], elapsed: float) -> Dict[str, float]:
    updated = dict(minutes)
    for pid in on_field:
        updated[pid] += elapsed
    return updated


def _select_pairs(
    field_queue: FairnessQueue,
    bench_queue: FairnessQueue,
    lineup: LineupState,
    players: Mapping[str, SquadPlayer],
    minutes: Mapping[str, float],
    num_simultaneous_subs: int,
) -> List[Tuple[str, str]]:
    """Pick up to ``num_simultaneous_subs`` (out, in) pairs for one round."""
    pairs: List[Tuple[str, str]] = []
    taken = set()

    for field_id in field_queue:
        if len(pairs) >= num_simultaneous_subs:
            break
        role = lineup.slot_role(field_id)
        candidates = [
            pid for pid in bench_queue
            if pid not in taken and players[pid].eligibility.allows(role)
        ]
        if not candidates:
            # Nobody can cover this slot; the player stays on and keeps their queue place
            continue
        # min() keeps the first of equal keys, i.e. queue order
        chosen = min(candidates, key=lambda pid: round(minutes[pid], _MINUTE_PRECISION))
        pairs.append((field_id, chosen))
        taken.add(chosen)

    return pairs


def schedule_rotation(
    field_players: Sequence[PlayerLike],
    bench_players: Sequence[PlayerLike],
    num_simultaneous_subs: int,
    total_match_minutes: float,
    player_names: Optional[Mapping[str, str]] = None,
) -> List[SubstitutionEvent]:
    """Build the ordered substitution events for one simultaneous-subs count.

    Args:
        field_players: Starting field players (ids or SquadPlayer), longest serving first
        bench_players: Starting bench players (ids or SquadPlayer), longest waiting first
        num_simultaneous_subs: Maximum swaps per round
        total_match_minutes: Match duration in minutes
        player_names: Optional display names for bare ids

    Returns:
        Events in round order; a round may hold fewer swaps than the cap when
        eligibility leaves a slot uncovered.

    Raises:
        InvariantViolationError: on a non-positive substitution count, a
            negative duration, or a duplicate id
    """
    field = as_squad_players(field_players, player_names)
    bench = as_squad_players(bench_players, player_names)
    if not field or not bench:
        return []
    if num_simultaneous_subs < 1:
        raise InvariantViolationError("num_simultaneous_subs must be at least 1", num_simultaneous_subs=num_simultaneous_subs)
    if total_match_minutes < 0:
        raise InvariantViolationError("total_match_minutes cannot be negative", total_match_minutes=total_match_minutes)
    ensure_unique_ids(field, bench)

    players = {p.player_id: p for p in (*field, *bench)}
    min_rounds = rotation_round_count(len(players), num_simultaneous_subs)

    lineup = LineupState.from_players(field, bench)
    field_queue = FairnessQueue(tuple(p.player_id for p in field))
    bench_queue = FairnessQueue(tuple(p.player_id for p in bench))
    minutes: Dict[str, float] = {pid: 0.0 for pid in players}

    events: List[SubstitutionEvent] = []
    last_time = 0.0
    for round_number, time_minutes in enumerate(round_times(total_match_minutes, min_rounds), start=1):
        minutes = _accrue(minutes, lineup.field_ids, time_minutes - last_time)
        pairs = _select_pairs(field_queue, bench_queue, lineup, players, minutes, num_simultaneous_subs)

        round_events = [SubstitutionEvent.at(round_number, time_minutes, out_id, in_id) for out_id, in_id in pairs]
        lineup = lineup.apply_round(round_events)

        outs = [out_id for out_id, _ in pairs]
        ins = [in_id for _, in_id in pairs]
        field_queue = field_queue.without(outs).extended(ins)
        bench_queue = bench_queue.without(ins).extended(outs)

        if len(pairs) < num_simultaneous_subs:
            logger.debug(
                "Round filled below cap",
                round_number=round_number,
                swaps=len(pairs),
                cap=num_simultaneous_subs,
            )

        events.extend(round_events)
        last_time = time_minutes

    return events
