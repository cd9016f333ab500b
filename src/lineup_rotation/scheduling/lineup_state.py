"""Immutable on-field/bench state replayed through substitution rounds."""

from dataclasses import dataclass
from itertools import groupby
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..errors import InvariantViolationError
from ..models.enums import Position
from ..models.schedule_rows import SubstitutionEvent
from ..models.squad import SquadPlayer


def event_sort_key(event: SubstitutionEvent) -> Tuple[float, int]:
    return (event.match_time_minutes, event.round_number)


def group_rounds(events: Iterable[SubstitutionEvent]) -> List[Tuple[SubstitutionEvent, ...]]:
    """Sort events chronologically and group the swaps that share a round."""
    ordered = sorted(events, key=event_sort_key)
    return [tuple(group) for _, group in groupby(ordered, key=event_sort_key)]


@dataclass(frozen=True)
class LineupState:
    """Who occupies each field slot and who waits on the bench.

    Slots keep the role of the player who started there; a substitute
    inherits the slot of the player they replace.
    """

    slots: Tuple[Tuple[str, Optional[Position]], ...]
    bench: Tuple[str, ...]

    @classmethod
    def from_players(cls, field: Sequence[SquadPlayer], bench: Sequence[SquadPlayer]) -> "LineupState":
        return cls(
            slots=tuple((p.player_id, p.position) for p in field),
            bench=tuple(p.player_id for p in bench),
        )

    @property
    def field_ids(self) -> Tuple[str, ...]:
        return tuple(pid for pid, _ in self.slots)

    def is_on_field(self, player_id: str) -> bool:
        return any(pid == player_id for pid, _ in self.slots)

    def slot_role(self, player_id: str) -> Optional[Position]:
        for pid, role in self.slots:
            if pid == player_id:
                return role
        raise InvariantViolationError("player is not on the field", player_id=player_id)

    def apply_round(self, events: Sequence[SubstitutionEvent]) -> "LineupState":
        """Apply the simultaneous swaps of one round and return the new state."""
        if not events:
            return self

        outs = [e.field_player_id_out for e in events]
        ins = [e.bench_player_id_in for e in events]
        round_number = events[0].round_number

        if len(set(outs)) != len(outs):
            raise InvariantViolationError("player substituted out twice in one round", round_number=round_number)
        if len(set(ins)) != len(ins):
            raise InvariantViolationError("player substituted in twice in one round", round_number=round_number)
        overlap = set(outs) & set(ins)
        if overlap:
            raise InvariantViolationError(
                "player both out and in within one round",
                round_number=round_number,
                player_id=sorted(overlap)[0],
            )

        field = set(self.field_ids)
        bench = set(self.bench)
        for pid in outs:
            if pid not in field:
                raise InvariantViolationError("substituted-out player is not on the field", player_id=pid, round_number=round_number)
        for pid in ins:
            if pid not in bench:
                raise InvariantViolationError("substituted-in player is not on the bench", player_id=pid, round_number=round_number)

        replacement: Dict[str, str] = dict(zip(outs, ins))
        entering = set(ins)
        return LineupState(
            slots=tuple((replacement.get(pid, pid), role) for pid, role in self.slots),
            bench=tuple(pid for pid in self.bench if pid not in entering) + tuple(outs),
        )

    def replay(self, events: Iterable[SubstitutionEvent]) -> "LineupState":
        """Apply every round of an event stream in chronological order."""
        state = self
        for round_events in group_rounds(events):
            state = state.apply_round(round_events)
        return state
