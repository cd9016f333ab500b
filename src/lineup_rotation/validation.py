"""Schedule validation with round-level and lineup-consistency checks."""

from typing import List, Sequence, Set

from .models.schedule_rows import ScheduleValidation, SubstitutionEvent
from .models.squad import PlayerLike, as_squad_players
from .rotation_logging import get_logger
from .scheduling.lineup_state import group_rounds

logger = get_logger(__name__)


def _check_round(round_events: Sequence[SubstitutionEvent], on_field: Set[str], errors: List[str]) -> None:
    round_number = round_events[0].round_number
    outs: Set[str] = set()
    ins: Set[str] = set()

    for event in round_events:
        out_id = event.field_player_id_out
        in_id = event.bench_player_id_in
        if out_id in outs:
            errors.append(f"Round {round_number}: {out_id} is substituted out more than once")
        if in_id in ins:
            errors.append(f"Round {round_number}: {in_id} is substituted in more than once")
        outs.add(out_id)
        ins.add(in_id)

        if out_id not in on_field:
            errors.append(f"Round {round_number}: {out_id} is not on the field when substituted out")
        if in_id in on_field:
            errors.append(f"Round {round_number}: {in_id} is already on the field when substituted in")

    for pid in sorted(outs & ins):
        errors.append(f"Round {round_number}: {pid} is both substituted out and in")

    on_field.difference_update(outs)
    on_field.update(ins)


def validate_schedule(
    events: Sequence[SubstitutionEvent],
    field_players: Sequence[PlayerLike],
    bench_players: Sequence[PlayerLike],
    total_match_minutes: float,
) -> ScheduleValidation:
    """Check a finished schedule without raising.

    Errors cover events outside the match, repeated or conflicting players
    within a round, and swaps that do not match who is on the field at that
    moment. Warnings note a half with no substitutions at all.

    Args:
        events: Substitution events in any order
        field_players: Starting field players
        bench_players: Starting bench players
        total_match_minutes: Match duration in minutes

    Returns:
        ScheduleValidation with errors and informational warnings
    """
    errors: List[str] = []
    warnings: List[str] = []

    field = as_squad_players(field_players)
    bench = as_squad_players(bench_players)
    squad_ids = {p.player_id for p in (*field, *bench)}
    on_field = {p.player_id for p in field}

    for round_events in group_rounds(events):
        time_minutes = round_events[0].match_time_minutes
        if not 0 < time_minutes < total_match_minutes:
            errors.append(
                f"Round {round_events[0].round_number}: time {time_minutes:.2f} is outside the match (0, {total_match_minutes})"
            )
        round_ids = {e.field_player_id_out for e in round_events} | {e.bench_player_id_in for e in round_events}
        for pid in sorted(round_ids - squad_ids):
            errors.append(f"Round {round_events[0].round_number}: {pid} is not in the squad")
        _check_round(round_events, on_field, errors)

    if events:
        half = total_match_minutes / 2
        first_half = [e for e in events if e.match_time_minutes <= half]
        second_half = [e for e in events if e.match_time_minutes > half]
        if not first_half:
            warnings.append("No substitutions scheduled for the first half")
        if not second_half:
            warnings.append("No substitutions scheduled for the second half")

    if errors:
        logger.debug("Schedule validation failed", error_count=len(errors))

    return ScheduleValidation(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
