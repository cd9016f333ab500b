"""Pydantic data models for the lineup rotation engine."""

from .enums import Position
from .squad import (
    PlayerLike,
    PositionEligibility,
    SquadPlayer,
    SquadSnapshot,
    as_squad_players,
    ensure_unique_ids,
)
from .schedule_rows import (
    BalanceResult,
    CombinationResult,
    MinRoundsDetails,
    MinRoundsResult,
    MultiCombinationResult,
    PlayerProjection,
    ScheduleValidation,
    SubstitutionEvent,
    SubstitutionPlan,
)

__all__ = [
    # Enums
    "Position",
    # Input models
    "PlayerLike",
    "PositionEligibility",
    "SquadPlayer",
    "SquadSnapshot",
    "as_squad_players",
    "ensure_unique_ids",
    # Output models
    "BalanceResult",
    "CombinationResult",
    "MinRoundsDetails",
    "MinRoundsResult",
    "MultiCombinationResult",
    "PlayerProjection",
    "ScheduleValidation",
    "SubstitutionEvent",
    "SubstitutionPlan",
]
