"""Engine output models: events, projections and analysis results."""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SubstitutionEvent(BaseModel):
    """One field/bench swap at a scheduled round."""

    model_config = ConfigDict(frozen=True)

    round_number: int = Field(..., ge=1, description="1-based round index")
    match_time_minutes: float = Field(..., ge=0, description="Match clock in minutes")
    match_time_seconds: int = Field(..., ge=0, description="Match clock rounded to whole seconds")
    field_player_id_out: str = Field(..., min_length=1, description="Player leaving the field")
    bench_player_id_in: str = Field(..., min_length=1, description="Player entering the field")
    is_balancing_round: bool = Field(default=False, description="Inserted by the balancer")

    @model_validator(mode='after')
    def check_distinct_players(self) -> "SubstitutionEvent":
        if self.field_player_id_out == self.bench_player_id_in:
            raise ValueError(f"player {self.field_player_id_out} cannot replace themselves")
        return self

    @classmethod
    def at(
        cls,
        round_number: int,
        minutes: float,
        player_out: str,
        player_in: str,
        is_balancing_round: bool = False,
    ) -> "SubstitutionEvent":
        """Create an event, deriving whole seconds from the minute value."""
        return cls(
            round_number=round_number,
            match_time_minutes=minutes,
            match_time_seconds=int(round(minutes * 60)),
            field_player_id_out=player_out,
            bench_player_id_in=player_in,
            is_balancing_round=is_balancing_round,
        )


class PlayerProjection(BaseModel):
    """Projected playing time for one squad member."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    player_name: str
    total_minutes: float = Field(..., ge=0)
    total_off_field_time: float = Field(..., ge=0)
    bench_event_count: int = Field(default=0, ge=0, description="Times substituted off")
    is_starting_on_field: bool
    on_field_intervals: Tuple[Tuple[float, float], ...] = Field(
        default=(), description="(start, end) minute pairs spent on field"
    )


class CombinationResult(BaseModel):
    """Schedule and fairness metrics for one simultaneous-substitution count."""

    model_config = ConfigDict(frozen=True)

    num_subs: int = Field(..., ge=1)
    min_rounds: int = Field(..., ge=0)
    round_interval: float = Field(..., ge=0)
    rotation_events: Tuple[SubstitutionEvent, ...]
    projected_game_time: Tuple[PlayerProjection, ...]
    variance: float = Field(..., ge=0, description="Population variance of total minutes")
    min_minutes: float
    max_minutes: float
    is_recommended: bool = False

    @property
    def minutes_range(self) -> float:
        return self.max_minutes - self.min_minutes


class MultiCombinationResult(BaseModel):
    """Full comparison table plus the recommended entry."""

    model_config = ConfigDict(frozen=True)

    all_combinations: Tuple[CombinationResult, ...] = ()
    recommended_combination: Optional[CombinationResult] = None


class MinRoundsDetails(BaseModel):
    """Every input and derived value behind a minimum-rounds calculation."""

    model_config = ConfigDict(frozen=True)

    total_players: int
    on_field: int
    game_minutes: float
    max_subs_per_round: int
    target_minutes_per_player: float
    locked_on_field_count: int
    locked_off_field_count: int
    bench_size: int
    total_field_minutes: float
    total_bench_minutes: float
    min_rounds: int
    min_stint_minutes: float
    is_feasible: bool
    error_message: Optional[str] = None


class MinRoundsResult(BaseModel):
    """Minimum rotation rounds with feasibility diagnostics."""

    model_config = ConfigDict(frozen=True)

    min_rounds: int = Field(..., ge=0)
    stint_minutes: float = Field(..., ge=0)
    details: MinRoundsDetails

    @property
    def is_feasible(self) -> bool:
        return self.details.is_feasible

    @property
    def error_message(self) -> Optional[str]:
        return self.details.error_message


class BalanceResult(BaseModel):
    """Schedule after the single corrective pass."""

    model_config = ConfigDict(frozen=True)

    events: Tuple[SubstitutionEvent, ...]
    projected_game_time: Tuple[PlayerProjection, ...]
    has_balancing_round: bool
    target_minutes: float
    players_outside_tolerance_before: Tuple[str, ...] = ()
    players_outside_tolerance_after: Tuple[str, ...] = ()


class ScheduleValidation(BaseModel):
    """Outcome of checking a finished schedule."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()


class SubstitutionPlan(BaseModel):
    """Everything the calling layer needs to present a match plan."""

    model_config = ConfigDict(frozen=True)

    is_feasible: bool
    error_message: Optional[str] = None
    min_rounds: MinRoundsResult
    events: Tuple[SubstitutionEvent, ...] = ()
    projected_game_time: Tuple[PlayerProjection, ...] = ()
    combinations: Tuple[CombinationResult, ...] = ()
    recommended_num_subs: Optional[int] = None
    round_interval: float = 0.0
    target_minutes: float = 0.0
    variance_before_balancing: float = 0.0
    variance_after_balancing: float = 0.0
    has_balancing_round: bool = False
    players_outside_tolerance_before: Tuple[str, ...] = ()
    players_outside_tolerance_after: Tuple[str, ...] = ()
    validation: Optional[ScheduleValidation] = None
