"""Pipeline that turns a squad snapshot into a balanced substitution plan."""

from typing import Optional

from ..models.schedule_rows import BalanceResult, CombinationResult, MinRoundsResult, SubstitutionPlan
from ..models.squad import SquadSnapshot
from ..rotation_logging import get_logger, log_timing
from ..scheduling.balancing import DEFAULT_TOLERANCE, balance, players_outside_tolerance
from ..scheduling.combinations import analyze_all
from ..scheduling.min_rounds import compute_min_rounds
from ..scheduling.projection import population_variance, project_playing_time
from ..validation import validate_schedule

logger = get_logger(__name__)


class PlanPipeline:
    """Feasibility check, combination search, balancing and validation in one run.

    Holds configuration only; every call to ``run`` is independent.
    """

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE, apply_balancing: bool = True):
        if not 0 < tolerance < 1:
            raise ValueError(f"tolerance must be between 0 and 1 (got: {tolerance})")
        self.tolerance = tolerance
        self.apply_balancing = apply_balancing

    def run(self, snapshot: SquadSnapshot) -> SubstitutionPlan:
        min_rounds = compute_min_rounds(
            total_players=snapshot.total_players,
            on_field=snapshot.on_field_count,
            game_minutes=snapshot.total_match_minutes,
            max_subs_per_round=snapshot.max_simultaneous_subs,
        )
        if not min_rounds.is_feasible:
            logger.debug("Squad configuration infeasible", reason=min_rounds.error_message)
            return self._static_plan(snapshot, min_rounds)

        if snapshot.bench_size == 0:
            return self._static_plan(snapshot, min_rounds)

        analysis = analyze_all(
            snapshot.field_players,
            snapshot.bench_players,
            snapshot.total_match_minutes,
            max_subs=snapshot.max_simultaneous_subs,
        )
        recommended = analysis.recommended_combination
        balanced = self._balance(snapshot, recommended, min_rounds)

        validation = validate_schedule(
            balanced.events,
            snapshot.field_players,
            snapshot.bench_players,
            snapshot.total_match_minutes,
        )

        return SubstitutionPlan(
            is_feasible=True,
            min_rounds=min_rounds,
            events=balanced.events,
            projected_game_time=balanced.projected_game_time,
            combinations=analysis.all_combinations,
            recommended_num_subs=recommended.num_subs,
            round_interval=recommended.round_interval,
            target_minutes=balanced.target_minutes,
            variance_before_balancing=recommended.variance,
            variance_after_balancing=population_variance(
                [p.total_minutes for p in balanced.projected_game_time]
            ),
            has_balancing_round=balanced.has_balancing_round,
            players_outside_tolerance_before=balanced.players_outside_tolerance_before,
            players_outside_tolerance_after=balanced.players_outside_tolerance_after,
            validation=validation,
        )

    def _balance(
        self,
        snapshot: SquadSnapshot,
        recommended: CombinationResult,
        min_rounds: MinRoundsResult,
    ) -> BalanceResult:
        if self.apply_balancing:
            return balance(
                recommended.rotation_events,
                recommended.projected_game_time,
                snapshot.total_match_minutes,
                recommended.round_interval,
                recommended.num_subs,
                players=snapshot.all_players,
                tolerance=self.tolerance,
            )

        target = min_rounds.details.target_minutes_per_player
        outside = players_outside_tolerance(recommended.projected_game_time, target, self.tolerance)
        return BalanceResult(
            events=recommended.rotation_events,
            projected_game_time=recommended.projected_game_time,
            has_balancing_round=False,
            target_minutes=target,
            players_outside_tolerance_before=outside,
            players_outside_tolerance_after=outside,
        )

    def _static_plan(self, snapshot: SquadSnapshot, min_rounds: MinRoundsResult) -> SubstitutionPlan:
        """Plan without rotation: everyone keeps their starting place."""
        projections = tuple(project_playing_time(
            [],
            snapshot.field_players,
            snapshot.bench_players,
            snapshot.total_match_minutes,
        ))
        feasible = min_rounds.is_feasible
        return SubstitutionPlan(
            is_feasible=feasible,
            error_message=min_rounds.error_message,
            min_rounds=min_rounds,
            projected_game_time=projections,
            target_minutes=min_rounds.details.target_minutes_per_player,
            variance_before_balancing=population_variance([p.total_minutes for p in projections]),
            variance_after_balancing=population_variance([p.total_minutes for p in projections]),
            validation=validate_schedule(
                [], snapshot.field_players, snapshot.bench_players, snapshot.total_match_minutes
            ) if feasible else None,
        )


@log_timing("plan_substitutions")
def plan_substitutions(
    snapshot: SquadSnapshot,
    *,
    tolerance: float = DEFAULT_TOLERANCE,
    apply_balancing: bool = True,
    pipeline: Optional[PlanPipeline] = None,
) -> SubstitutionPlan:
    """Produce the final event list, projections and diagnostics for one match.

    Infeasible configurations come back as a plan with ``is_feasible=False``
    and the reason in ``error_message``; nothing is raised for them.
    """
    pipeline = pipeline or PlanPipeline(tolerance=tolerance, apply_balancing=apply_balancing)
    return pipeline.run(snapshot)
