"""Substitution scheduling engine - pure, synchronous stages."""

from .balancing import DEFAULT_TOLERANCE, balance, players_outside_tolerance, target_share
from .combinations import analyze_all, analyze_combination
from .lineup_state import LineupState
from .min_rounds import compute_min_rounds
from .projection import population_variance, project_playing_time
from .rotation import FairnessQueue, round_interval, round_times, schedule_rotation

__all__ = [
    "DEFAULT_TOLERANCE",
    "FairnessQueue",
    "LineupState",
    "analyze_all",
    "analyze_combination",
    "balance",
    "compute_min_rounds",
    "players_outside_tolerance",
    "population_variance",
    "project_playing_time",
    "round_interval",
    "round_times",
    "schedule_rotation",
    "target_share",
]
