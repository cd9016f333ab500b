"""Lineup rotation engine.

Deterministic substitution scheduling that spreads playing time evenly
across a squad: minimum rounds, fair rotation, projections, combination
analysis and a single balancing pass.
"""

from .version import __version__
from .config import AppSettings, get_settings
from .errors import InvariantViolationError
from .models import SquadPlayer, SquadSnapshot, SubstitutionPlan
from .pipelines import plan_substitutions

__all__ = [
    "__version__",
    "AppSettings",
    "get_settings",
    "InvariantViolationError",
    "SquadPlayer",
    "SquadSnapshot",
    "SubstitutionPlan",
    "plan_substitutions",
    # Key subpackages
    "models",
    "scheduling",
    "pipelines",
    "utils",
    "validation",
]
