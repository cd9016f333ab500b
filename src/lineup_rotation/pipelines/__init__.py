"""Pipeline orchestration for substitution planning."""

from .plan import PlanPipeline, plan_substitutions

__all__ = [
    'PlanPipeline',
    'plan_substitutions',
]
