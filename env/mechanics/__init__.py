"""
Game mechanics used by the search.

- joint_actions: legal per-unit actions and conflict-free joint actions
- combat: applying a joint action (moves, attacks, deaths)
- evaluation: static utility of a state
"""

from .combat import resolve_transition
from .evaluation import LOSS_UTILITY, WIN_UTILITY, UtilityFeatures, evaluate, evaluate_features
from .joint_actions import (
    can_attack,
    iter_joint_actions,
    moves_conflict,
    unit_actions,
    validate_joint_action,
)

__all__ = [
    "resolve_transition",
    "WIN_UTILITY",
    "LOSS_UTILITY",
    "UtilityFeatures",
    "evaluate",
    "evaluate_features",
    "can_attack",
    "iter_joint_actions",
    "moves_conflict",
    "unit_actions",
    "validate_joint_action",
]
