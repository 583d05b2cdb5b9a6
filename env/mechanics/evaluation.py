"""
Static evaluation of a combat state from the controlled side's viewpoint.

Utility is a weighted linear combination of:
- route deficit: how far controlled units lag behind their precomputed
  route at the current ply
- opposing hit points and unit count
- controlled hit points and unit count
- opposing mobility: cardinal cells around each opposing unit not closed
  off by the map or a controlled unit

An empty opposing roster is a win and scores ``WIN_UTILITY``. An empty
controlled roster (with opponents left) scores ``LOSS_UTILITY``.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict

from ..core.types import Side, manhattan

if TYPE_CHECKING:
    from ..state import CombatState

# Finite sentinels so they stay distinct from the +/-inf search bounds
WIN_UTILITY = sys.float_info.max
LOSS_UTILITY = -sys.float_info.max

ROUTE_DEFICIT_WEIGHT = -10
ENEMY_HP_WEIGHT = -20
ENEMY_COUNT_WEIGHT = -20
OWN_HP_WEIGHT = 3
OWN_COUNT_WEIGHT = 3
ENEMY_MOBILITY_WEIGHT = -7


@dataclass(frozen=True)
class UtilityFeatures:
    """Raw feature values behind a utility score."""

    route_deficit: float
    enemy_hp: int
    enemy_count: int
    own_hp: int
    own_count: int
    enemy_mobility: float

    @property
    def utility(self) -> float:
        if self.enemy_hp == 0 or self.enemy_count == 0:
            return WIN_UTILITY
        if self.own_count == 0:
            return LOSS_UTILITY
        return float(
            ROUTE_DEFICIT_WEIGHT * self.route_deficit
            + ENEMY_HP_WEIGHT * self.enemy_hp
            + ENEMY_COUNT_WEIGHT * self.enemy_count
            + OWN_HP_WEIGHT * self.own_hp
            + OWN_COUNT_WEIGHT * self.own_count
            + ENEMY_MOBILITY_WEIGHT * self.enemy_mobility
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "route_deficit": self.route_deficit,
            "enemy_hp": self.enemy_hp,
            "enemy_count": self.enemy_count,
            "own_hp": self.own_hp,
            "own_count": self.own_count,
            "enemy_mobility": self.enemy_mobility,
            "utility": self.utility,
        }


def route_deficit(state: CombatState) -> float:
    """
    Mean Manhattan distance between each controlled unit and the waypoint
    its route expects at the current ply. Units without a route add 0 but
    still count towards the mean.
    """
    own = state.roster(Side.CONTROLLED)
    if len(own) == 0:
        return 0.0

    total = 0
    for unit in own:
        route = state.routes.get(unit.id)
        if route:
            waypoint = route[min(state.depth, len(route) - 1)]
            total += manhattan(unit.pos, waypoint)
    return total / len(own)


def enemy_mobility(state: CombatState) -> float:
    """
    Mean number of open cardinal cells around each opposing unit. Only
    controlled units block a cell; other opposing units do not.
    """
    enemies = state.roster(Side.OPPOSING)
    if len(enemies) == 0:
        return 0.0

    blockers = {unit.pos for unit in state.roster(Side.CONTROLLED)}
    total = 0
    for unit in enemies:
        for _, cell in state.grid.cardinal_neighbors(unit.pos):
            if cell not in blockers:
                total += 1
    return total / len(enemies)


def evaluate_features(state: CombatState) -> UtilityFeatures:
    own = state.roster(Side.CONTROLLED)
    enemies = state.roster(Side.OPPOSING)
    return UtilityFeatures(
        route_deficit=route_deficit(state),
        enemy_hp=enemies.total_hp,
        enemy_count=len(enemies),
        own_hp=own.total_hp,
        own_count=len(own),
        enemy_mobility=enemy_mobility(state),
    )


def evaluate(state: CombatState) -> float:
    """Scalar utility of ``state``; higher is better for the controlled side."""
    return evaluate_features(state).utility
