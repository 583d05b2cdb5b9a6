"""
Core type definitions shared across the engine.

Contains:
- GridPos alias and the two distance metrics
- Side (controlled vs opposing) and UnitKind (melee vs ranged)
- MoveDir (the four cardinal moves)
- ActionType tags
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple

# (x, y) cell on the grid. x grows east, y grows south.
GridPos = Tuple[int, int]


def chebyshev(a: GridPos, b: GridPos) -> int:
    """King-move distance. Used for melee adjacency and the A* estimate."""
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def manhattan(a: GridPos, b: GridPos) -> int:
    """Taxicab distance. Used for the ranged band and route progress."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


class UnitKind(Enum):
    """How a unit attacks."""
    MELEE = "melee"      # adjacent targets only (Chebyshev 1)
    RANGED = "ranged"    # targets inside a Manhattan distance band


class Side(Enum):
    """
    The two players of the search.

    CONTROLLED is the maximizing side (the melee force the engine plays).
    OPPOSING is the minimizing side (the ranged force).
    """
    CONTROLLED = "controlled"
    OPPOSING = "opposing"

    @property
    def opponent(self) -> Side:
        return Side.OPPOSING if self is Side.CONTROLLED else Side.CONTROLLED

    @property
    def unit_kind(self) -> UnitKind:
        """Every unit of a side shares its attack model."""
        return UnitKind.MELEE if self is Side.CONTROLLED else UnitKind.RANGED

    @property
    def is_maximizing(self) -> bool:
        return self is Side.CONTROLLED


class MoveDir(Enum):
    """Cardinal movement directions. North is towards y = 0."""
    NORTH = (0, -1)
    EAST = (1, 0)
    SOUTH = (0, 1)
    WEST = (-1, 0)

    def apply(self, pos: GridPos) -> GridPos:
        """Return the cell reached by stepping once from ``pos``."""
        return (pos[0] + self.value[0], pos[1] + self.value[1])


class ActionType(Enum):
    """Tag of an individual unit action."""
    MOVE = "move"
    ATTACK = "attack"


# Attack reach per kind
MELEE_REACH = 1            # Chebyshev distance
RANGED_MIN_DISTANCE = 4    # Manhattan, inclusive
RANGED_MAX_DISTANCE = 10   # Manhattan, exclusive
