"""
CombatState - one node of the search tree.

A CombatState holds both rosters, the shared grid, the side to act, the ply
depth and the per-unit reference routes. States never change after
construction: ``apply()`` and ``children()`` always allocate new states.

Root states come from a host snapshot via ``CombatState.from_snapshot()``
(or ``Scenario.build_state()``), which validates the snapshot and runs the
path finder once per controlled unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple

from infra.logger import get_logger

from .core.actions import Action, JointAction
from .core.errors import SnapshotError
from .core.types import GridPos, Side, manhattan
from .entities.unit import Unit
from .mechanics.combat import resolve_transition
from .mechanics.evaluation import UtilityFeatures, evaluate_features
from .mechanics.joint_actions import iter_joint_actions, validate_joint_action
from .world.grid import Grid
from .world.pathfinding import find_path

logger = get_logger(__name__)

Route = Tuple[GridPos, ...]


class Roster:
    """
    Ordered live units of one side: an id list plus an id -> Unit map.
    """

    def __init__(self, units: Iterable[Unit] = ()):
        self._ids: List[int] = []
        self._units: Dict[int, Unit] = {}
        for unit in units:
            self.add(unit)

    def add(self, unit: Unit) -> None:
        if unit.id in self._units:
            raise SnapshotError(f"Duplicate unit id in roster: {unit.id}")
        self._ids.append(unit.id)
        self._units[unit.id] = unit

    def remove(self, unit_id: int) -> None:
        """Drop a unit from both the id list and the map."""
        self._ids.remove(unit_id)
        del self._units[unit_id]

    def get(self, unit_id: int) -> Optional[Unit]:
        return self._units.get(unit_id)

    def copy(self) -> Roster:
        """Deep copy: the new roster owns fresh Unit records."""
        return Roster(self._units[unit_id].copy() for unit_id in self._ids)

    @property
    def ids(self) -> Tuple[int, ...]:
        return tuple(self._ids)

    @property
    def total_hp(self) -> int:
        return sum(unit.hp for unit in self._units.values())

    def __getitem__(self, unit_id: int) -> Unit:
        return self._units[unit_id]

    def __contains__(self, unit_id: object) -> bool:
        return unit_id in self._units

    def __iter__(self) -> Iterator[Unit]:
        return (self._units[unit_id] for unit_id in self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"Roster(ids={self._ids})"


@dataclass(frozen=True)
class StateChild:
    """A joint action paired with the state it leads to."""

    action: JointAction
    state: CombatState


class CombatState:
    """
    Immutable snapshot of the skirmish at one ply of the search.

    Attributes:
        grid: Shared map (extents and obstacles)
        active_side: Side whose joint action comes next
        depth: Ply depth below the root (root is 0)
        routes: Unit id -> reference route, shared by all descendants
    """

    def __init__(
        self,
        grid: Grid,
        rosters: Mapping[Side, Roster],
        active_side: Side = Side.CONTROLLED,
        depth: int = 0,
        routes: Optional[Mapping[int, Route]] = None,
    ):
        self.grid = grid
        self._rosters: Dict[Side, Roster] = {side: rosters[side] for side in Side}
        self.active_side = active_side
        self.depth = depth
        self.routes: Mapping[int, Route] = routes if routes is not None else {}

    # ------------------------------------------------------------------#
    # Construction
    # ------------------------------------------------------------------#
    @classmethod
    def from_snapshot(
        cls,
        grid: Grid,
        units: Iterable[Unit],
        active_side: Side = Side.CONTROLLED,
    ) -> CombatState:
        """
        Build a root state from host data and precompute routes.

        Units with zero hit points are treated as already dead and skipped.

        Raises:
            SnapshotError: On duplicate ids, units out of bounds or on an
                obstacle, or two units sharing a cell
        """
        rosters = {side: Roster() for side in Side}
        seen_ids: set[int] = set()
        cells: Dict[GridPos, Unit] = {}

        for source in units:
            if source.id in seen_ids:
                raise SnapshotError(f"Duplicate unit id: {source.id}")
            seen_ids.add(source.id)

            if not source.alive:
                logger.debug("Skipping dead unit %s", source.label())
                continue
            if not grid.in_bounds(source.pos):
                raise SnapshotError(
                    f"{source.label()} at {source.pos} is outside the "
                    f"{grid.width}x{grid.height} grid"
                )
            if grid.is_obstacle(source.pos):
                raise SnapshotError(f"{source.label()} stands on an obstacle at {source.pos}")
            other = cells.get(source.pos)
            if other is not None:
                raise SnapshotError(
                    f"{source.label()} and {other.label()} share cell {source.pos}"
                )

            unit = source.copy()
            cells[unit.pos] = unit
            rosters[unit.side].add(unit)

        routes = cls._plan_routes(grid, rosters[Side.CONTROLLED], rosters[Side.OPPOSING])
        state = cls(grid, rosters, active_side=active_side, depth=0, routes=routes)
        logger.debug(
            "Built root state: %d controlled, %d opposing, %d obstacles",
            len(rosters[Side.CONTROLLED]),
            len(rosters[Side.OPPOSING]),
            len(grid.obstacles),
        )
        return state

    @staticmethod
    def _plan_routes(grid: Grid, own: Roster, enemies: Roster) -> Dict[int, Route]:
        """One A* per controlled unit towards its nearest opposing unit."""
        routes: Dict[int, Route] = {}
        for unit in own:
            target = nearest_unit(unit, enemies)
            if target is None:
                routes[unit.id] = ()
                continue
            result = find_path(unit.pos, target.pos, grid)
            if not result.found:
                logger.warning(
                    "No route from %s to %s; route progress ignored for it",
                    unit.label(),
                    target.label(),
                )
            routes[unit.id] = result.route()
        return routes

    def child(self, rosters: Mapping[Side, Roster]) -> CombatState:
        """State one ply below this one, holding the given rosters."""
        return CombatState(
            self.grid,
            rosters,
            active_side=self.active_side.opponent,
            depth=self.depth + 1,
            routes=self.routes,
        )

    # ------------------------------------------------------------------#
    # Queries
    # ------------------------------------------------------------------#
    def roster(self, side: Side) -> Roster:
        return self._rosters[side]

    def unit(self, unit_id: int) -> Unit:
        for roster in self._rosters.values():
            unit = roster.get(unit_id)
            if unit is not None:
                return unit
        raise KeyError(f"No live unit with id {unit_id}")

    def units(self) -> List[Unit]:
        """All live units, controlled side first."""
        return [unit for side in Side for unit in self._rosters[side]]

    @cached_property
    def occupied(self) -> FrozenSet[GridPos]:
        """Cells held by live units of either side."""
        return frozenset(unit.pos for unit in self.units())

    @cached_property
    def features(self) -> UtilityFeatures:
        return evaluate_features(self)

    @cached_property
    def utility(self) -> float:
        """Static evaluation from the controlled side's viewpoint."""
        return self.features.utility

    # ------------------------------------------------------------------#
    # Transitions
    # ------------------------------------------------------------------#
    def children(self) -> List[StateChild]:
        """Every conflict-free joint action of the side to act, with its result."""
        return [
            StateChild(action, resolve_transition(self, action))
            for action in iter_joint_actions(self)
        ]

    def apply(self, actions: Mapping[int, Action], check: bool = True) -> CombatState:
        """
        Apply a joint action of the side to act.

        Args:
            actions: Unit id -> action for units of ``active_side``
            check: Validate legality first (generated actions skip this)

        Raises:
            ValueError: If ``check`` is set and the joint action is illegal
        """
        if check:
            validate_joint_action(self, actions)
        return resolve_transition(self, actions)

    # ------------------------------------------------------------------#
    # Invariants / serialization
    # ------------------------------------------------------------------#
    def check_invariants(self) -> None:
        """
        Raise SnapshotError if any unit is off the map, on an obstacle,
        dead but listed, or sharing a cell.
        """
        cells: set[GridPos] = set()
        for unit in self.units():
            if not self.grid.is_passable(unit.pos):
                raise SnapshotError(f"{unit.label()} is on an impassable cell {unit.pos}")
            if not unit.alive:
                raise SnapshotError(f"{unit.label()} is dead but still listed")
            if unit.pos in cells:
                raise SnapshotError(f"Two units share cell {unit.pos}")
            cells.add(unit.pos)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grid": self.grid.to_dict(),
            "active_side": self.active_side.name,
            "depth": self.depth,
            "units": [unit.to_dict() for unit in self.units()],
            "routes": {
                str(unit_id): [list(pos) for pos in route]
                for unit_id, route in self.routes.items()
            },
            "utility": self.utility,
        }

    def __repr__(self) -> str:
        return (
            f"CombatState(depth={self.depth}, active={self.active_side.name}, "
            f"controlled={list(self._rosters[Side.CONTROLLED].ids)}, "
            f"opposing={list(self._rosters[Side.OPPOSING].ids)})"
        )


def nearest_unit(unit: Unit, candidates: Roster) -> Optional[Unit]:
    """
    Closest candidate by Manhattan distance; the first one in roster order
    wins ties. None when there are no candidates.
    """
    best: Optional[Unit] = None
    best_distance = None
    for candidate in candidates:
        distance = manhattan(unit.pos, candidate.pos)
        if best_distance is None or distance < best_distance:
            best = candidate
            best_distance = distance
    return best
