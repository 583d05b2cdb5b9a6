"""
Joint-action generation.

For the side to act, every live unit gets its list of legal individual
actions:
- up to four moves, to cardinal cells that are in bounds, not obstacles and
  not occupied by any live unit before the transition
- attacks: melee units hit opposing units within Chebyshev distance 1,
  ranged units hit opposing units at Manhattan distance in [4, 10)

The per-unit lists are combined lazily with ``itertools.product``. Units
with no legal action are left out of the product (and out of the joint
action). Combinations in which two moves share a destination, or a move
ends on a cell occupied before the transition, are dropped.
"""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Iterator, List, Mapping, Optional, Tuple

from ..core.actions import Action, Attack, JointAction, Move
from ..core.types import (
    MELEE_REACH,
    RANGED_MAX_DISTANCE,
    RANGED_MIN_DISTANCE,
    GridPos,
    MoveDir,
    Side,
    UnitKind,
    chebyshev,
    manhattan,
)

if TYPE_CHECKING:
    from ..entities.unit import Unit
    from ..state import CombatState


def can_attack(attacker: Unit, target: Unit) -> bool:
    """Whether ``attacker`` may strike ``target`` from where both stand."""
    if attacker.kind is UnitKind.MELEE:
        return chebyshev(attacker.pos, target.pos) <= MELEE_REACH
    if attacker.kind is UnitKind.RANGED:
        distance = manhattan(attacker.pos, target.pos)
        return RANGED_MIN_DISTANCE <= distance < RANGED_MAX_DISTANCE
    raise TypeError(f"Unsupported unit kind: {attacker.kind!r}")


def unit_actions(state: CombatState, unit: Unit) -> List[Action]:
    """
    Legal individual actions for one unit, moves first (N, E, S, W) and
    then attacks in opposing roster order.
    """
    actions: List[Action] = []
    occupied = state.occupied

    for direction in MoveDir:
        destination = direction.apply(unit.pos)
        if state.grid.is_passable(destination) and destination not in occupied:
            actions.append(Move(direction))

    for target in state.roster(unit.side.opponent):
        if can_attack(unit, target):
            actions.append(Attack(target.id))

    return actions


def move_destination(state: CombatState, unit_id: int, action: Move) -> GridPos:
    return action.direction.apply(state.unit(unit_id).pos)


def moves_conflict(state: CombatState, actions: Mapping[int, Action]) -> bool:
    """
    True if two moves share a destination, or a move ends on a cell held
    by any unit before the transition (stationary units block).
    """
    occupied = state.occupied
    destinations = set()
    for unit_id, action in actions.items():
        if isinstance(action, Move):
            destination = move_destination(state, unit_id, action)
            if destination in destinations or destination in occupied:
                return True
            destinations.add(destination)
    return False


def iter_joint_actions(
    state: CombatState,
    side: Optional[Side] = None,
) -> Iterator[JointAction]:
    """
    Yield every conflict-free joint action for ``side`` (default: the side
    to act), in cross-product order with the first roster unit outermost.

    Nothing is yielded when no unit of the side has a legal action.
    """
    side = side or state.active_side

    choices: List[List[Tuple[int, Action]]] = []
    for unit in state.roster(side):
        options = unit_actions(state, unit)
        if options:
            choices.append([(unit.id, action) for action in options])

    if not choices:
        return

    for combination in itertools.product(*choices):
        joint = dict(combination)
        if not moves_conflict(state, joint):
            yield joint


def validate_joint_action(state: CombatState, actions: Mapping[int, Action]) -> None:
    """
    Check a caller-supplied joint action against the state.

    Raises:
        ValueError: If a unit is not a live unit of the side to act, an
            action is not legal for its unit, or moves conflict
    """
    roster = state.roster(state.active_side)
    for unit_id, action in actions.items():
        unit = roster.get(unit_id)
        if unit is None:
            raise ValueError(
                f"Unit {unit_id} is not a live {state.active_side.name} unit"
            )
        if not isinstance(action, (Move, Attack)):
            raise TypeError(f"Unsupported action: {action!r}")
        if action not in unit_actions(state, unit):
            raise ValueError(f"{unit.label()} cannot perform {action}")
    if moves_conflict(state, actions):
        raise ValueError("Joint action has conflicting move destinations")
