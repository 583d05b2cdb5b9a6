"""
State transition: applying a joint action to a parent state.

This module handles:
- Copying the parent's rosters for the child
- Moving units
- Resolving attacks (damage, floor at zero, removal of the dead)
- Flipping the side to act and advancing the ply depth

Effects run in the joint action's iteration order. An attack on a unit
that already died earlier in the same joint action does nothing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Mapping

from ..core.actions import Action, Attack, Move
from ..core.types import Side

if TYPE_CHECKING:
    from ..state import CombatState, Roster


def apply_move(roster: Roster, unit_id: int, action: Move) -> None:
    """Step a unit one cell in the move's direction."""
    unit = roster[unit_id]
    unit.pos = action.direction.apply(unit.pos)


def apply_attack(attackers: Roster, defenders: Roster, unit_id: int, action: Attack) -> bool:
    """
    Resolve one attack.

    Returns:
        True if the target died from this attack; False if it survived or
        was already gone
    """
    target = defenders.get(action.target_id)
    if target is None:
        return False

    attacker = attackers[unit_id]
    killed = target.take_damage(attacker.attack)
    if killed:
        defenders.remove(target.id)
    return killed


def resolve_transition(parent: CombatState, actions: Mapping[int, Action]) -> CombatState:
    """
    Build the child of ``parent`` reached by ``actions``.

    The parent is left untouched: unit records are copied, the grid and
    routes are shared.
    """
    acting = parent.active_side
    rosters: Dict[Side, Roster] = {
        side: parent.roster(side).copy() for side in Side
    }

    for unit_id, action in actions.items():
        if isinstance(action, Move):
            apply_move(rosters[acting], unit_id, action)
        elif isinstance(action, Attack):
            apply_attack(rosters[acting], rosters[acting.opponent], unit_id, action)
        else:
            raise TypeError(f"Unsupported action: {action!r}")

    return parent.child(rosters)
