"""
Individual unit actions.

An action is one of exactly two frozen dataclasses, ``Move`` or ``Attack``.
The ``Action`` alias is the closed union of both; code that dispatches on
actions handles both variants and raises on anything else.

A joint action is a plain ``Dict[int, Action]`` keyed by unit id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Union

from .types import ActionType, MoveDir


@dataclass(frozen=True)
class Move:
    """Step one cell in a cardinal direction."""

    direction: MoveDir

    @property
    def type(self) -> ActionType:
        return ActionType.MOVE

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.name, "params": {"dir": self.direction.name}}

    def __str__(self) -> str:
        return f"MOVE({self.direction.name})"


@dataclass(frozen=True)
class Attack:
    """Strike an opposing unit by id."""

    target_id: int

    @property
    def type(self) -> ActionType:
        return ActionType.ATTACK

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.name, "params": {"target_id": self.target_id}}

    def __str__(self) -> str:
        return f"ATTACK(#{self.target_id})"


Action = Union[Move, Attack]
JointAction = Dict[int, Action]


def action_from_dict(data: Mapping[str, Any]) -> Action:
    """
    Rebuild an action from ``Move.to_dict()`` / ``Attack.to_dict()`` output.

    Raises:
        ValueError: If the type tag or parameters are not recognised
    """
    type_name = data.get("type")
    params = data.get("params") or {}

    if type_name == ActionType.MOVE.name:
        try:
            return Move(MoveDir[params["dir"]])
        except KeyError as exc:
            raise ValueError(f"Invalid move parameters: {params!r}") from exc

    if type_name == ActionType.ATTACK.name:
        target_id = params.get("target_id")
        if not isinstance(target_id, int) or isinstance(target_id, bool):
            raise ValueError(f"Invalid attack target: {target_id!r}")
        return Attack(target_id)

    raise ValueError(f"Unknown action type: {type_name!r}")


def serialize_joint_action(actions: Mapping[int, Action]) -> List[Dict[str, Any]]:
    """Serialize a joint action to a list for easy iteration client-side."""
    serialized: List[Dict[str, Any]] = []
    for unit_id, action in actions.items():
        payload = action.to_dict()
        serialized.append(
            {
                "unit_id": unit_id,
                "type": payload["type"],
                "params": payload["params"],
                "label": str(action),
            }
        )
    return serialized
