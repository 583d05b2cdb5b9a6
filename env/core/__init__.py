"""
Core types and actions for the skirmish engine.
"""

from .types import (
    GridPos,
    Side,
    UnitKind,
    MoveDir,
    ActionType,
    chebyshev,
    manhattan,
)
from .errors import SnapshotError
from .actions import (
    Action,
    Attack,
    JointAction,
    Move,
    action_from_dict,
    serialize_joint_action,
)

__all__ = [
    "GridPos",
    "Side",
    "UnitKind",
    "MoveDir",
    "ActionType",
    "chebyshev",
    "manhattan",
    "Action",
    "Attack",
    "JointAction",
    "Move",
    "action_from_dict",
    "serialize_joint_action",
    "SnapshotError",
]
