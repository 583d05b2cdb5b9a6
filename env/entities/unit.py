from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..core.types import GridPos, Side, UnitKind


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class Unit:
    """
    A single combat unit.

    Units are plain records. Search states copy them on every transition
    (see ``copy()``), so a Unit belonging to one state is never shared with
    another.

    Attributes:
        id: Unique across both sides for the whole episode
        side: Owning side
        pos: Current cell
        hp: Remaining hit points (never negative)
        attack: Damage dealt per attack (fixed)
        name: Optional display name
        kind: Attack model, derived from ``side``
    """

    id: int
    side: Side
    pos: GridPos
    hp: int
    attack: int
    name: Optional[str] = None
    kind: UnitKind = field(init=False)

    def __post_init__(self):
        """Validate unit after initialization."""
        if not _is_int(self.id):
            raise ValueError(f"Unit id must be an integer: {self.id!r}")
        if not isinstance(self.side, Side):
            raise ValueError(f"Unit side must be a Side, got {self.side!r}")
        if not _is_int(self.hp) or self.hp < 0:
            raise ValueError(f"Hit points must be a non-negative integer: {self.hp!r}")
        if not _is_int(self.attack) or self.attack < 0:
            raise ValueError(f"Attack power must be a non-negative integer: {self.attack!r}")
        try:
            x, y = self.pos
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Position must be an (x, y) pair: {self.pos!r}") from exc
        if not (_is_int(x) and _is_int(y)):
            raise ValueError(f"Position coordinates must be integers: {self.pos!r}")
        self.pos = (x, y)
        self.kind = self.side.unit_kind

    @property
    def alive(self) -> bool:
        return self.hp > 0

    def take_damage(self, amount: int) -> bool:
        """
        Reduce hit points, floored at zero.

        Returns:
            True if this hit killed the unit
        """
        self.hp = max(self.hp - amount, 0)
        return self.hp == 0

    def copy(self) -> Unit:
        """Independent copy for a child state."""
        return Unit(
            id=self.id,
            side=self.side,
            pos=self.pos,
            hp=self.hp,
            attack=self.attack,
            name=self.name,
        )

    def label(self) -> str:
        """
        Human-readable label, e.g. "melee#1(CONTROLLED)".
        """
        display_name = self.name if self.name else self.kind.value
        return f"{display_name}#{self.id}({self.side.name})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "side": self.side.name,
            "pos": list(self.pos),
            "hp": self.hp,
            "attack": self.attack,
            "name": self.name,
            "kind": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Unit:
        """
        Build a unit from ``to_dict()`` output.

        ``kind`` is ignored on input; it always follows the side.
        """
        try:
            side = Side[data["side"]]
        except KeyError as exc:
            raise ValueError(f"Unknown side: {data.get('side')!r}") from exc
        return cls(
            id=data["id"],
            side=side,
            pos=tuple(data["pos"]),
            hp=data["hp"],
            attack=data["attack"],
            name=data.get("name"),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_json(cls, json_str: str) -> Unit:
        return cls.from_dict(json.loads(json_str))

    def __str__(self) -> str:
        return f"{self.label()} at {self.pos} [hp={self.hp}]"
