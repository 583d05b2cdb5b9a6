from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterator

from ..core.types import GridPos, MoveDir


@dataclass(frozen=True)
class Grid:
    """
    Static map: extents plus impassable cells.

    A single Grid instance is shared by every state of a search tree, so it
    is frozen and never mutated after construction.

    Attributes:
        width: Number of columns (valid x is 0 .. width - 1)
        height: Number of rows (valid y is 0 .. height - 1)
        obstacles: Impassable cells
    """

    width: int
    height: int
    obstacles: FrozenSet[GridPos] = field(default_factory=frozenset)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid extents must be positive: {self.width}x{self.height}")
        # Accept any iterable of pairs, store a frozenset of int tuples
        object.__setattr__(
            self,
            "obstacles",
            frozenset((int(x), int(y)) for x, y in self.obstacles),
        )

    def in_bounds(self, pos: GridPos) -> bool:
        return 0 <= pos[0] < self.width and 0 <= pos[1] < self.height

    def is_obstacle(self, pos: GridPos) -> bool:
        return pos in self.obstacles

    def is_passable(self, pos: GridPos) -> bool:
        """In bounds and not an obstacle (ignores units)."""
        return self.in_bounds(pos) and pos not in self.obstacles

    def cardinal_neighbors(self, pos: GridPos) -> Iterator[tuple[MoveDir, GridPos]]:
        """Yield (direction, cell) for each passable cardinal neighbour."""
        for direction in MoveDir:
            cell = direction.apply(pos)
            if self.is_passable(cell):
                yield direction, cell

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "obstacles": [list(pos) for pos in sorted(self.obstacles)],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Grid:
        return cls(
            width=data["width"],
            height=data["height"],
            obstacles=frozenset(tuple(pos) for pos in data.get("obstacles", [])),
        )

