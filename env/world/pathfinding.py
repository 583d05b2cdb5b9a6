"""
Grid A* used to precompute each controlled unit's reference route.

The priority of a generated neighbour is::

    parent.cost + 1 + chebyshev(parent, goal)

i.e. the settled parent's cost plus a fresh estimate taken at the parent,
not a per-node f = g + h. Open duplicates keep the cheaper entry. Closed
duplicates only get their stored cost lowered; they are never reopened.
Heap ties pop in insertion order.

This is not textbook A*: the route it returns is not guaranteed to be the
shortest one around every obstacle layout. On open ground its length
matches the Chebyshev distance to the goal.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..core.types import GridPos, chebyshev
from .grid import Grid

# Neighbour offsets in expansion order (x offset outer, y offset inner)
_ALL_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dx, dy)
    for dx in (-1, 0, 1)
    for dy in (-1, 0, 1)
    if (dx, dy) != (0, 0)
)
_CARDINAL_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dx, dy) for dx, dy in _ALL_OFFSETS if dx == 0 or dy == 0
)


@dataclass(frozen=True)
class PathResult:
    """
    Outcome of a single path search.

    Attributes:
        start: Cell the search started from
        goal: Cell the search aimed for
        cells: Intermediate cells in walking order (start and goal excluded)
        found: Whether the goal was reached
    """

    start: GridPos
    goal: GridPos
    cells: Tuple[GridPos, ...] = ()
    found: bool = False

    @property
    def length(self) -> int:
        """Number of steps from start to goal (0 when not found)."""
        if not self.found or self.start == self.goal:
            return 0
        return len(self.cells) + 1

    def route(self) -> Tuple[GridPos, ...]:
        """
        Reference route used by the evaluator: the start cell followed by
        the intermediate cells. Empty when the goal was unreachable.
        """
        if not self.found:
            return ()
        return (self.start,) + self.cells


@dataclass
class _Node:
    pos: GridPos
    cost: int
    parent: Optional[_Node]
    seq: int


def find_path(
    start: GridPos,
    goal: GridPos,
    grid: Grid,
    allow_diagonal: bool = True,
) -> PathResult:
    """
    Search a route from ``start`` to ``goal`` avoiding ``grid.obstacles``.

    Units are not obstacles here; only the static map is considered.

    Args:
        start: Starting cell
        goal: Target cell
        grid: Map extents and obstacles
        allow_diagonal: Expand all 8 neighbours (default) or only the
            4 cardinal ones

    Returns:
        PathResult; ``found`` is False and ``cells`` empty if unreachable
    """
    if start == goal:
        return PathResult(start=start, goal=goal, cells=(), found=True)

    offsets = _ALL_OFFSETS if allow_diagonal else _CARDINAL_OFFSETS
    counter = itertools.count()

    root = _Node(start, 0, None, next(counter))
    heap: List[Tuple[int, int, _Node]] = [(root.cost, root.seq, root)]
    open_nodes: Dict[GridPos, _Node] = {start: root}
    closed: Dict[GridPos, _Node] = {}

    while heap:
        _, seq, node = heapq.heappop(heap)
        current = open_nodes.get(node.pos)
        if current is None or current.seq != seq:
            continue  # superseded by a cheaper entry
        del open_nodes[node.pos]

        if node.pos == goal:
            return PathResult(start=start, goal=goal, cells=_trace(node), found=True)

        closed[node.pos] = node
        step_cost = node.cost + 1 + chebyshev(node.pos, goal)

        for dx, dy in offsets:
            pos = (node.pos[0] + dx, node.pos[1] + dy)

            seen = closed.get(pos)
            if seen is not None:
                if step_cost < seen.cost:
                    seen.cost = step_cost
                continue

            if not grid.is_passable(pos):
                continue

            queued = open_nodes.get(pos)
            if queued is not None and queued.cost <= step_cost:
                continue

            child = _Node(pos, step_cost, node, next(counter))
            open_nodes[pos] = child
            heapq.heappush(heap, (child.cost, child.seq, child))

    return PathResult(start=start, goal=goal, cells=(), found=False)


def _trace(goal_node: _Node) -> Tuple[GridPos, ...]:
    """Walk parent links back from the goal, dropping both endpoints."""
    cells: List[GridPos] = []
    node = goal_node.parent
    while node is not None and node.parent is not None:
        cells.append(node.pos)
        node = node.parent
    cells.reverse()
    return tuple(cells)
