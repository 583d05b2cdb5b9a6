from .grid import Grid
from .pathfinding import PathResult, find_path

__all__ = ["Grid", "PathResult", "find_path"]
