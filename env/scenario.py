"""
Scenario system: host snapshots for the search engine.

A scenario is everything the engine needs at one decision point:
- Grid dimensions and obstacle cells
- Both sides' units with their current position, hit points and attack
- Optionally, the agent spec that should play the controlled side

Scenarios serialize to plain JSON so a host can ship them over HTTP or
save them to disk.
"""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, TYPE_CHECKING

from infra.logger import get_logger
from infra.paths import PROJECT_ROOT, SCENARIO_STORAGE_DIR
from .core.errors import SnapshotError
from .core.types import GridPos, Side
from .entities.unit import Unit
from .state import CombatState
from .world.grid import Grid

if TYPE_CHECKING:
    from agents.spec import AgentSpec

logger = get_logger(__name__)


class Scenario:
    """
    A complete, self-contained snapshot of a skirmish.

    Example:
        scenario = Scenario(
            grid_width=5,
            grid_height=1,
            units=[
                Unit(id=1, side=Side.CONTROLLED, pos=(0, 0), hp=10, attack=2),
                Unit(id=2, side=Side.OPPOSING, pos=(3, 0), hp=4, attack=1),
            ],
        )
        state = scenario.build_state()
    """

    def __init__(
        self,
        grid_width: int = 10,
        grid_height: int = 10,
        obstacles: Optional[Iterable[GridPos]] = None,
        units: Optional[List[Unit]] = None,
        agent: Optional["AgentSpec"] = None,
    ):
        """
        Initialize a scenario.

        Args:
            grid_width: Width of the grid (columns)
            grid_height: Height of the grid (rows)
            obstacles: Impassable cells
            units: Units of both sides (side carried on each unit)
            agent: Optional AgentSpec for the controlled side

        Raises:
            SnapshotError: If the extents are not positive
        """
        if grid_width <= 0 or grid_height <= 0:
            raise SnapshotError(f"Grid extents must be positive: {grid_width}x{grid_height}")

        self.grid_width = grid_width
        self.grid_height = grid_height
        self.obstacles: List[GridPos] = [
            (int(x), int(y)) for x, y in (obstacles or [])
        ]
        self.agent = agent

        self.units: List[Unit] = []
        for unit in units or []:
            self.add_unit(unit)

    def add_unit(self, unit: Unit) -> Scenario:
        """Add a unit (side must be set on the unit)."""
        if not isinstance(unit.side, Side):
            raise SnapshotError(f"Unit side must be a Side, got {unit.side!r}")
        self.units.append(unit)
        return self

    @property
    def grid(self) -> Grid:
        return Grid(
            width=self.grid_width,
            height=self.grid_height,
            obstacles=frozenset(self.obstacles),
        )

    def build_state(self, active_side: Side = Side.CONTROLLED) -> CombatState:
        """
        Validate the snapshot and build the root search state.

        Raises:
            SnapshotError: If the snapshot breaks a state invariant
        """
        return CombatState.from_snapshot(self.grid, self.units, active_side=active_side)

    def clone(self) -> Scenario:
        """Deep copy (units included)."""
        return Scenario.from_dict(self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a JSON-compatible dictionary.
        """
        data: Dict[str, Any] = {
            "config": {
                "grid_width": self.grid_width,
                "grid_height": self.grid_height,
                "obstacles": [list(pos) for pos in self.obstacles],
            },
            "units": [unit.to_dict() for unit in self.units],
        }
        if self.agent is not None:
            data["agent"] = self.agent.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Scenario:
        """
        Deserialize from ``to_dict()`` output.

        Accepts both Unit objects and unit dicts in ``units``; units are
        copied so the scenario never shares them with the caller.

        Raises:
            SnapshotError: If the config or a unit record is malformed
        """
        if "config" not in data:
            raise SnapshotError("Scenario must contain 'config' dictionary")
        config = data["config"]

        def _to_unit(raw: Any) -> Unit:
            if isinstance(raw, Unit):
                return raw.copy()
            try:
                return Unit.from_dict(raw)
            except (IndexError, KeyError, TypeError, ValueError) as exc:
                raise SnapshotError(f"Malformed unit record {raw!r}: {exc}") from exc

        try:
            obstacles = [tuple(pos) for pos in config.get("obstacles", [])]
            scenario = cls(
                grid_width=int(config.get("grid_width", 10)),
                grid_height=int(config.get("grid_height", 10)),
                obstacles=obstacles,
                agent=cls._deserialize_agent(data.get("agent")),
            )
        except SnapshotError:
            raise
        except (AttributeError, TypeError, ValueError) as exc:
            raise SnapshotError(f"Malformed scenario config: {exc}") from exc

        units = data.get("units", [])
        if not isinstance(units, list):
            raise SnapshotError(f"Scenario units must be a list, got {type(units).__name__}")
        for raw in units:
            scenario.add_unit(_to_unit(raw))

        return scenario

    @staticmethod
    def _deserialize_agent(data: Any) -> Optional["AgentSpec"]:
        if data is None:
            return None
        # Local import to avoid circular imports during module load
        from agents.spec import AgentSpec
        if isinstance(data, AgentSpec):
            return data
        if isinstance(data, dict):
            return AgentSpec.from_dict(data)
        raise TypeError(f"Agent definition must be AgentSpec or dict, got {type(data)}")

    def save_json(self, filepath: str | Path | None = None, indent: int = 2) -> Path:
        """
        Save scenario to a JSON file.

        Args:
            filepath: Target path. If None, saves under storage/scenarios with
                a timestamped name. Relative paths resolve from the project root.
            indent: JSON indentation (default: 2)

        Returns:
            The path written
        """
        if filepath is None:
            SCENARIO_STORAGE_DIR.mkdir(parents=True, exist_ok=True)
            timestamp = time.strftime("%Y%m%d_%H%M%S")
            filepath = SCENARIO_STORAGE_DIR / f"scenario_{timestamp}.json"
        else:
            filepath = Path(filepath)
            if not filepath.is_absolute():
                filepath = PROJECT_ROOT / filepath
            filepath.parent.mkdir(parents=True, exist_ok=True)

        logger.info("Saving scenario JSON to %s", filepath)
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=indent, ensure_ascii=False)
        return filepath

    @classmethod
    def load_json(cls, filepath: str | Path) -> Scenario:
        """Load a scenario from a JSON file."""
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)

    def __str__(self) -> str:
        controlled = sum(1 for u in self.units if u.side is Side.CONTROLLED)
        opposing = len(self.units) - controlled
        return (
            f"Scenario({self.grid_width}x{self.grid_height}, "
            f"controlled={controlled}, opposing={opposing})"
        )

    def __repr__(self) -> str:
        return f"Scenario(units={self.units})"


# =============================================================================
# SCENARIO BUILDERS (Examples/Templates)
# =============================================================================

def create_duel_scenario() -> Scenario:
    """
    One footman against one archer on a 5x1 strip.

    The footman starts three cells away, out of reach, and has to close in.
    """
    from agents.spec import AgentSpec

    return Scenario(
        grid_width=5,
        grid_height=1,
        agent=AgentSpec(type="minimax", side=Side.CONTROLLED, init_params={"plies": 2}),
        units=[
            Unit(id=1, side=Side.CONTROLLED, pos=(0, 0), hp=10, attack=2, name="footman"),
            Unit(id=2, side=Side.OPPOSING, pos=(3, 0), hp=4, attack=1, name="archer"),
        ],
    )


def create_skirmish_scenario() -> Scenario:
    """
    Two footmen against two archers on a 12x8 map with a short wall.
    """
    from agents.spec import AgentSpec

    return Scenario(
        grid_width=12,
        grid_height=8,
        obstacles=[(5, 2), (5, 3), (5, 4), (6, 4)],
        agent=AgentSpec(type="minimax", side=Side.CONTROLLED, init_params={"plies": 2}),
        units=[
            Unit(id=1, side=Side.CONTROLLED, pos=(1, 2), hp=160, attack=12, name="footman"),
            Unit(id=2, side=Side.CONTROLLED, pos=(1, 5), hp=160, attack=12, name="footman"),
            Unit(id=3, side=Side.OPPOSING, pos=(10, 1), hp=50, attack=6, name="archer"),
            Unit(id=4, side=Side.OPPOSING, pos=(10, 6), hp=50, attack=6, name="archer"),
        ],
    )


if __name__ == "__main__":
    # Can be run via python -m env.scenario
    from infra.logger import configure_logging
    configure_logging(level="INFO")
    create_skirmish_scenario().save_json()
