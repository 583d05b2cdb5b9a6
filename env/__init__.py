"""
Skirmish engine - depth-limited adversarial search for grid combat.

A controlled melee force plays against an opposing ranged force. Both sides
issue simultaneous per-unit actions (move or attack); the engine searches
the alternating game tree with minimax and alpha-beta pruning.

Quick Start:
    from env import Scenario, create_duel_scenario
    from agents import MinimaxAgent

    scenario = create_duel_scenario()
    state = scenario.build_state()

    agent = MinimaxAgent(plies=2)
    actions, metadata = agent.get_actions(state)   # unit_id -> Move/Attack
"""

__version__ = "1.0.0"

# Search state
from .state import CombatState, Roster, StateChild

# Scenario system
from .scenario import (
    Scenario,
    create_duel_scenario,
    create_skirmish_scenario,
)

# Core types available at package level
from .core import (
    GridPos,
    Side,
    UnitKind,
    MoveDir,
    ActionType,
    Move,
    Attack,
    SnapshotError,
)
from .entities import Unit
from .world import Grid, PathResult, find_path

__all__ = [
    # Search state
    "CombatState",
    "Roster",
    "StateChild",

    # Scenario system
    "Scenario",
    "create_duel_scenario",
    "create_skirmish_scenario",

    # Core types
    "GridPos",
    "Side",
    "UnitKind",
    "MoveDir",
    "ActionType",
    "Move",
    "Attack",
    "SnapshotError",
    "Unit",

    # Map and routing
    "Grid",
    "PathResult",
    "find_path",
]
