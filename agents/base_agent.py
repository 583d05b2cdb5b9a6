"""
Base agent interface for the skirmish engine.

All agents must implement this interface to produce joint actions.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from env.core.actions import JointAction
from env.core.types import Side
from env.state import CombatState


class BaseAgent(ABC):
    """
    Abstract base class for all agents.

    An agent receives a freshly built root state at every decision point
    and returns one joint action for its side. Agents keep no search state
    between calls.

    Attributes:
        side: The side this agent plays
        name: Agent name for logging/identification
    """

    def __init__(self, side: Side, name: str = None):
        """
        Initialize the agent.

        Args:
            side: Side this agent controls
            name: Optional name for the agent (defaults to class name)
        """
        if not isinstance(side, Side):
            raise ValueError(f"Agent side must be a Side, got {side!r}")
        self.side = side
        self.name = name or self.__class__.__name__

    @abstractmethod
    def get_actions(
        self,
        state: CombatState,
        **kwargs: Any,
    ) -> tuple[JointAction, Dict[str, Any]]:
        """
        Choose a joint action for the agent's side.

        Args:
            state: Root state for this decision point; its ``active_side``
                must be the agent's side
            **kwargs: Reserved for future fields

        Returns:
            Tuple of:
                - Dict mapping unit id to Move/Attack. Units without an
                  entry hold position.
                - Metadata dict (search value, counters, timings)
        """
        pass

    def __str__(self) -> str:
        return f"{self.name} ({self.side.name})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(side={self.side.name}, name='{self.name}')"
