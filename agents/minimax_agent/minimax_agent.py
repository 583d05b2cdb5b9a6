"""
Minimax agent with alpha-beta pruning.

The controlled side maximizes the static utility, the opposing side
minimizes it. At every node the children are ordered by their own static
utility (best first for the side to act) so that strong replies are tried
early and pruning kicks in sooner. Ordering never changes the result.

Root ties are broken by the children's static utility: a child with the
same minimax value replaces the current best only if its own utility is
strictly higher.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from env.core.actions import JointAction, serialize_joint_action
from env.core.types import Side
from env.state import CombatState, StateChild
from infra.config import get_settings
from infra.logger import get_logger
from ..base_agent import BaseAgent
from ..registry import register_agent

logger = get_logger(__name__)


@dataclass
class SearchStats:
    """Counters for a single decision."""

    nodes: int = 0
    leaves: int = 0
    prunes: int = 0
    root_children: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "nodes": self.nodes,
            "leaves": self.leaves,
            "prunes": self.prunes,
            "root_children": self.root_children,
        }


@dataclass(frozen=True)
class SearchResult:
    """
    Outcome of a root search.

    Attributes:
        child: Chosen child (None when the root had no legal joint action)
        value: Minimax value of the root
    """

    child: Optional[StateChild]
    value: float

    @property
    def action(self) -> JointAction:
        return dict(self.child.action) if self.child is not None else {}


@register_agent("minimax")
class MinimaxAgent(BaseAgent):
    """
    Depth-limited minimax with alpha-beta pruning for the controlled side.

    Decision process:
    - Search ``plies`` levels below the current state
    - Return the root child with the best minimax value (ties broken by
      the child's static utility)
    """

    def __init__(
        self,
        side: Side = Side.CONTROLLED,
        name: str | None = None,
        plies: Optional[int] = None,
        pruning: bool = True,
        **_: Any,
    ):
        """
        Initialize the minimax agent.

        Args:
            side: Must be Side.CONTROLLED (the maximizing side)
            name: Optional agent name
            plies: Search depth; defaults to the SKIRMISH_PLIES setting
            pruning: Disable to run plain exhaustive minimax

        Raises:
            ValueError: On a non-controlled side or plies < 1
        """
        super().__init__(side, name)
        if side is not Side.CONTROLLED:
            raise ValueError("MinimaxAgent only plays the controlled side")
        if plies is None:
            plies = get_settings().plies
        if isinstance(plies, bool) or not isinstance(plies, int) or plies < 1:
            raise ValueError(f"plies must be a positive integer: {plies!r}")

        self.plies = plies
        self.pruning = pruning
        self._stats = SearchStats()

    def get_actions(
        self,
        state: CombatState,
        **kwargs: Any,
    ) -> tuple[JointAction, Dict[str, Any]]:
        """
        Search from ``state`` and return the chosen joint action.

        Raises:
            ValueError: If it is not the controlled side's turn in ``state``
        """
        if state.active_side is not self.side:
            raise ValueError(
                f"{self.name} plays {self.side.name} but {state.active_side.name} is to act"
            )

        self._stats = SearchStats()
        started = time.perf_counter()
        result = self.alpha_beta_search(
            StateChild({}, state), self.plies, -math.inf, math.inf
        )
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        actions = result.action
        metadata = {
            "policy": "minimax",
            "plies": self.plies,
            "pruning": self.pruning,
            "value": result.value,
            "root_utility": state.utility,
            "child_utility": result.child.state.utility if result.child else None,
            "actions": serialize_joint_action(actions),
            "stats": self._stats.to_dict(),
            "elapsed_ms": round(elapsed_ms, 3),
        }
        logger.info(
            "%s chose %d unit action(s) value=%s nodes=%d prunes=%d in %.1f ms",
            self.name,
            len(actions),
            result.value,
            self._stats.nodes,
            self._stats.prunes,
            elapsed_ms,
        )
        return actions, metadata

    def alpha_beta_search(
        self,
        node: StateChild,
        depth: int,
        alpha: float,
        beta: float,
    ) -> SearchResult:
        """
        Root of the search: pick the best child of ``node``.

        Children after the first are searched with alpha one step below the
        current best value. A child that only ties because a subtree was cut
        short then reports a strictly lower value and cannot steal the tie.

        Args:
            node: The action and state to search from
            depth: Remaining plies below this node
            alpha: Best value the maximizer can already guarantee
            beta: Best value the minimizer can already guarantee

        Returns:
            SearchResult with the chosen child and the root value
        """
        self._stats.nodes += 1
        if depth <= 0:
            self._stats.leaves += 1
            return SearchResult(None, node.state.utility)

        children = self.order_children(node.state.children(), maximize=True)
        self._stats.root_children = len(children)
        if not children:
            self._stats.leaves += 1
            return SearchResult(None, node.state.utility)

        best_value = -math.inf
        best_child: Optional[StateChild] = None
        for child in children:
            if not self.pruning:
                value = self.minimax(child, depth - 1, -math.inf, math.inf)
            elif best_child is None:
                value = self.minimax(child, depth - 1, alpha, beta)
            else:
                value = self.minimax(child, depth - 1, math.nextafter(alpha, -math.inf), beta)

            if best_child is None or value > best_value:
                best_value = value
                best_child = child
            elif value == best_value and child.state.utility > best_child.state.utility:
                best_child = child

            alpha = max(alpha, best_value)

        return SearchResult(best_child, best_value)

    def minimax(self, node: StateChild, depth: int, alpha: float, beta: float) -> float:
        """
        Minimax value of ``node`` searched ``depth`` plies deep.

        Leaves, and nodes whose side has no legal joint action, score their
        static utility.
        """
        self._stats.nodes += 1
        state = node.state
        if depth == 0:
            self._stats.leaves += 1
            return state.utility

        maximize = state.active_side.is_maximizing
        children = self.order_children(state.children(), maximize)
        if not children:
            self._stats.leaves += 1
            return state.utility

        if maximize:
            max_utility = -math.inf
            for child in children:
                max_utility = max(max_utility, self.minimax(child, depth - 1, alpha, beta))
                if self.pruning:
                    alpha = max(alpha, max_utility)
                    if beta <= alpha:
                        self._stats.prunes += 1
                        break
            return max_utility

        min_utility = math.inf
        for child in children:
            min_utility = min(min_utility, self.minimax(child, depth - 1, alpha, beta))
            if self.pruning:
                beta = min(beta, min_utility)
                if beta <= alpha:
                    self._stats.prunes += 1
                    break
        return min_utility

    @staticmethod
    def order_children(children: List[StateChild], maximize: bool) -> List[StateChild]:
        """
        Sort children by static utility: descending for the maximizer,
        ascending for the minimizer. Equal utilities keep generation order.
        """
        return sorted(children, key=lambda child: child.state.utility, reverse=maximize)
