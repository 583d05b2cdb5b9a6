from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from env.core.types import Side


@dataclass
class AgentSpec:
    """
    Declarative description of an agent, as stored in scenarios.

    Attributes:
        type: Registry name (e.g. "minimax")
        side: Side the agent plays
        name: Optional display name
        init_params: Extra keyword arguments for the agent constructor
    """

    type: str
    side: Side = Side.CONTROLLED
    name: Optional[str] = None
    init_params: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.side, Side):
            raise ValueError(f"AgentSpec side must be a Side, got {self.side!r}")
        if not self.type:
            raise ValueError("AgentSpec type must be a non-empty string")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "side": self.side.name,
            "name": self.name,
            "init_params": dict(self.init_params),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AgentSpec:
        side_name = data.get("side", Side.CONTROLLED.name)
        try:
            side = Side[side_name]
        except KeyError as exc:
            raise ValueError(f"Unknown side: {side_name!r}") from exc
        return cls(
            type=data["type"],
            side=side,
            name=data.get("name"),
            init_params=dict(data.get("init_params") or {}),
        )
