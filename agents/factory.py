from __future__ import annotations

from .base_agent import BaseAgent
from .registry import resolve_agent_class
from .spec import AgentSpec


def create_agent_from_spec(spec: AgentSpec) -> BaseAgent:
    """
    Instantiate the agent described by ``spec``.

    Raises:
        ValueError: Unknown agent type or invalid init params
    """
    agent_cls = resolve_agent_class(spec.type)
    try:
        return agent_cls(side=spec.side, name=spec.name, **spec.init_params)
    except TypeError as exc:
        raise ValueError(f"Invalid init params for {spec.type!r}: {exc}") from exc
