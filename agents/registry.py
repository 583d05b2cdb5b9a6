"""
Name -> agent class registry used by AgentSpec and the factory.
"""

from __future__ import annotations

from typing import Callable, Dict, Type, TYPE_CHECKING

if TYPE_CHECKING:
    from .base_agent import BaseAgent

_AGENT_REGISTRY: Dict[str, Type["BaseAgent"]] = {}


def register_agent(name: str) -> Callable[[Type["BaseAgent"]], Type["BaseAgent"]]:
    """Class decorator registering an agent under ``name``."""

    def decorator(cls: Type["BaseAgent"]) -> Type["BaseAgent"]:
        existing = _AGENT_REGISTRY.get(name)
        if existing is not None and existing is not cls:
            raise ValueError(f"Agent type {name!r} already registered by {existing.__name__}")
        _AGENT_REGISTRY[name] = cls
        return cls

    return decorator


def resolve_agent_class(name: str) -> Type["BaseAgent"]:
    try:
        return _AGENT_REGISTRY[name]
    except KeyError as exc:
        known = ", ".join(sorted(_AGENT_REGISTRY)) or "none"
        raise ValueError(f"Unknown agent type {name!r} (known: {known})") from exc
