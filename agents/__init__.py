"""
Agent interface and implementations for the skirmish engine.

This module provides:
- BaseAgent: Abstract interface for all agents
- MinimaxAgent: Alpha-beta search for the controlled side
- AgentSpec / create_agent_from_spec: build agents from scenario data
"""

from .base_agent import BaseAgent
from .factory import create_agent_from_spec

from .registry import register_agent, resolve_agent_class
from .spec import AgentSpec
from .minimax_agent import MinimaxAgent, SearchResult, SearchStats

__all__ = [
    "BaseAgent",
    "AgentSpec",
    "create_agent_from_spec",
    "register_agent",
    "resolve_agent_class",
    "MinimaxAgent",
    "SearchResult",
    "SearchStats",
]
