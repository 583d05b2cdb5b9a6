from .minimax_agent import MinimaxAgent, SearchResult, SearchStats

__all__ = ["MinimaxAgent", "SearchResult", "SearchStats"]
