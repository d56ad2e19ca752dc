"""CPU opponent strategies."""

from .base import Decision, Strategy
from .heuristic import OPTIMAL_PLAY_RATE, HeuristicStrategy, difficulty_from_name
from .memory import OpponentMemory

__all__ = [
    "Decision",
    "Strategy",
    "HeuristicStrategy",
    "OPTIMAL_PLAY_RATE",
    "OpponentMemory",
    "difficulty_from_name",
]
