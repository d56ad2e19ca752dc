"""Game logic."""

from .deck import create_deck, deal, draw_one
from .engine import GameEngine
from .notifier import GameNotifier, MessageLog
from .projection import sanitize_for_observer
from .scheduler import ScheduledTask, Scheduler
from .validator import RequestValidator, ValidationResult

__all__ = [
    "GameEngine",
    "GameNotifier",
    "MessageLog",
    "RequestValidator",
    "ScheduledTask",
    "Scheduler",
    "ValidationResult",
    "create_deck",
    "deal",
    "draw_one",
    "sanitize_for_observer",
]
