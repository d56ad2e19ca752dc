"""Base strategy class for CPU opponents.

Defines the interface every opponent policy implements.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from gocricket.models.card import Rank
from gocricket.models.player import Player, PlayerAction


@dataclass(frozen=True)
class Decision:
    """A request chosen by a strategy."""

    target_player_id: str
    rank: Rank


class Strategy(ABC):
    """Abstract base class for opponent policies."""

    def __init__(self, player_id: str):
        self.player_id = player_id

    @abstractmethod
    def decide(self, player: Player, opponents: list[Player]) -> Decision:
        """Choose whom to ask and for which rank.

        Args:
            player: The CPU player (canonical, with real cards)
            opponents: Every other player

        Returns:
            The chosen request

        Raises:
            NoValidMoveError: If there is nothing legal to ask
        """

    @abstractmethod
    def observe(self, action: PlayerAction) -> None:
        """Update beliefs from an action by any player, including this one."""

    def reset(self) -> None:
        """Forget everything learned so far."""
