"""Logging utilities and game state display."""

import logging
import sys
from typing import TYPE_CHECKING

from gocricket.models.card import Card, Rank

if TYPE_CHECKING:
    from gocricket.models.game_state import GameState, Message
    from gocricket.models.player import Player


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


class GameDisplay:
    """Display sanitized game state to stdout."""

    def __init__(self, show_hands: bool = False):
        """Initialize display.

        Args:
            show_hands: Whether to show placeholder hands of opponents
        """
        self.show_hands = show_hands
        self._last_seq = 0

    def print_separator(self) -> None:
        """Print a separator line."""
        print("=" * 60)

    def print_game_start(self, players: list["Player"]) -> None:
        """Print game start banner."""
        self.print_separator()
        print("GO CRICKET")
        print("Players: " + ", ".join(p.name for p in players))
        self.print_separator()

    def print_table(self, state: "GameState") -> None:
        """Print scores, hand sizes and the human's hand."""
        print(f"\nTurn {state.turn_count} | Deck: {len(state.deck)} cards")
        for player in state.players:
            marker = "->" if player.is_current_player else "  "
            books = " ".join(b.rank.value for b in player.books) or "-"
            print(f"{marker} {player.name:<14} cards: {len(player.hand):>2}  books: {books}")
            if player.is_human or self.show_hands:
                hand = " ".join(str(c) for c in sorted_hand(player))
                print(f"     {hand}")

    def print_messages(self, messages: list["Message"]) -> None:
        """Print messages not printed before."""
        for message in messages:
            if message.seq > self._last_seq:
                print(f"  {message}")
                self._last_seq = message.seq

    def print_game_end(self, state: "GameState") -> None:
        """Print final results."""
        self.print_separator()
        print("FINAL RESULTS")
        self.print_separator()
        ranked = sorted(state.players, key=lambda p: len(p.books), reverse=True)
        for place, player in enumerate(ranked, 1):
            print(f"  #{place}: {player.name} - {len(player.books)} books")
        winner = state.winner()
        if state.tied_player_ids:
            names = ", ".join(state.player_by_id(pid).name for pid in state.tied_player_ids)
            print(f"Tie between {names}")
        if winner is not None:
            print(f"Winner: {winner.name}")


def sorted_hand(player: "Player") -> list:
    """Hand in rank order for display; hidden cards keep their order."""
    order = {rank: i for i, rank in enumerate(Rank)}
    return sorted(
        player.hand,
        key=lambda c: (order[c.rank], c.suit.value) if isinstance(c, Card) else (0, ""),
    )
