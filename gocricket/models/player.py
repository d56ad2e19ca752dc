"""Player and player action models."""

import time
from collections import Counter
from enum import Enum

from pydantic import BaseModel, Field

from .card import Book, Card, HiddenCard, Rank


class Difficulty(str, Enum):
    """CPU opponent skill level."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Player(BaseModel):
    """Player state."""

    id: str  # player-0 .. player-3
    name: str = "Player"
    hand: list[Card | HiddenCard] = Field(default_factory=list)
    books: list[Book] = Field(default_factory=list)
    is_human: bool = False
    is_current_player: bool = False
    score: int = 0
    difficulty: Difficulty | None = None  # CPU players only

    def hand_count(self) -> int:
        """Get number of cards in hand."""
        return len(self.hand)

    def has_cards(self) -> bool:
        return len(self.hand) > 0

    def cards_of_rank(self, rank: Rank) -> list[Card]:
        """Get all visible cards of the given rank."""
        return [c for c in self.hand if isinstance(c, Card) and c.rank == rank]

    def has_rank(self, rank: Rank) -> bool:
        return any(isinstance(c, Card) and c.rank == rank for c in self.hand)

    def rank_counts(self) -> Counter[Rank]:
        """Count visible cards in hand per rank."""
        return Counter(c.rank for c in self.hand if isinstance(c, Card))

    def ranks_in_hand(self) -> list[Rank]:
        """Distinct ranks in hand, in order of first appearance."""
        return list(dict.fromkeys(c.rank for c in self.hand if isinstance(c, Card)))

    def __str__(self) -> str:
        marker = "*" if self.is_current_player else ""
        return f"{marker}{self.name}[{len(self.hand)} cards, {self.score} books]"


class ActionType(str, Enum):
    """Kinds of player actions an opponent memory can observe."""

    REQUEST = "request"  # Asked someone for a rank
    CARDS_RECEIVED = "cards_received"  # Target handed over every card of the rank
    GO_CRICKET = "go_cricket"  # Target had none of the rank
    BOOK_FORMED = "book_formed"


class PlayerAction(BaseModel, frozen=True):
    """A single observable action."""

    player_id: str
    type: ActionType
    target_player_id: str | None = None
    rank: Rank | None = None
    count: int = 0
    timestamp: float = Field(default_factory=time.time)
