"""Game state models."""

import time
from enum import Enum

from pydantic import BaseModel, Field

from .card import BOOK_SIZE, Card, HiddenCard, Rank
from .player import Player

DECK_SIZE = 52
NUM_PLAYERS = 4
CARDS_PER_PLAYER = 7


class GamePhase(str, Enum):
    """Lifecycle phase of a game."""

    SETUP = "setup"
    PLAYING = "playing"
    FINISHED = "finished"


class AnimationType(str, Enum):
    """Transient presentation hint attached to the state."""

    DECK_DRAW = "deck-draw"
    CARD_TRANSFER = "card-transfer"


class RequestResult(str, Enum):
    SUCCESS = "success"
    GO_CRICKET = "go-cricket"


class CardRequest(BaseModel):
    """Outcome of the most recent request."""

    from_player_id: str
    to_player_id: str
    rank: Rank
    result: RequestResult
    count: int = 0  # Cards handed over (0 on Go Cricket)


class TransferInfo(BaseModel):
    """Cards moving between two hands. Carries no suits."""

    from_player_id: str
    to_player_id: str
    rank: Rank
    count: int


class GameState(BaseModel):
    """Overall game state."""

    players: list[Player] = Field(default_factory=list)
    current_player_index: int = 0
    deck: list[Card | HiddenCard] = Field(default_factory=list)
    phase: GamePhase = GamePhase.SETUP

    # Result
    winner_id: str | None = None
    tied_player_ids: list[str] = Field(default_factory=list)

    last_request: CardRequest | None = None
    game_start_time: float = Field(default_factory=time.time)
    turn_count: int = 0

    # Presentation hints
    is_animating: bool = False
    animating_card: Card | None = None  # In flight from deck to hand
    animation_type: AnimationType | None = None
    transfer_info: TransferInfo | None = None

    def current_player(self) -> Player | None:
        """Get the player whose turn it is."""
        if not self.players:
            return None
        return self.players[self.current_player_index]

    def player_by_id(self, player_id: str) -> Player | None:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def human_player(self) -> Player | None:
        for player in self.players:
            if player.is_human:
                return player
        return None

    def players_with_cards(self) -> list[Player]:
        return [p for p in self.players if p.has_cards()]

    def winner(self) -> Player | None:
        if self.winner_id is None:
            return None
        return self.player_by_id(self.winner_id)

    def card_total(self) -> int:
        """Count every card accounted for by the state.

        Equals DECK_SIZE for any state reachable after dealing.
        """
        in_hands = sum(len(p.hand) for p in self.players)
        in_books = BOOK_SIZE * sum(len(p.books) for p in self.players)
        in_flight = 1 if self.animating_card is not None else 0
        return in_hands + in_books + len(self.deck) + in_flight

    def __str__(self) -> str:
        parts = [f"Turn {self.turn_count}", f"[{self.phase.value}]"]
        current = self.current_player()
        if current is not None and self.phase == GamePhase.PLAYING:
            parts.append(f"{current.name}'s turn")
        parts.append(f"deck={len(self.deck)}")
        return " ".join(parts)


class MessageKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Message(BaseModel, frozen=True):
    """Entry in the human-readable event log."""

    seq: int
    kind: MessageKind
    text: str
    timestamp: float = Field(default_factory=time.time)
    player_id: str | None = None

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.text}"
