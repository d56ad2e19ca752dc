"""Card, placeholder card and book models."""

from enum import Enum

from pydantic import BaseModel, model_validator


class Suit(str, Enum):
    """Card suit."""

    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"


class Rank(str, Enum):
    """Card rank. Values are the display strings."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"


SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}

BOOK_SIZE = 4


class Card(BaseModel, frozen=True):
    """Single playing card.

    Identity is the (suit, rank) pair. ``face_up`` is a display flag only and
    takes no part in equality or hashing.
    """

    suit: Suit
    rank: Rank
    face_up: bool = False

    @property
    def id(self) -> str:
        """Deterministic identifier derived from suit and rank."""
        return f"{self.suit.value}-{self.rank.value}"

    @property
    def is_hidden(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.suit == other.suit and self.rank == other.rank

    def __hash__(self) -> int:
        return hash((self.suit, self.rank))

    def __str__(self) -> str:
        return f"{SUIT_SYMBOLS[self.suit]}{self.rank.value}"

    def __repr__(self) -> str:
        return str(self)


class HiddenCard(BaseModel, frozen=True):
    """Opaque stand-in for a card an observer is not allowed to see."""

    id: str
    face_up: bool = False

    @property
    def is_hidden(self) -> bool:
        return True

    def __str__(self) -> str:
        return "[?]"

    def __repr__(self) -> str:
        return f"HiddenCard({self.id})"


class Book(BaseModel, frozen=True):
    """Four cards of one rank collected by a single player."""

    rank: Rank
    cards: tuple[Card, ...]
    owner_id: str

    @model_validator(mode="after")
    def _check_cards(self) -> "Book":
        if len(self.cards) != BOOK_SIZE:
            raise ValueError(f"A book needs exactly {BOOK_SIZE} cards, got {len(self.cards)}")
        if any(c.rank != self.rank for c in self.cards):
            raise ValueError(f"All cards in a book of {self.rank.value}s must share that rank")
        if len(set(self.cards)) != BOOK_SIZE:
            raise ValueError("A book cannot contain the same card twice")
        return self

    def __str__(self) -> str:
        return f"Book({self.rank.value})"


def create_full_deck() -> list[Card]:
    """Create the 52 standard cards in suit/rank order (unshuffled)."""
    return [Card(suit=suit, rank=rank) for suit in Suit for rank in Rank]
