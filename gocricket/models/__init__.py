"""Game models."""

from .card import Book, Card, HiddenCard, Rank, Suit, create_full_deck
from .game_state import (
    CARDS_PER_PLAYER,
    DECK_SIZE,
    NUM_PLAYERS,
    AnimationType,
    CardRequest,
    GamePhase,
    GameState,
    Message,
    MessageKind,
    RequestResult,
    TransferInfo,
)
from .player import ActionType, Difficulty, Player, PlayerAction

__all__ = [
    "Book",
    "Card",
    "HiddenCard",
    "Rank",
    "Suit",
    "create_full_deck",
    "CARDS_PER_PLAYER",
    "DECK_SIZE",
    "NUM_PLAYERS",
    "AnimationType",
    "CardRequest",
    "GamePhase",
    "GameState",
    "Message",
    "MessageKind",
    "RequestResult",
    "TransferInfo",
    "ActionType",
    "Difficulty",
    "Player",
    "PlayerAction",
]
