"""Shared fixtures and helpers for engine tests."""

import random

import pytest

from gocricket.game.engine import GameEngine
from gocricket.game.scheduler import Scheduler
from gocricket.models.card import Book, Card, Rank, Suit, create_full_deck

NAMES = ["User", "CPU Alice", "CPU Bob", "CPU Charlie"]


def card(rank: str, suit: Suit = Suit.HEARTS) -> Card:
    """Shorthand card constructor: card("5", Suit.SPADES)."""
    return Card(suit=suit, rank=Rank(rank), face_up=True)


def book(rank: str, owner_id: str) -> Book:
    return Book(rank=Rank(rank), cards=tuple(card(rank, s) for s in Suit), owner_id=owner_id)


def rig_game(
    engine: GameEngine,
    hands: list[list[Card]],
    deck_top: list[Card] | None = None,
    fill_deck: bool = True,
) -> None:
    """Start a game, then replace the dealt cards with fixed hands.

    Args:
        engine: Engine to rig
        hands: One hand per seat
        deck_top: Cards placed on top of the deck, in draw order
        fill_deck: Put every unused card under ``deck_top`` so all 52 are accounted for
    """
    engine.initialize_game(NAMES)
    state = engine._state
    top = list(deck_top or [])
    used = {c for hand in hands for c in hand} | set(top)
    rest = [c for c in create_full_deck() if c not in used] if fill_deck else []
    for player, hand in zip(state.players, hands):
        player.hand = list(hand)
        player.books = []
        player.score = 0
    state.deck = top + rest


@pytest.fixture
def scheduler():
    return Scheduler()


@pytest.fixture
def engine(scheduler):
    return GameEngine(scheduler=scheduler, rng=random.Random(1234))
