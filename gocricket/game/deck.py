"""Deck creation, dealing and drawing."""

import logging
import random

from gocricket.errors import EmptyDeckError
from gocricket.models.card import Card, create_full_deck

logger = logging.getLogger(__name__)


def create_deck(rng: random.Random | None = None) -> list[Card]:
    """Create a freshly shuffled 52-card deck.

    Args:
        rng: Random source. Uses the module-level generator if not provided.

    Returns:
        List of cards, each (suit, rank) pair exactly once.
    """
    cards = create_full_deck()
    (rng or random).shuffle(cards)
    return cards


def deal(deck: list[Card], n: int) -> tuple[list[Card], list[Card]]:
    """Split the first ``n`` cards off the deck.

    Args:
        deck: Deck to deal from (not modified).
        n: Number of cards to deal.

    Returns:
        (dealt cards marked face up, remaining deck in original order)
    """
    if n < 0:
        raise ValueError(f"Cannot deal a negative number of cards: {n}")
    dealt = [c.model_copy(update={"face_up": True}) for c in deck[:n]]
    return dealt, deck[n:]


def draw_one(deck: list[Card]) -> tuple[Card, list[Card]]:
    """Take the front card of the deck.

    Args:
        deck: Deck to draw from (not modified).

    Returns:
        (drawn card marked face up, remaining deck)

    Raises:
        EmptyDeckError: If the deck has no cards left.
    """
    if not deck:
        raise EmptyDeckError()
    card = deck[0].model_copy(update={"face_up": True})
    logger.debug(f"Drew {card}, {len(deck) - 1} left in deck")
    return card, deck[1:]
