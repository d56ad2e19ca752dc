"""Formatters for game log output."""

from gocricket.models.card import Card, HiddenCard, Suit
from gocricket.models.player import Player

# Suit codes for log output
SUIT_CODES: dict[Suit, str] = {
    Suit.HEARTS: "H",
    Suit.DIAMONDS: "D",
    Suit.CLUBS: "C",
    Suit.SPADES: "S",
}


def format_card(card: Card | HiddenCard) -> str:
    """Format a single card to string.

    Args:
        card: Card to format.

    Returns:
        Formatted string (e.g., "H5" for the five of hearts, "??" if hidden).
    """
    if isinstance(card, HiddenCard):
        return "??"
    return f"{SUIT_CODES[card.suit]}{card.rank.value}"


def format_cards(cards: list[Card | HiddenCard] | tuple[Card, ...]) -> str:
    """Format cards to a comma-separated string.

    Args:
        cards: Cards to format, in order.

    Returns:
        Comma-separated card strings (e.g., "S5,H5,D5").
        Empty string if no cards.
    """
    return ",".join(format_card(c) for c in cards)


def format_hands(players: list[Player]) -> dict[str, str]:
    """Format all players' hands to dict.

    Args:
        players: Players in seat order.

    Returns:
        Dict mapping player id to formatted hand string.
    """
    return {p.id: format_cards(p.hand) for p in players}
