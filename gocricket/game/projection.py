"""Observer-safe projection of the game state."""

from gocricket.models.card import HiddenCard
from gocricket.models.game_state import GameState
from gocricket.models.player import Player


def hidden_placeholder(owner: str, index: int) -> HiddenCard:
    """Placeholder for the ``index``-th hidden card of ``owner``."""
    return HiddenCard(id=f"hidden-{owner}-{index}")


def hide_hand(player: Player) -> Player:
    """Copy of a player whose hand is replaced by placeholders."""
    hidden = player.model_copy(deep=True)
    hidden.hand = [hidden_placeholder(player.id, i) for i in range(len(player.hand))]
    return hidden


def sanitize_for_observer(state: GameState) -> GameState:
    """Produce a copy of the state that is safe to show the human player.

    Every non-human hand and the deck are replaced by placeholders of the
    same length. The human's hand, books and public bookkeeping are kept.
    The input is never modified, and sanitizing a sanitized state changes
    nothing.

    Args:
        state: Canonical (or already sanitized) game state.

    Returns:
        A deep copy with hidden information removed.
    """
    projected = state.model_copy(deep=True)
    for player in projected.players:
        if player.is_human:
            continue
        player.hand = [hidden_placeholder(player.id, i) for i in range(len(player.hand))]
    projected.deck = [hidden_placeholder("deck", i) for i in range(len(projected.deck))]
    return projected
