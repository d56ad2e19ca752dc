"""Tests for player and game state models."""

from conftest import book, card
from gocricket.models.card import HiddenCard, Rank, Suit
from gocricket.models.game_state import GamePhase, GameState
from gocricket.models.player import Player


class TestPlayer:
    """Tests for Player helpers."""

    def test_rank_queries(self):
        player = Player(id="player-0", hand=[card("5"), card("K"), card("5", Suit.CLUBS)])
        assert player.hand_count() == 3
        assert player.has_rank(Rank.FIVE)
        assert not player.has_rank(Rank.TWO)
        assert player.cards_of_rank(Rank.FIVE) == [card("5"), card("5", Suit.CLUBS)]
        assert player.rank_counts()[Rank.FIVE] == 2
        assert player.ranks_in_hand() == [Rank.FIVE, Rank.KING]

    def test_hidden_cards_have_no_rank(self):
        player = Player(id="player-1", hand=[HiddenCard(id="hidden-player-1-0")])
        assert player.has_cards()
        assert player.ranks_in_hand() == []
        assert not player.has_rank(Rank.FIVE)


class TestGameState:
    """Tests for GameState helpers."""

    def test_empty_state(self):
        state = GameState()
        assert state.phase == GamePhase.SETUP
        assert state.current_player() is None
        assert state.card_total() == 0

    def test_card_total_counts_books_and_card_in_flight(self):
        """Test a book counts as four cards and the drawn card is not lost."""
        state = GameState(
            players=[
                Player(id="player-0", is_human=True, hand=[card("2")], books=[book("5", "player-0")]),
                Player(id="player-1", hand=[card("3")]),
            ],
            deck=[card("9")],
            animating_card=card("K"),
        )
        assert state.card_total() == 1 + 4 + 1 + 1 + 1

    def test_lookups(self):
        state = GameState(
            players=[
                Player(id="player-0", is_human=True, hand=[card("2")]),
                Player(id="player-1"),
            ],
            winner_id="player-1",
        )
        assert state.human_player().id == "player-0"
        assert state.player_by_id("player-9") is None
        assert [p.id for p in state.players_with_cards()] == ["player-0"]
        assert state.winner().id == "player-1"
