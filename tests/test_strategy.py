"""Tests for opponent memory and the heuristic strategy."""

import random

import pytest

from conftest import card
from gocricket.errors import NoValidMoveError
from gocricket.game.projection import hide_hand
from gocricket.models.card import Rank, Suit
from gocricket.models.player import ActionType, Difficulty, Player, PlayerAction
from gocricket.strategy import HeuristicStrategy, OpponentMemory, difficulty_from_name


def action(kind: ActionType, player: str, rank: str, target: str | None = None) -> PlayerAction:
    return PlayerAction(player_id=player, type=kind, target_player_id=target, rank=Rank(rank))


def opponent(player_id: str, n_cards: int) -> Player:
    """An opponent as the strategy sees it: hand size only."""
    return hide_hand(Player(id=player_id, hand=[card(r) for r in ["2", "3", "4", "6", "7", "8", "9"][:n_cards]]))


@pytest.fixture
def strategy():
    s = HeuristicStrategy("player-1", Difficulty.HARD, random.Random(99))
    s.should_play_optimally = lambda: True
    return s


class TestOpponentMemory:
    """Tests for OpponentMemory updates."""

    def test_own_requests_are_windowed(self):
        """Test only the last ten own requests are remembered."""
        memory = OpponentMemory(player_id="player-1")
        ranks = [r.value for r in Rank][:12]
        for r in ranks:
            memory.update(action(ActionType.REQUEST, "player-1", r, "player-2"))

        assert len(memory.last_asked_ranks) == 10
        assert memory.recent_asks(3) == [Rank(r) for r in ranks[-3:]]
        assert memory.known_ranks == {}

    def test_observed_requests_count_ranks(self):
        """Test other players' requests build rank beliefs."""
        memory = OpponentMemory(player_id="player-1")
        memory.update(action(ActionType.REQUEST, "player-2", "7", "player-0"))
        memory.update(action(ActionType.REQUEST, "player-3", "7", "player-0"))

        assert memory.known_ranks == {Rank.SEVEN: 2}

    def test_go_cricket_marks_target_lacking(self):
        memory = OpponentMemory(player_id="player-1")
        memory.update(action(ActionType.GO_CRICKET, "player-1", "7", "player-2"))
        assert memory.known_to_lack("player-2", Rank.SEVEN)
        assert not memory.known_to_lack("player-3", Rank.SEVEN)

    def test_request_clears_lacking_belief_for_asker(self):
        """Test asking for a rank proves the asker holds it."""
        memory = OpponentMemory(player_id="player-1")
        memory.update(action(ActionType.GO_CRICKET, "player-3", "7", "player-2"))
        memory.update(action(ActionType.REQUEST, "player-2", "7", "player-0"))
        assert not memory.known_to_lack("player-2", Rank.SEVEN)

    def test_cards_received(self):
        """Test a successful request empties the target and feeds the receiver."""
        memory = OpponentMemory(player_id="player-1")
        memory.update(action(ActionType.GO_CRICKET, "player-2", "7", "player-1"))
        memory.update(action(ActionType.CARDS_RECEIVED, "player-1", "7", "player-3"))

        assert memory.known_to_lack("player-3", Rank.SEVEN)
        assert not memory.known_to_lack("player-1", Rank.SEVEN)
        assert memory.successful_requests == {"player-3": [Rank.SEVEN]}

    def test_book_formed_forgets_rank(self):
        """Test a completed book removes the rank from all beliefs."""
        memory = OpponentMemory(player_id="player-1")
        memory.update(action(ActionType.REQUEST, "player-2", "7", "player-0"))
        memory.update(action(ActionType.GO_CRICKET, "player-1", "7", "player-3"))
        memory.update(action(ActionType.BOOK_FORMED, "player-2", "7"))

        assert Rank.SEVEN not in memory.known_ranks
        assert not memory.known_to_lack("player-3", Rank.SEVEN)

    def test_clear(self):
        memory = OpponentMemory(player_id="player-1")
        memory.update(action(ActionType.REQUEST, "player-1", "7", "player-2"))
        memory.update(action(ActionType.GO_CRICKET, "player-1", "7", "player-2"))
        memory.clear()
        assert not memory.last_asked_ranks
        assert not memory.failed_requests


class TestChooseRank:
    """Tests for rank selection tiers."""

    def test_prefers_multiples(self, strategy):
        """Test ranks held twice or more are always chosen first."""
        me = Player(id="player-1", hand=[card("5"), card("5", Suit.CLUBS), card("9"), card("K")])
        for _ in range(20):
            assert strategy.choose_rank(me) == Rank.FIVE

    def test_avoids_recent_asks(self, strategy):
        """Test the last three asked ranks are skipped when alternatives exist."""
        me = Player(id="player-1", hand=[card("5"), card("9"), card("K"), card("2")])
        for r in ["5", "9", "K"]:
            strategy.observe(action(ActionType.REQUEST, "player-1", r, "player-2"))
        for _ in range(20):
            assert strategy.choose_rank(me) == Rank.TWO

    def test_falls_back_to_any_rank(self, strategy):
        """Test all-recent hands still produce a rank from the hand."""
        me = Player(id="player-1", hand=[card("5"), card("9")])
        for r in ["5", "9"]:
            strategy.observe(action(ActionType.REQUEST, "player-1", r, "player-2"))
        assert strategy.choose_rank(me) in (Rank.FIVE, Rank.NINE)

    def test_empty_hand(self, strategy):
        with pytest.raises(NoValidMoveError):
            strategy.choose_rank(Player(id="player-1"))


class TestChooseTarget:
    """Tests for target selection."""

    def test_prefers_upper_half_by_hand_size(self, strategy):
        """Test only the larger half of the candidates is picked from."""
        targets = [opponent("player-0", 2), opponent("player-2", 7), opponent("player-3", 5)]
        picks = {strategy.choose_target(Rank.FIVE, targets).id for _ in range(50)}
        assert picks == {"player-2", "player-3"}

    def test_skips_known_lacking(self, strategy):
        """Test players known not to hold the rank are avoided."""
        strategy.observe(action(ActionType.GO_CRICKET, "player-1", "5", "player-2"))
        targets = [opponent("player-0", 2), opponent("player-2", 7), opponent("player-3", 5)]
        picks = {strategy.choose_target(Rank.FIVE, targets).id for _ in range(50)}
        assert "player-2" not in picks

    def test_all_lacking_falls_back_to_anyone(self, strategy):
        """Test a target is still chosen when every candidate is known to lack the rank."""
        for target in ["player-0", "player-2"]:
            strategy.observe(action(ActionType.GO_CRICKET, "player-1", "5", target))
        targets = [opponent("player-0", 2), opponent("player-2", 7)]
        picks = {strategy.choose_target(Rank.FIVE, targets).id for _ in range(50)}
        assert picks == {"player-0", "player-2"}

    def test_single_candidate(self, strategy):
        assert strategy.choose_target(Rank.FIVE, [opponent("player-3", 1)]).id == "player-3"


class TestDecide:
    """Tests for HeuristicStrategy.decide."""

    def test_decision_is_legal(self, strategy):
        """Test the decision asks an opponent with cards for a held rank."""
        me = Player(id="player-1", hand=[card("5"), card("9")])
        targets = [opponent("player-0", 3), opponent("player-2", 0), opponent("player-3", 4)]
        for _ in range(20):
            decision = strategy.decide(me, targets)
            assert decision.rank in (Rank.FIVE, Rank.NINE)
            assert decision.target_player_id in ("player-0", "player-3")

    def test_no_move_with_empty_hand(self, strategy):
        with pytest.raises(NoValidMoveError):
            strategy.decide(Player(id="player-1"), [opponent("player-0", 3)])

    def test_no_move_without_opponent_cards(self, strategy):
        me = Player(id="player-1", hand=[card("5")])
        with pytest.raises(NoValidMoveError):
            strategy.decide(me, [opponent("player-0", 0), opponent("player-2", 0)])

    def test_random_play_still_legal(self):
        """Test a non-optimal play is still a held rank and a live target."""
        s = HeuristicStrategy("player-1", Difficulty.EASY, random.Random(5))
        s.should_play_optimally = lambda: False
        me = Player(id="player-1", hand=[card("5"), card("9")])
        targets = [opponent("player-0", 3), opponent("player-3", 0)]
        for _ in range(20):
            decision = s.decide(me, targets)
            assert decision.rank in (Rank.FIVE, Rank.NINE)
            assert decision.target_player_id == "player-0"


class TestDifficulty:
    """Tests for difficulty handling."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("CPU Alice", Difficulty.HARD),
            ("CPU Bob", Difficulty.MEDIUM),
            ("CPU Charlie", Difficulty.EASY),
        ],
    )
    def test_difficulty_from_name(self, name, expected):
        assert difficulty_from_name(name) == expected

    def test_optimal_rate_tracks_difficulty(self):
        """Test harder opponents follow the heuristic more often."""
        rates = {}
        for difficulty in Difficulty:
            s = HeuristicStrategy("player-1", difficulty, random.Random(11))
            rates[difficulty] = sum(s.should_play_optimally() for _ in range(2000)) / 2000
        assert rates[Difficulty.EASY] < rates[Difficulty.MEDIUM] < rates[Difficulty.HARD]
        assert abs(rates[Difficulty.HARD] - 0.9) < 0.05
