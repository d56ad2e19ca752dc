"""Tests for the JSONL game logger and its formatters."""

import json
import random

from conftest import NAMES, book, card, rig_game
from gocricket.game.engine import GameEngine
from gocricket.logging import GameLogConfig, GameLogger, format_card, format_cards
from gocricket.models.card import HiddenCard, Rank, Suit


def read_events(path):
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f]


class TestFormatters:
    """Tests for card formatters."""

    def test_format_card(self):
        assert format_card(card("5")) == "H5"
        assert format_card(card("10", Suit.SPADES)) == "S10"
        assert format_card(HiddenCard(id="hidden-player-1-0")) == "??"

    def test_format_cards(self):
        assert format_cards([card("5", Suit.CLUBS), card("K", Suit.DIAMONDS)]) == "C5,DK"
        assert format_cards([]) == ""


class TestGameLogger:
    """Tests for GameLogger class."""

    def test_disabled_writes_nothing(self, tmp_path):
        path = tmp_path / "game.jsonl"
        with GameLogger(GameLogConfig(enabled=False, output_path=str(path))) as game_logger:
            game_logger.log_book(1, 1, book("5", "player-0"))
        assert not path.exists()

    def test_events(self, tmp_path):
        """Test each event is written as one JSON line."""
        path = tmp_path / "logs" / "game.jsonl"
        with GameLogger(GameLogConfig(enabled=True, output_path=str(path))) as game_logger:
            game_logger.log_request(1, 3, "player-0", "player-1", Rank.FIVE, [card("5", Suit.SPADES)])
            game_logger.log_request(1, 4, "player-1", "player-2", Rank.NINE, [])
            game_logger.log_draw(1, 4, "player-1", card("9", Suit.CLUBS), 10)
            game_logger.log_draw(1, 5, "player-2", None, 0)
            game_logger.log_book(1, 5, book("5", "player-0"))

        events = read_events(path)
        assert [e["type"] for e in events] == ["request", "request", "draw", "draw", "book"]
        assert events[0]["result"] == "success"
        assert events[0]["cards"] == "S5"
        assert events[1]["result"] == "go_cricket"
        assert events[2]["card"] == "C9"
        assert events[3]["card"] == ""
        assert events[4]["rank"] == "5"
        assert events[4]["player"] == "player-0"

    def test_engine_writes_replay(self, tmp_path, scheduler):
        """Test a game run through the engine produces start, request and book events."""
        path = tmp_path / "replay.jsonl"
        with GameLogger(GameLogConfig(enabled=True, output_path=str(path))) as game_logger:
            engine = GameEngine(scheduler=scheduler, game_logger=game_logger, rng=random.Random(7))
            rig_game(engine, [
                [card("5"), card("5", Suit.DIAMONDS), card("5", Suit.CLUBS), card("2")],
                [card("5", Suit.SPADES), card("3")],
                [card("4")],
                [card("6")],
            ])
            engine.request_cards("player-1", Rank.FIVE)

        events = read_events(path)
        assert events[0]["type"] == "game_start"
        assert [p["name"] for p in events[0]["players"]] == NAMES
        assert events[0]["deck_size"] == 24
        types = [e["type"] for e in events]
        assert types[-2:] == ["request", "book"]
        assert events[-1]["player"] == "player-0"
        assert events[-1]["cards"] == "H5,D5,C5,S5"
