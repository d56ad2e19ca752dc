"""Game logger for detailed game replay."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, TextIO

from pydantic import BaseModel

from gocricket.models.card import Book, Card, Rank
from gocricket.models.player import Player

from .formatters import format_card, format_cards, format_hands


class GameLogConfig(BaseModel):
    """Configuration for game logging."""

    enabled: bool = False
    output_path: str = "game_log.jsonl"


class GameLogger:
    """Logger for detailed game events in JSONL format.

    Each line in the output file is a JSON object representing one event.
    Hands are written unsanitized, so the file allows step-by-step replay.
    """

    def __init__(self, config: GameLogConfig | None = None):
        """Initialize game logger.

        Args:
            config: Logging configuration. If None, logging is disabled.
        """
        self.config = config or GameLogConfig()
        self._file: TextIO | None = None

    def __enter__(self) -> "GameLogger":
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def open(self) -> None:
        """Open the log file if logging is enabled."""
        if self._file is None and self.config.enabled and self.config.output_path:
            path = Path(self.config.output_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(path, "a", encoding="utf-8")

    def close(self) -> None:
        """Close the log file."""
        if self._file:
            self._file.close()
            self._file = None

    def _write(self, event: dict[str, Any]) -> None:
        """Write an event to the log file.

        Args:
            event: Event dictionary to write as JSON.
        """
        if self._file:
            self._file.write(json.dumps(event, ensure_ascii=False) + "\n")
            self._file.flush()

    def log_game_start(self, game_num: int, players: list[Player], deck_size: int) -> None:
        """Log game start with the dealt hands.

        Args:
            game_num: Game number within this session.
            players: Players after dealing (canonical hands).
            deck_size: Cards left in the deck.
        """
        self._write({
            "type": "game_start",
            "game": game_num,
            "timestamp": datetime.now().isoformat(),
            "players": [
                {"id": p.id, "name": p.name, "human": p.is_human}
                for p in players
            ],
            "hands": format_hands(players),
            "deck_size": deck_size,
        })

    def log_request(
        self,
        game_num: int,
        turn_num: int,
        player_id: str,
        target_id: str,
        rank: Rank,
        received: list[Card],
    ) -> None:
        """Log a resolved card request.

        Args:
            game_num: Game number.
            turn_num: Turn number.
            player_id: Player who asked.
            target_id: Player who was asked.
            rank: Requested rank.
            received: Cards handed over (empty on Go Cricket).
        """
        self._write({
            "type": "request",
            "game": game_num,
            "turn": turn_num,
            "player": player_id,
            "target": target_id,
            "rank": rank.value,
            "result": "success" if received else "go_cricket",
            "cards": format_cards(received),
        })

    def log_draw(
        self,
        game_num: int,
        turn_num: int,
        player_id: str,
        card: Card | None,
        deck_size: int,
    ) -> None:
        """Log a draw after Go Cricket.

        Args:
            game_num: Game number.
            turn_num: Turn number.
            player_id: Player drawing.
            card: Card drawn, or None if the deck was empty.
            deck_size: Cards left after the draw.
        """
        self._write({
            "type": "draw",
            "game": game_num,
            "turn": turn_num,
            "player": player_id,
            "card": format_card(card) if card else "",
            "deck_size": deck_size,
        })

    def log_book(self, game_num: int, turn_num: int, book: Book) -> None:
        """Log a completed book."""
        self._write({
            "type": "book",
            "game": game_num,
            "turn": turn_num,
            "player": book.owner_id,
            "rank": book.rank.value,
            "cards": format_cards(book.cards),
        })

    def log_game_end(
        self,
        game_num: int,
        turn_num: int,
        players: list[Player],
        winner_id: str | None,
        tied_player_ids: list[str],
    ) -> None:
        """Log game end with results.

        Args:
            game_num: Game number.
            turn_num: Final turn number.
            players: Players with their final books.
            winner_id: Nominal winner.
            tied_player_ids: Players sharing the top book count, if more than one.
        """
        self._write({
            "type": "game_end",
            "game": game_num,
            "turn": turn_num,
            "books": {p.id: len(p.books) for p in players},
            "winner": winner_id,
            "tied": tied_player_ids,
        })
