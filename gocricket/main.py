"""Main entry point for Go Cricket."""

import argparse
import logging
import random
import sys
from datetime import datetime
from pathlib import Path

from gocricket.config import load_config
from gocricket.game.engine import GameEngine
from gocricket.game.scheduler import Scheduler
from gocricket.logging import GameLogConfig, GameLogger
from gocricket.models.card import Rank
from gocricket.models.game_state import GamePhase, GameState
from gocricket.models.player import ActionType, Difficulty, PlayerAction
from gocricket.strategy import HeuristicStrategy
from gocricket.utils.logger import GameDisplay, setup_logging

logger = logging.getLogger(__name__)


def generate_log_filename(log_dir: str, human_name: str) -> str:
    """Generate log filename with timestamp and the human player's name.

    Format: {ISO timestamp}_{name}.jsonl
    """
    timestamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    safe_name = "".join(ch if ch.isalnum() else "-" for ch in human_name)
    return str(Path(log_dir) / f"{timestamp}_{safe_name}.jsonl")


def parse_request(text: str, state: GameState) -> tuple[str, Rank] | None:
    """Parse "<rank> <seat>" typed by the human.

    Args:
        text: User input, e.g. "5 2" or "q 1"
        state: Sanitized state, used to resolve the seat number

    Returns:
        (target player id, rank), or None if the input is not understood
    """
    parts = text.strip().upper().split()
    if len(parts) != 2:
        return None
    rank_text, seat_text = parts
    try:
        rank = Rank(rank_text)
        seat = int(seat_text)
    except ValueError:
        return None
    if not 0 < seat < len(state.players):
        return None
    return state.players[seat].id, rank


def prompt_human(state: GameState) -> tuple[str, Rank] | None:
    """Ask the human for a request until the input parses. None means quit."""
    while True:
        text = input("Ask for <rank> <seat 1-3> (q to quit): ")
        if text.strip().lower() in ("q", "quit", "exit"):
            return None
        request = parse_request(text, state)
        if request is not None:
            return request
        print("  Could not read that, try e.g. '7 2'")


def autoplay_human(autopilot: HeuristicStrategy, state: GameState) -> tuple[str, Rank] | None:
    """Pick the human's request with the CPU heuristic."""
    human = state.human_player()
    opponents = [p for p in state.players if p.id != human.id and p.has_cards()]
    decision = autopilot.decide(human, opponents)
    autopilot.observe(
        PlayerAction(
            player_id=human.id,
            type=ActionType.REQUEST,
            target_player_id=decision.target_player_id,
            rank=decision.rank,
        )
    )
    return decision.target_player_id, decision.rank


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success)
    """
    parser = argparse.ArgumentParser(description="Go Cricket card game against three CPU players")
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config file (YAML)",
    )
    parser.add_argument(
        "--name",
        help="Your player name (overrides config)",
    )
    parser.add_argument(
        "--auto",
        action="store_true",
        help="Let the CPU heuristic play your seat",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for a reproducible game",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help="Pace multiplier for delays (0 disables waiting)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--show-hands",
        action="store_true",
        help="Show opponent hand placeholders in output",
    )
    parser.add_argument(
        "--game-log",
        type=Path,
        help="Directory for game log files (filename auto-generated)",
    )

    args = parser.parse_args()

    # Load config
    config = load_config(args.config)

    # Apply command-line overrides
    if args.name:
        config.players.human_name = args.name
    if args.verbose:
        config.logging.level = "DEBUG"
    if args.show_hands:
        config.logging.show_hands = True

    game_log_enabled = args.game_log is not None or config.game_log.enabled
    game_log_dir = str(args.game_log) if args.game_log else config.game_log.output_path

    setup_logging(config.logging.level)
    display = GameDisplay(show_hands=config.logging.show_hands)

    if game_log_enabled:
        log_path = generate_log_filename(game_log_dir, config.players.human_name)
        game_log_config = GameLogConfig(enabled=True, output_path=log_path)
        print(f"Game log: {log_path}")
    else:
        game_log_config = GameLogConfig(enabled=False)

    rng = random.Random(args.seed)
    scheduler = Scheduler()
    autopilot = HeuristicStrategy("player-0", Difficulty.HARD, random.Random(rng.getrandbits(32)))

    try:
        with GameLogger(game_log_config) as game_logger:
            engine = GameEngine(config, scheduler=scheduler, game_logger=game_logger, rng=rng)
            engine.subscribe_messages(display.print_messages)
            engine.initialize_game()
            display.print_game_start(engine.snapshot().players)

            def blocked() -> bool:
                return engine.phase != GamePhase.PLAYING or engine.waiting_for_human()

            while engine.phase == GamePhase.PLAYING:
                scheduler.run_until_idle(realtime=args.speed > 0, speed=args.speed, stop=blocked)
                if not engine.waiting_for_human():
                    if engine.phase == GamePhase.PLAYING and scheduler.pending_count == 0:
                        logger.error("Game stalled with nothing scheduled")
                        return 1
                    continue

                state = engine.snapshot()
                display.print_table(state)
                if args.auto:
                    request = autoplay_human(autopilot, state)
                else:
                    request = prompt_human(state)
                if request is None:
                    print("Bye!")
                    return 0
                engine.request_cards(*request)

            display.print_game_end(engine.snapshot())
            return 0

    except (KeyboardInterrupt, EOFError):
        print("\nGame interrupted by user")
        return 1
    except Exception as e:
        logger.exception(f"Game error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
