"""Memory-based heuristic strategy.

Strategy overview:
- Rank: prefer ranks held two or more times (closest to a book), then ranks
  not asked for in the last three turns, then anything in hand
- Target: skip players believed not to hold the rank, prefer the larger
  hands, keep some randomness so the CPU is not predictable
- Difficulty: how often the CPU follows the heuristic instead of asking for
  a random rank from a random player
"""

import logging
import math
import random

from gocricket.errors import NoValidMoveError
from gocricket.models.card import Rank
from gocricket.models.player import Difficulty, Player, PlayerAction

from .base import Decision, Strategy
from .memory import OpponentMemory

logger = logging.getLogger(__name__)

# Recent asks a CPU avoids repeating
RECENT_ASK_WINDOW = 3

OPTIMAL_PLAY_RATE: dict[Difficulty, float] = {
    Difficulty.EASY: 0.3,
    Difficulty.MEDIUM: 0.6,
    Difficulty.HARD: 0.9,
}


def difficulty_from_name(name: str) -> Difficulty:
    """Fallback difficulty for players configured without one."""
    if "Alice" in name:
        return Difficulty.HARD
    if "Bob" in name:
        return Difficulty.MEDIUM
    return Difficulty.EASY


class HeuristicStrategy(Strategy):
    """Opponent policy driven by an OpponentMemory."""

    def __init__(
        self,
        player_id: str,
        difficulty: Difficulty = Difficulty.MEDIUM,
        rng: random.Random | None = None,
    ):
        """Initialize strategy.

        Args:
            player_id: The CPU player this strategy plays for
            difficulty: Skill level
            rng: Random source (a private one is created if not provided)
        """
        super().__init__(player_id)
        self.difficulty = difficulty
        self.rng = rng or random.Random()
        self.memory = OpponentMemory(player_id=player_id)

    def should_play_optimally(self) -> bool:
        return self.rng.random() < OPTIMAL_PLAY_RATE[self.difficulty]

    def decide(self, player: Player, opponents: list[Player]) -> Decision:
        ranks = player.ranks_in_hand()
        targets = [p for p in opponents if p.id != player.id and p.has_cards()]
        if not ranks or not targets:
            raise NoValidMoveError(f"{player.name} has nothing to ask")

        if not self.should_play_optimally():
            rank = self.rng.choice(ranks)
            target = self.rng.choice(targets)
            logger.debug(f"{player.name} plays a random request: {rank.value} from {target.name}")
            return Decision(target_player_id=target.id, rank=rank)

        rank = self.choose_rank(player)
        target = self.choose_target(rank, targets)
        return Decision(target_player_id=target.id, rank=rank)

    def choose_rank(self, player: Player) -> Rank:
        """Pick the rank to ask for."""
        counts = player.rank_counts()
        ranks = player.ranks_in_hand()
        if not ranks:
            raise NoValidMoveError(f"{player.name} has an empty hand")

        multiples = [r for r in ranks if counts[r] > 1]
        if multiples:
            return self.rng.choice(multiples)

        recent = self.memory.recent_asks(RECENT_ASK_WINDOW)
        fresh = [r for r in ranks if r not in recent]
        if fresh:
            return self.rng.choice(fresh)

        return self.rng.choice(ranks)

    def choose_target(self, rank: Rank, targets: list[Player]) -> Player:
        """Pick whom to ask for ``rank``."""
        if not targets:
            raise NoValidMoveError("No opponent holds any cards")

        good = [t for t in targets if not self.memory.known_to_lack(t.id, rank)]
        if not good:
            return self.rng.choice(targets)

        # Larger hands are more likely to hold the rank; sort is stable
        good.sort(key=lambda p: p.hand_count(), reverse=True)
        top = good[: max(1, math.ceil(len(good) / 2))]
        return self.rng.choice(top)

    def observe(self, action: PlayerAction) -> None:
        self.memory.update(action)

    def reset(self) -> None:
        self.memory.clear()
