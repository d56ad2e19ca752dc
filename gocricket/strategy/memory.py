"""Belief state a CPU opponent keeps about the table."""

from collections import deque
from dataclasses import dataclass, field

from gocricket.models.card import Rank
from gocricket.models.player import ActionType, PlayerAction

ASK_HISTORY_SIZE = 10


@dataclass
class OpponentMemory:
    """What one CPU player has learned by watching the game.

    - known_ranks: how often each rank was asked for by other players
    - last_asked_ranks: this CPU's own most recent requests (oldest first)
    - successful_requests: target id -> ranks this CPU got from them
    - failed_requests: player id -> ranks that player is believed not to hold
    """

    player_id: str
    known_ranks: dict[Rank, int] = field(default_factory=dict)
    last_asked_ranks: deque[Rank] = field(
        default_factory=lambda: deque(maxlen=ASK_HISTORY_SIZE)
    )
    successful_requests: dict[str, list[Rank]] = field(default_factory=dict)
    failed_requests: dict[str, set[Rank]] = field(default_factory=dict)

    def recent_asks(self, n: int) -> list[Rank]:
        """The last ``n`` ranks this CPU asked for."""
        return list(self.last_asked_ranks)[-n:] if n > 0 else []

    def known_to_lack(self, player_id: str, rank: Rank) -> bool:
        return rank in self.failed_requests.get(player_id, set())

    def _mark_lacking(self, player_id: str, rank: Rank) -> None:
        self.failed_requests.setdefault(player_id, set()).add(rank)

    def _mark_holding(self, player_id: str, rank: Rank) -> None:
        lacking = self.failed_requests.get(player_id)
        if lacking is not None:
            lacking.discard(rank)

    def update(self, action: PlayerAction) -> None:
        """Apply an observed action to the beliefs."""
        rank = action.rank
        if rank is None:
            return
        is_self = action.player_id == self.player_id

        if action.type == ActionType.REQUEST:
            if is_self:
                self.last_asked_ranks.append(rank)
            else:
                # A player can only ask for a rank they hold
                self.known_ranks[rank] = self.known_ranks.get(rank, 0) + 1
                self._mark_holding(action.player_id, rank)

        elif action.type == ActionType.GO_CRICKET:
            if action.target_player_id:
                self._mark_lacking(action.target_player_id, rank)

        elif action.type == ActionType.CARDS_RECEIVED:
            if action.target_player_id:
                self._mark_lacking(action.target_player_id, rank)
            self._mark_holding(action.player_id, rank)
            if is_self and action.target_player_id:
                self.successful_requests.setdefault(action.target_player_id, []).append(rank)

        elif action.type == ActionType.BOOK_FORMED:
            self.known_ranks.pop(rank, None)
            for lacking in self.failed_requests.values():
                lacking.discard(rank)

    def clear(self) -> None:
        self.known_ranks.clear()
        self.last_asked_ranks.clear()
        self.successful_requests.clear()
        self.failed_requests.clear()
