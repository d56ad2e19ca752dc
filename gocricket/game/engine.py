"""Game engine for Go Cricket."""

from __future__ import annotations

import logging
import random
import time
from functools import reduce
from typing import Any, Callable

from gocricket.config import Config
from gocricket.errors import EmptyDeckError, InvalidActionError, NoValidMoveError, RequestError
from gocricket.logging import GameLogger
from gocricket.models.card import BOOK_SIZE, Book, Card, Rank
from gocricket.models.game_state import (
    CARDS_PER_PLAYER,
    NUM_PLAYERS,
    AnimationType,
    CardRequest,
    GamePhase,
    GameState,
    Message,
    MessageKind,
    RequestResult,
    TransferInfo,
)
from gocricket.models.player import ActionType, Difficulty, Player, PlayerAction
from gocricket.strategy import HeuristicStrategy, Strategy, difficulty_from_name

from .deck import create_deck, deal, draw_one
from .notifier import GameNotifier, MessageListener, MessageLog, StateListener
from .projection import hide_hand, sanitize_for_observer
from .scheduler import ScheduledTask, Scheduler
from .validator import RequestValidator

logger = logging.getLogger(__name__)


class GameEngine:
    """Owns the canonical game state and every transition on it.

    The canonical state never leaves the engine. Observers get sanitized
    snapshots through ``subscribe_state`` / ``snapshot``, and the message log
    through ``subscribe_messages``. Delayed follow-ups (turn advance, CPU
    moves, the human's draw) run on the injected scheduler and are tagged with
    the game generation, so ``reset_game`` invalidates any still pending.
    """

    def __init__(
        self,
        config: Config | None = None,
        scheduler: Scheduler | None = None,
        notifier: GameNotifier | None = None,
        game_logger: GameLogger | None = None,
        rng: random.Random | None = None,
    ):
        """Initialize game engine.

        Args:
            config: Configuration (uses defaults if not provided)
            scheduler: Scheduler for delayed continuations
            notifier: Where snapshots and messages are published
            game_logger: GameLogger instance for replay logging
            rng: Random source for shuffling and CPU decisions
        """
        self.config = config or Config()
        self.timing = self.config.timing
        self.scheduler = scheduler or Scheduler()
        self.notifier = notifier or GameNotifier()
        self.game_logger = game_logger
        self.rng = rng or random.Random()

        self.validator = RequestValidator()
        self.messages = MessageLog(self.notifier, self.scheduler, self.timing.message_ttl)
        self.strategies: dict[str, Strategy] = {}

        self._state = GameState()
        self._generation = 0
        self._game_number = 0
        self._tasks: list[ScheduledTask] = []
        self._awaiting_turn_end = False

        self._publish()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def generation(self) -> int:
        """Incremented whenever a game is started or reset."""
        return self._generation

    @property
    def phase(self) -> GamePhase:
        return self._state.phase

    def snapshot(self) -> GameState:
        """Get a sanitized copy of the current state."""
        return sanitize_for_observer(self._state)

    def subscribe_state(self, listener: StateListener) -> Callable[[], None]:
        """Receive a sanitized snapshot after every transition."""
        return self.notifier.subscribe_state(listener)

    def subscribe_messages(self, listener: MessageListener) -> Callable[[], None]:
        """Receive the message log whenever it changes."""
        return self.notifier.subscribe_messages(listener)

    def recent_messages(self) -> list[Message]:
        return self.messages.messages

    def waiting_for_human(self) -> bool:
        """True when the game is blocked on the human's next request."""
        current = self._state.current_player()
        return (
            self._state.phase == GamePhase.PLAYING
            and current is not None
            and current.is_human
            and current.has_cards()
            and not self._state.is_animating
            and not self._awaiting_turn_end
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize_game(self, player_names: list[str] | None = None) -> None:
        """Deal a new game and start play.

        Args:
            player_names: Exactly four names; index 0 is the human. Uses the
                configured names if not provided.

        Raises:
            ValueError: If the wrong number of names is given.
        """
        names = list(player_names) if player_names is not None else self.config.players.all_names()
        if len(names) != NUM_PLAYERS:
            raise ValueError(f"Expected {NUM_PLAYERS} player names, got {len(names)}")

        self._start_generation()
        self._game_number += 1

        deck = create_deck(self.rng)
        players: list[Player] = []
        for index, name in enumerate(names):
            hand, deck = deal(deck, CARDS_PER_PLAYER)
            is_human = index == 0
            players.append(
                Player(
                    id=f"player-{index}",
                    name=name,
                    hand=hand,
                    is_human=is_human,
                    is_current_player=is_human,
                    difficulty=None if is_human else self._difficulty_for(name),
                )
            )

        for player in players:
            if not player.is_human:
                self.strategies[player.id] = HeuristicStrategy(
                    player.id,
                    difficulty=player.difficulty,
                    rng=random.Random(self.rng.getrandbits(32)),
                )

        self._state = GameState(players=players, deck=deck)
        logger.debug(f"Dealt {CARDS_PER_PLAYER} cards to {len(players)} players, {len(deck)} left")

        if self.game_logger:
            self.game_logger.log_game_start(self._game_number, players, len(deck))

        for player in players:
            self.check_and_form_books(player)

        self._state.phase = GamePhase.PLAYING
        self._state.game_start_time = time.time()
        self._state.turn_count = 1
        self._publish()

        logger.info(f"Game {self._game_number} started: {', '.join(names)}")
        self._message(MessageKind.INFO, "Game started! Ask other players for cards.")

    def reset_game(self) -> None:
        """Return to SETUP, forgetting the game, the messages and CPU memories."""
        self._start_generation()
        self._state = GameState()
        self.messages.clear()
        self._publish()
        logger.info("Game reset")

    def _start_generation(self) -> None:
        self._generation += 1
        for task in self._tasks:
            task.cancel()
        self._tasks = []
        self._awaiting_turn_end = False
        for strategy in self.strategies.values():
            strategy.reset()
        self.strategies = {}

    def _difficulty_for(self, name: str) -> Difficulty:
        return self.config.cpu.difficulties.get(name) or difficulty_from_name(name)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def request_cards(self, target_player_id: str, rank: Rank | str) -> None:
        """Ask another player for every card of ``rank`` on the human's behalf.

        Invalid requests are absorbed: nothing happens, except that asking
        for a rank the human does not hold adds a warning message.

        Args:
            target_player_id: Player being asked
            rank: Rank being asked for
        """
        try:
            rank = Rank(rank)
        except ValueError:
            logger.debug(f"Ignoring request for unknown rank {rank!r}")
            return

        current = self._state.current_player()
        if current is None or not current.is_human:
            logger.debug("Ignoring request: it is not the human player's turn")
            return
        if self._awaiting_turn_end:
            logger.debug("Ignoring request: previous request still resolving")
            return

        try:
            self._resolve_request(current.id, target_player_id, rank)
        except InvalidActionError as e:
            if e.reason == RequestError.RANK_NOT_HELD:
                self._message(MessageKind.WARNING, str(e), current.id)
            else:
                logger.debug(f"Ignoring request: {e}")

    def _resolve_request(self, actor_id: str, target_id: str, rank: Rank) -> None:
        """Apply a validated request and continue the turn.

        Raises:
            InvalidActionError: If the request is not allowed right now.
        """
        self.validator.validate(self._state, actor_id, target_id, rank).raise_if_invalid()

        actor = self._state.player_by_id(actor_id)
        target = self._state.player_by_id(target_id)
        self._broadcast(PlayerAction(player_id=actor.id, type=ActionType.REQUEST,
                                     target_player_id=target.id, rank=rank))

        requested = target.cards_of_rank(rank)
        if self.game_logger:
            self.game_logger.log_request(
                self._game_number, self._state.turn_count, actor.id, target.id, rank, requested
            )

        if requested:
            self._message(
                MessageKind.SUCCESS,
                f"{actor.name} got {len(requested)} {rank.value}(s) from {target.name}!",
                actor.id,
            )
            self._transfer_cards(target, actor, requested, rank)
            self._broadcast(PlayerAction(player_id=actor.id, type=ActionType.CARDS_RECEIVED,
                                         target_player_id=target.id, rank=rank,
                                         count=len(requested)))
            self.check_and_form_books(actor)

            if actor.is_human:
                # Let the human see the new cards before the turn passes
                self._awaiting_turn_end = True
                self._schedule(self.timing.transfer_delay, self._end_turn)
            else:
                self._end_turn()
            return

        self._message(MessageKind.INFO, f'{target.name} says "Go Cricket!" to {actor.name}')
        self._state.last_request = CardRequest(
            from_player_id=actor.id,
            to_player_id=target.id,
            rank=rank,
            result=RequestResult.GO_CRICKET,
        )
        self._broadcast(PlayerAction(player_id=actor.id, type=ActionType.GO_CRICKET,
                                     target_player_id=target.id, rank=rank))

        if actor.is_human:
            self._animate_go_cricket(actor.id)
        else:
            self._go_cricket(actor.id)
            self._end_turn()

    def _transfer_cards(self, source: Player, dest: Player, cards: list[Card], rank: Rank) -> None:
        """Move ``cards`` from one hand to another in a single transition."""
        moving = set(cards)
        source.hand = [c for c in source.hand if c not in moving]
        dest.hand = [*dest.hand, *cards]

        self._state.last_request = CardRequest(
            from_player_id=dest.id,
            to_player_id=source.id,
            rank=rank,
            result=RequestResult.SUCCESS,
            count=len(cards),
        )
        self._state.transfer_info = TransferInfo(
            from_player_id=source.id, to_player_id=dest.id, rank=rank, count=len(cards)
        )
        self._state.animation_type = AnimationType.CARD_TRANSFER
        self._publish()
        logger.debug(f"{len(cards)} card(s) of rank {rank.value} moved {source.id} -> {dest.id}")

    def _draw(self, player_id: str) -> Card | None:
        """Take the top card of the deck for a player, if any is left."""
        try:
            card, self._state.deck = draw_one(self._state.deck)
        except EmptyDeckError:
            logger.debug(f"{player_id} cannot draw: deck is empty")
            card = None
        if self.game_logger:
            self.game_logger.log_draw(
                self._game_number, self._state.turn_count, player_id, card, len(self._state.deck)
            )
        return card

    def _go_cricket(self, player_id: str) -> None:
        """Draw a card straight into a CPU player's hand."""
        card = self._draw(player_id)
        if card is None:
            return
        player = self._state.player_by_id(player_id)
        player.hand = [*player.hand, card]
        self._publish()
        self.check_and_form_books(player)

    def _animate_go_cricket(self, player_id: str) -> None:
        """Draw for the human, holding the card in flight for ``draw_delay``."""
        card = self._draw(player_id)
        if card is None:
            self._end_turn()
            return

        self._state.is_animating = True
        self._state.animating_card = card
        self._state.animation_type = AnimationType.DECK_DRAW
        self._awaiting_turn_end = True
        self._publish()
        self._schedule(self.timing.draw_delay, self._complete_go_cricket, player_id, card)

    def _complete_go_cricket(self, player_id: str, card: Card) -> None:
        player = self._state.player_by_id(player_id)
        player.hand = [*player.hand, card]
        self._state.is_animating = False
        self._state.animating_card = None
        self._state.animation_type = None
        self._publish()

        self.check_and_form_books(player)
        self._end_turn()

    # ------------------------------------------------------------------
    # Books, turns and the end of the game
    # ------------------------------------------------------------------

    def check_and_form_books(self, player: Player) -> list[Book]:
        """Turn every complete rank in a player's hand into a book.

        Args:
            player: Player to check

        Returns:
            Books formed by this call (empty if none)
        """
        player = self._state.player_by_id(player.id) or player

        by_rank: dict[Rank, list[Card]] = {}
        for card in player.hand:
            if isinstance(card, Card):
                by_rank.setdefault(card.rank, []).append(card)

        new_books = [
            Book(rank=rank, cards=tuple(cards), owner_id=player.id)
            for rank, cards in by_rank.items()
            if len(cards) == BOOK_SIZE
        ]
        if not new_books:
            return []

        booked = {c for book in new_books for c in book.cards}
        player.hand = [c for c in player.hand if c not in booked]
        player.books = [*player.books, *new_books]
        player.score = len(player.books)
        self._publish()

        for book in new_books:
            self._message(
                MessageKind.SUCCESS, f"{player.name} formed a book of {book.rank.value}s!", player.id
            )
            self._broadcast(PlayerAction(player_id=player.id, type=ActionType.BOOK_FORMED,
                                         rank=book.rank))
            if self.game_logger:
                self.game_logger.log_book(self._game_number, self._state.turn_count, book)
        return new_books

    def _end_turn(self) -> None:
        self._awaiting_turn_end = False
        self.check_win_condition()
        if self._state.phase == GamePhase.PLAYING:
            self.next_turn()

    def next_turn(self) -> None:
        """Pass the turn to the next player who still holds cards."""
        state = self._state
        if not state.players:
            return

        count = len(state.players)
        index = state.current_player_index
        for _ in range(count):
            index = (index + 1) % count
            if state.players[index].has_cards():
                break

        for i, player in enumerate(state.players):
            player.is_current_player = i == index
        state.current_player_index = index
        state.turn_count += 1
        state.transfer_info = None
        if not state.is_animating:
            state.animation_type = None
        self._publish()

        player = state.players[index]
        logger.debug(f"Turn {state.turn_count}: {player.name}")
        if not player.is_human and player.has_cards():
            self._schedule(self.timing.cpu_turn_delay, self._make_computer_move, player.id)

    def _make_computer_move(self, player_id: str) -> None:
        """Let a CPU player pick a request and announce it."""
        state = self._state
        current = state.current_player()
        if state.phase != GamePhase.PLAYING or current is None or current.id != player_id:
            logger.debug(f"Skipping CPU move for {player_id}: no longer its turn")
            return

        opponents = [hide_hand(p) for p in state.players if p.id != player_id and p.has_cards()]
        try:
            strategy = self.strategies.get(player_id)
            if strategy is None:
                raise NoValidMoveError(f"No strategy for {player_id}")
            decision = strategy.decide(current, opponents)
        except NoValidMoveError as e:
            logger.info(f"{current.name} passes: {e}")
            self._end_turn()
            return

        target = state.player_by_id(decision.target_player_id)
        if target is None or target.id == player_id:
            logger.warning(f"{current.name} chose an invalid target {decision.target_player_id!r}")
            self._end_turn()
            return

        self._message(
            MessageKind.INFO, f"{current.name} asks {target.name} for {decision.rank.value}s", player_id
        )
        self._schedule(
            self.timing.cpu_think_delay,
            self._execute_computer_request,
            player_id,
            target.id,
            decision.rank,
        )

    def _execute_computer_request(self, player_id: str, target_id: str, rank: Rank) -> None:
        try:
            self._resolve_request(player_id, target_id, rank)
        except InvalidActionError as e:
            if e.reason in (RequestError.WRONG_PHASE, RequestError.NOT_YOUR_TURN):
                logger.debug(f"Dropping CPU request from {player_id}: {e}")
                return
            logger.warning(f"CPU request from {player_id} rejected: {e}")
            self._end_turn()

    def check_win_condition(self) -> bool:
        """Finish the game once at most one player still holds cards.

        The nominal winner is picked by a left-to-right reduction that keeps
        the earlier player only on a strictly greater book count, so on a tie
        the tied player with the highest seat index is named. The tie itself
        is announced and recorded in ``tied_player_ids``.

        Returns:
            True if the game finished during this call.
        """
        state = self._state
        if state.phase != GamePhase.PLAYING or len(state.players_with_cards()) > 1:
            return False

        max_books = max(len(p.books) for p in state.players)
        tied = [p for p in state.players if len(p.books) == max_books]
        if len(tied) > 1:
            self._message(
                MessageKind.INFO,
                f"Tiebreaker! {', '.join(p.name for p in tied)} have the same number of books.",
            )

        winner = reduce(
            lambda prev, cur: prev if len(prev.books) > len(cur.books) else cur, state.players
        )
        state.phase = GamePhase.FINISHED
        state.winner_id = winner.id
        state.tied_player_ids = [p.id for p in tied] if len(tied) > 1 else []
        self._publish()

        self._message(
            MessageKind.SUCCESS, f"Game Over! {winner.name} wins with {len(winner.books)} books!"
        )
        logger.info(f"Game {self._game_number} finished after {state.turn_count} turns")
        if self.game_logger:
            self.game_logger.log_game_end(
                self._game_number, state.turn_count, state.players,
                state.winner_id, state.tied_player_ids,
            )
        return True

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _schedule(self, delay: float, callback: Callable[..., Any], *args: Any) -> None:
        """Schedule a continuation bound to the current generation."""
        self._tasks = [t for t in self._tasks if not (t.done or t.cancelled)]
        task = self.scheduler.call_later(delay, self._run_guarded, self._generation, callback, args)
        self._tasks.append(task)

    def _run_guarded(self, generation: int, callback: Callable[..., Any], args: tuple) -> None:
        if generation != self._generation:
            logger.debug(f"Dropping stale continuation {callback.__name__} from generation {generation}")
            return
        callback(*args)

    def _publish(self) -> None:
        self.notifier.publish_state(sanitize_for_observer(self._state))

    def _message(self, kind: MessageKind, text: str, player_id: str | None = None) -> None:
        self.messages.add(kind, text, player_id)

    def _broadcast(self, action: PlayerAction) -> None:
        for strategy in self.strategies.values():
            strategy.observe(action)
