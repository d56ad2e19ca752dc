"""State and message-log publication for observers."""

import itertools
import logging
from collections import deque
from typing import Callable

from gocricket.models.game_state import GameState, Message, MessageKind

from .scheduler import ScheduledTask, Scheduler

logger = logging.getLogger(__name__)

StateListener = Callable[[GameState], None]
MessageListener = Callable[[list[Message]], None]

MESSAGE_TTL = 8.0


class GameNotifier:
    """Delivers sanitized state snapshots and message-log updates to listeners.

    Every publication is delivered to every listener in the order it was
    published. A publication made from inside a listener callback is queued
    and delivered after the current one has reached all listeners.
    """

    def __init__(self) -> None:
        self._state_listeners: list[StateListener] = []
        self._message_listeners: list[MessageListener] = []
        self._latest_state: GameState | None = None
        self._latest_messages: list[Message] = []
        self._outbox: deque[Callable[[], None]] = deque()
        self._dispatching = False

    @property
    def latest_state(self) -> GameState | None:
        return self._latest_state

    @property
    def latest_messages(self) -> list[Message]:
        return list(self._latest_messages)

    def subscribe_state(self, listener: StateListener, replay: bool = True) -> Callable[[], None]:
        """Register a state listener.

        Args:
            listener: Called with each published snapshot.
            replay: Deliver the latest snapshot immediately, if there is one.

        Returns:
            Function that unsubscribes the listener.
        """
        self._state_listeners.append(listener)
        if replay and self._latest_state is not None:
            listener(self._latest_state)
        return lambda: self._remove(self._state_listeners, listener)

    def subscribe_messages(
        self, listener: MessageListener, replay: bool = True
    ) -> Callable[[], None]:
        """Register a message-log listener. See ``subscribe_state``."""
        self._message_listeners.append(listener)
        if replay:
            listener(list(self._latest_messages))
        return lambda: self._remove(self._message_listeners, listener)

    @staticmethod
    def _remove(listeners: list, listener: Callable) -> None:
        if listener in listeners:
            listeners.remove(listener)

    def publish_state(self, state: GameState) -> None:
        """Publish a sanitized state snapshot."""
        self._latest_state = state
        self._enqueue(lambda: self._deliver(self._state_listeners, state))

    def publish_messages(self, messages: list[Message]) -> None:
        """Publish the current message log."""
        self._latest_messages = list(messages)
        snapshot = list(messages)
        self._enqueue(lambda: self._deliver(self._message_listeners, snapshot))

    def _enqueue(self, delivery: Callable[[], None]) -> None:
        self._outbox.append(delivery)
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._outbox:
                self._outbox.popleft()()
        finally:
            self._dispatching = False

    @staticmethod
    def _deliver(listeners: list, payload: object) -> None:
        for listener in list(listeners):
            listener(payload)


class MessageLog:
    """Ordered log of human-readable game messages with auto-expiry."""

    def __init__(
        self,
        notifier: GameNotifier,
        scheduler: Scheduler,
        ttl: float = MESSAGE_TTL,
    ):
        """Initialize message log.

        Args:
            notifier: Where log updates are published.
            scheduler: Schedules message expiry.
            ttl: Seconds a message stays in the log.
        """
        self.notifier = notifier
        self.scheduler = scheduler
        self.ttl = ttl
        self._messages: list[Message] = []
        self._expiries: dict[int, ScheduledTask] = {}
        self._seq = itertools.count(1)

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    def add(self, kind: MessageKind, text: str, player_id: str | None = None) -> Message:
        """Append a message and schedule its removal."""
        message = Message(seq=next(self._seq), kind=kind, text=text, player_id=player_id)
        self._messages.append(message)
        logger.info(f"[{kind.value}] {text}")
        self._expiries[message.seq] = self.scheduler.call_later(
            self.ttl, self._expire, message.seq
        )
        self.notifier.publish_messages(self._messages)
        return message

    def _expire(self, seq: int) -> None:
        self._expiries.pop(seq, None)
        remaining = [m for m in self._messages if m.seq != seq]
        if len(remaining) == len(self._messages):
            return
        self._messages = remaining
        self.notifier.publish_messages(self._messages)

    def clear(self) -> None:
        """Remove every message and cancel pending expiries."""
        for task in self._expiries.values():
            task.cancel()
        self._expiries.clear()
        self._messages = []
        self.notifier.publish_messages(self._messages)
