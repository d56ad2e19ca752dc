"""Single-threaded cooperative task scheduler.

Delayed continuations are queued against a virtual clock and run one at a
time, so no two state transitions ever overlap. Tests drive the clock with
``advance``; the CLI uses ``run_until_idle(realtime=True)`` to sleep through
the delays.
"""

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass(order=True)
class ScheduledTask:
    """A unit of delayed work."""

    when: float
    seq: int
    callback: Callable[..., Any] = field(compare=False)
    args: tuple[Any, ...] = field(default=(), compare=False)
    cancelled: bool = field(default=False, compare=False)
    done: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        """Prevent the task from running. Safe to call more than once."""
        self.cancelled = True


class Scheduler:
    """Virtual-clock scheduler.

    Tasks due at the same instant run in the order they were scheduled.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[ScheduledTask] = []
        self._counter = itertools.count()

    def now(self) -> float:
        """Current virtual time in seconds."""
        return self._now

    @property
    def pending_count(self) -> int:
        """Number of tasks still waiting to run."""
        return sum(1 for t in self._queue if not t.cancelled)

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ScheduledTask:
        """Schedule ``callback(*args)`` to run ``delay`` seconds from now.

        Args:
            delay: Seconds to wait (negative values are treated as 0).
            callback: Function to call.
            *args: Positional arguments for the callback.

        Returns:
            The scheduled task, which can be cancelled.
        """
        task = ScheduledTask(
            when=self._now + max(0.0, delay),
            seq=next(self._counter),
            callback=callback,
            args=args,
        )
        heapq.heappush(self._queue, task)
        return task

    def cancel_all(self) -> None:
        """Cancel every pending task."""
        for task in self._queue:
            task.cancel()
        self._queue.clear()

    def _pop_next(self) -> ScheduledTask | None:
        while self._queue:
            task = heapq.heappop(self._queue)
            if not task.cancelled:
                return task
        return None

    def _peek_when(self) -> float | None:
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)
        return self._queue[0].when if self._queue else None

    def _run(self, task: ScheduledTask) -> None:
        self._now = max(self._now, task.when)
        task.done = True
        task.callback(*task.args)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every task that falls due.

        Tasks scheduled while advancing run too if they are due before the
        new time.

        Args:
            seconds: How far to move the clock.

        Returns:
            Number of tasks run.
        """
        target = self._now + seconds
        ran = 0
        while True:
            when = self._peek_when()
            if when is None or when > target:
                break
            task = self._pop_next()
            if task is None:
                break
            self._run(task)
            ran += 1
        self._now = target
        return ran

    def run_until_idle(
        self,
        max_tasks: int = 10_000,
        realtime: bool = False,
        speed: float = 1.0,
        stop: Callable[[], bool] | None = None,
    ) -> int:
        """Run tasks until none are left.

        Args:
            max_tasks: Upper bound on tasks run in this call.
            realtime: Sleep through the delays instead of jumping the clock.
            speed: Pace multiplier for realtime mode (2.0 = twice as fast).
            stop: Optional predicate checked before each task; stops when true.

        Returns:
            Number of tasks run.
        """
        ran = 0
        while ran < max_tasks:
            if stop is not None and stop():
                break
            when = self._peek_when()
            if when is None:
                break
            if realtime and speed > 0 and when > self._now:
                time.sleep((when - self._now) / speed)
            task = self._pop_next()
            if task is None:
                break
            self._run(task)
            ran += 1
        if ran >= max_tasks and self.pending_count:
            logger.warning(f"Scheduler stopped after {max_tasks} tasks with work still pending")
        return ran
