from __future__ import annotations

import asyncio
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, Protocol

Callback = Callable[[], None]


class Task(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callback) -> Task: ...

    def call_every(self, interval: float, callback: Callback) -> Task: ...


def _check_interval(interval: float) -> None:
    if interval <= 0:
        raise ValueError(f"Periodic interval must be positive, got {interval}.")


class _ManualTask:
    def __init__(self, callback: Callback, interval: float | None) -> None:
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass(order=True)
class _Entry:
    due: float
    seq: int
    task: _ManualTask = field(compare=False)


class ManualScheduler:
    """Virtual-clock scheduler driven by :meth:`advance`.

    Frame-based shells pass their frame delta; tests step time exactly.
    Callbacks run in due-time order, ties in scheduling order.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[_Entry] = []
        self._seq = itertools.count()

    def _push(self, due: float, task: _ManualTask) -> None:
        heapq.heappush(self._queue, _Entry(due=due, seq=next(self._seq), task=task))

    def call_later(self, delay: float, callback: Callback) -> _ManualTask:
        task = _ManualTask(callback, None)
        self._push(self.now + max(0.0, delay), task)
        return task

    def call_every(self, interval: float, callback: Callback) -> _ManualTask:
        _check_interval(interval)
        task = _ManualTask(callback, interval)
        self._push(self.now + interval, task)
        return task

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0].due <= target:
            entry = heapq.heappop(self._queue)
            task = entry.task
            if task.cancelled:
                continue
            self.now = entry.due
            if task.interval is not None:
                self._push(entry.due + task.interval, task)
            task.callback()
        self.now = target

    def pending(self) -> int:
        return sum(1 for e in self._queue if not e.task.cancelled)


class _AsyncioTask:
    def __init__(self) -> None:
        self.handle: asyncio.TimerHandle | None = None
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True
        if self.handle is not None:
            self.handle.cancel()


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop's ``call_later``."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callback) -> _AsyncioTask:
        task = _AsyncioTask()
        task.handle = self._get_loop().call_later(delay, callback)
        return task

    def call_every(self, interval: float, callback: Callback) -> _AsyncioTask:
        _check_interval(interval)
        loop = self._get_loop()
        task = _AsyncioTask()

        def fire() -> None:
            if task.cancelled:
                return
            task.handle = loop.call_later(interval, fire)
            callback()

        task.handle = loop.call_later(interval, fire)
        return task
