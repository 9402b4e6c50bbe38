from __future__ import annotations

from typing import Callable

from .scheduler import Scheduler, Task
from .types import TimerState


class TimerController:
    """Counts whole seconds of active play.

    With a scheduler attached, ``start`` arms a periodic ``tick`` and
    ``stop`` cancels it. Without one, the host calls ``tick`` itself.
    """

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        *,
        interval: float = 1.0,
        on_tick: Callable[[int], None] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._interval = interval
        self._on_tick = on_tick
        self._task: Task | None = None
        self.elapsed_seconds = 0
        self.active = False

    @property
    def state(self) -> TimerState:
        return TimerState(elapsed_seconds=self.elapsed_seconds, active=self.active)

    def start(self) -> None:
        if self.active:
            return
        self.active = True
        if self._scheduler is not None:
            self._task = self._scheduler.call_every(self._interval, self.tick)

    def stop(self) -> None:
        if not self.active:
            return
        self.active = False
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def reset(self, *, game_won: bool = False) -> None:
        self.elapsed_seconds = 0
        if not game_won:
            self.stop()

    def tick(self) -> None:
        if not self.active:
            return
        self.elapsed_seconds += 1
        if self._on_tick is not None:
            self._on_tick(self.elapsed_seconds)
