from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Sequence

from memomatch.engine import match as engine
from memomatch.engine.match import Event, GameConfig, GameState, MismatchToken, Phase
from memomatch.engine.scheduler import Scheduler, Task
from memomatch.engine.serialize import card_to_dict
from memomatch.engine.timer import TimerController
from memomatch.engine.types import Card
from memomatch.services.best_time import BestTimeTracker
from memomatch.services.telemetry import TelemetryService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    cards: tuple[Card, ...]
    selection: tuple[int, ...]
    matched_pairs: int
    pair_count: int
    won: bool
    phase: Phase
    elapsed_seconds: int
    timer_active: bool
    best_time: int
    new_record: bool

    def to_dict(self) -> dict[str, object]:
        return {
            "cards": [card_to_dict(c) for c in self.cards],
            "selection": list(self.selection),
            "matched_pairs": self.matched_pairs,
            "pair_count": self.pair_count,
            "won": self.won,
            "phase": self.phase,
            "elapsed_seconds": self.elapsed_seconds,
            "timer_active": self.timer_active,
            "best_time": self.best_time,
            "new_record": self.new_record,
        }


Listener = Callable[[SessionSnapshot, Sequence[Event]], None]


class GameSession:
    """One playable game wired to its timer and best-time record.

    The presentation layer sends the four inbound events (select, restart,
    reset timer, reset high score) and re-renders from :meth:`snapshot`,
    or from the snapshot handed to listeners after every change.
    """

    def __init__(
        self,
        tracker: BestTimeTracker,
        scheduler: Scheduler,
        *,
        config: GameConfig | None = None,
        rng: random.Random | None = None,
        telemetry: TelemetryService | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.tracker = tracker
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._telemetry = telemetry
        self._listeners: list[Listener] = []
        self._mismatch_task: Task | None = None
        self._new_record = False
        self.timer = TimerController(scheduler, interval=self.config.tick_interval, on_tick=self._on_tick)
        self.state: GameState = engine.new_game(self._rng, config=self.config)

    # -------- Outbound --------
    def snapshot(self) -> SessionSnapshot:
        s = self.state
        return SessionSnapshot(
            cards=tuple(Card(id=c.id, symbol=c.symbol, is_flipped=c.is_flipped) for c in s.deck),
            selection=tuple(s.selection),
            matched_pairs=s.matched_pairs,
            pair_count=s.config.pair_count,
            won=s.won,
            phase=engine.phase(s),
            elapsed_seconds=self.timer.elapsed_seconds,
            timer_active=self.timer.active,
            best_time=self.tracker.value,
            new_record=self._new_record,
        )

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, events: Sequence[Event]) -> None:
        if self._telemetry is not None and events:
            try:
                self._telemetry.record(events, generation=self.state.generation)
            except OSError as e:
                logger.warning("Could not write telemetry to %s: %s", self._telemetry.path, e)
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap, events)

    # -------- Inbound --------
    def select_card(self, card_id: int) -> bool:
        result = engine.select_card(self.state, card_id)
        if not result.ok:
            logger.debug("Ignored selection of card %s: %s", card_id, result.error)
            return False

        events = list(result.events)
        for ev in result.events:
            t = ev["type"]
            if t == "ROUND_STARTED":
                self.timer.start()
            elif t == "GAME_WON":
                events.extend(self._on_win())
        if result.pending is not None:
            self._schedule_mismatch(result.pending)
        self._notify(events)
        return True

    def restart_session(self) -> None:
        self._cancel_mismatch()
        self.state = engine.restart(self.state, self._rng)
        self.timer.stop()
        self._new_record = False
        self._notify([{"type": "SESSION_RESTARTED", "generation": self.state.generation}])

    def new_game(self) -> None:
        """Restart with the timer back at zero."""
        self._cancel_mismatch()
        self.state = engine.restart(self.state, self._rng)
        self.timer.reset()
        self._new_record = False
        self._notify([{"type": "NEW_GAME", "generation": self.state.generation}])

    def reset_timer(self) -> None:
        self.timer.reset(game_won=self.state.won)
        self._notify([{"type": "TIMER_RESET"}])

    def reset_high_score(self) -> None:
        self.tracker.reset_manually()
        self._notify([{"type": "HIGH_SCORE_RESET"}])

    # -------- Internals --------
    def _on_win(self) -> list[Event]:
        self.timer.stop()
        elapsed = self.timer.elapsed_seconds
        logger.info("Game %s won in %ss", self.state.generation, elapsed)
        self._new_record = self.tracker.attempt_record(elapsed)
        if self._new_record:
            return [{"type": "NEW_RECORD", "seconds": elapsed}]
        return []

    def _on_tick(self, elapsed: int) -> None:
        self._notify([{"type": "TIMER_TICK", "elapsed_seconds": elapsed}])

    def _schedule_mismatch(self, token: MismatchToken) -> None:
        self._mismatch_task = self._scheduler.call_later(
            self.config.mismatch_delay, lambda: self._resolve_mismatch(token)
        )

    def _cancel_mismatch(self) -> None:
        if self._mismatch_task is not None:
            self._mismatch_task.cancel()
            self._mismatch_task = None

    def _resolve_mismatch(self, token: MismatchToken) -> None:
        result = engine.resolve_mismatch(self.state, token)
        if not result.ok:
            logger.debug("Dropped mismatch resolution %s: %s", token, result.error)
            return
        self._mismatch_task = None
        self._notify(result.events)
