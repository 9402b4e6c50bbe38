"""Deterministic, headless rules engine for memomatch.

IMPORTANT: This package must never import a UI toolkit.
"""

from .deck import generate_deck
from .match import GameConfig, GameState, MismatchToken, StepResult, new_game, resolve_mismatch, restart, select_card
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from .timer import TimerController
from .types import BestTime, Card, Symbol, TimerState

__all__ = [
    "AsyncioScheduler",
    "BestTime",
    "Card",
    "GameConfig",
    "GameState",
    "ManualScheduler",
    "MismatchToken",
    "Scheduler",
    "StepResult",
    "Symbol",
    "TimerController",
    "TimerState",
    "generate_deck",
    "new_game",
    "resolve_mismatch",
    "restart",
    "select_card",
]
