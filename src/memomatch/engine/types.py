from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Symbol(str, Enum):
    PAW = "paw"
    HEART = "heart"
    TREE = "tree"
    STAR = "star"
    BELL = "bell"
    GIFT = "gift"


SYMBOLS: tuple[Symbol, ...] = tuple(Symbol)


@dataclass
class Card:
    id: int
    symbol: Symbol
    is_flipped: bool = False


@dataclass(frozen=True)
class TimerState:
    elapsed_seconds: int
    active: bool


@dataclass(frozen=True)
class BestTime:
    """Lowest winning time in seconds; 0 means no record yet."""

    value: int = 0

    @property
    def is_set(self) -> bool:
        return self.value > 0
