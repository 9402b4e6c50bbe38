from __future__ import annotations

import random
from typing import Sequence

from .types import SYMBOLS, Card, Symbol


def _fisher_yates(rng: random.Random, items: list[Symbol]) -> None:
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]


def generate_deck(rng: random.Random, symbols: Sequence[Symbol] = SYMBOLS) -> list[Card]:
    """Build a shuffled deck holding every symbol exactly twice.

    Ids are assigned in final display order, so ``deck[i].id == i``.
    """
    pool = [s for s in symbols for _ in range(2)]
    _fisher_yates(rng, pool)
    return [Card(id=i, symbol=s, is_flipped=False) for i, s in enumerate(pool)]
