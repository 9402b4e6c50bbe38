from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Literal

from .deck import generate_deck
from .types import SYMBOLS, Card

Event = dict[str, object]
Phase = Literal["idle", "one_selected", "resolving", "won"]


@dataclass(frozen=True)
class GameConfig:
    mismatch_delay: float = 1.0
    tick_interval: float = 1.0

    @property
    def pair_count(self) -> int:
        return len(SYMBOLS)


@dataclass(frozen=True)
class MismatchToken:
    """Identifies one pending un-flip; stale once the game or round moves on."""

    generation: int
    round: int
    card_ids: tuple[int, int]


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    error: str | None = None
    pending: MismatchToken | None = None


@dataclass
class GameState:
    config: GameConfig
    deck: list[Card]
    selection: list[int] = field(default_factory=list)
    matched_pairs: int = 0
    won: bool = False
    generation: int = 0
    round: int = 0
    pending: MismatchToken | None = None
    event_log: list[Event] = field(default_factory=list)


def phase(state: GameState) -> Phase:
    if state.won:
        return "won"
    if state.pending is not None:
        return "resolving"
    if len(state.selection) == 1:
        return "one_selected"
    return "idle"


def card_by_id(state: GameState, card_id: int) -> Card | None:
    for c in state.deck:
        if c.id == card_id:
            return c
    return None


def _emit(state: GameState, events: list[Event], event: Event) -> None:
    state.event_log.append(event)
    events.append(event)


def _ignored(msg: str) -> StepResult:
    return StepResult(ok=False, events=[], error=msg)


def select_card(state: GameState, card_id: int) -> StepResult:
    """Flip one card and resolve the round once two are face up.

    Ineligible selections leave ``state`` untouched and come back with
    ``ok=False``. A mismatch is not resolved here: the returned
    ``pending`` token must be handed to :func:`resolve_mismatch` after
    ``config.mismatch_delay``.
    """
    if state.won:
        return _ignored("Game already won.")
    card = card_by_id(state, card_id)
    if card is None:
        return _ignored("Unknown card.")
    if len(state.selection) >= 2:
        return _ignored("Selection is full.")
    if card.is_flipped:
        return _ignored("Card already face up.")

    events: list[Event] = []
    if not state.selection:
        _emit(state, events, {"type": "ROUND_STARTED", "round": state.round})

    card.is_flipped = True
    state.selection.append(card.id)
    _emit(state, events, {"type": "CARD_FLIPPED", "card_id": card.id, "symbol": card.symbol.value})

    if len(state.selection) < 2:
        return StepResult(ok=True, events=events)

    first = card_by_id(state, state.selection[0])
    assert first is not None
    pair = (first.id, card.id)

    if first.symbol == card.symbol:
        state.matched_pairs += 1
        state.selection.clear()
        state.round += 1
        _emit(
            state,
            events,
            {"type": "PAIR_MATCHED", "card_ids": list(pair), "matched_pairs": state.matched_pairs},
        )
        if state.matched_pairs == state.config.pair_count:
            state.won = True
            _emit(state, events, {"type": "GAME_WON", "generation": state.generation})
        return StepResult(ok=True, events=events)

    token = MismatchToken(generation=state.generation, round=state.round, card_ids=pair)
    state.pending = token
    _emit(state, events, {"type": "MISMATCH", "card_ids": list(pair)})
    return StepResult(ok=True, events=events, pending=token)


def resolve_mismatch(state: GameState, token: MismatchToken) -> StepResult:
    if state.pending is None or state.pending != token:
        return _ignored("Stale mismatch resolution.")

    events: list[Event] = []
    for cid in token.card_ids:
        c = card_by_id(state, cid)
        if c is not None:
            c.is_flipped = False
    state.selection.clear()
    state.pending = None
    state.round += 1
    _emit(state, events, {"type": "CARDS_HIDDEN", "card_ids": list(token.card_ids)})
    return StepResult(ok=True, events=events)


def new_game(rng: random.Random, *, config: GameConfig | None = None, generation: int = 0) -> GameState:
    cfg = config or GameConfig()
    state = GameState(config=cfg, deck=generate_deck(rng), generation=generation)
    state.event_log.append({"type": "GAME_STARTED", "generation": generation})
    return state


def restart(state: GameState, rng: random.Random) -> GameState:
    """Fresh deck and counters; the old state object is left as it was."""
    return new_game(rng, config=state.config, generation=state.generation + 1)
