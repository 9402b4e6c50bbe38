from __future__ import annotations

import random

from memomatch.engine.match import GameState, new_game, phase, resolve_mismatch, restart, select_card
from memomatch.engine.types import SYMBOLS


def _new(seed: int = 1) -> GameState:
    return new_game(random.Random(seed))


def _partner(state: GameState, card_id: int) -> int:
    sym = state.deck[card_id].symbol
    return next(c.id for c in state.deck if c.symbol == sym and c.id != card_id)


def _mismatched_pair(state: GameState) -> tuple[int, int]:
    first = next(c for c in state.deck if not c.is_flipped)
    second = next(c for c in state.deck if not c.is_flipped and c.symbol != first.symbol)
    return first.id, second.id


def _play_out(state: GameState) -> None:
    for sym in SYMBOLS:
        ids = [c.id for c in state.deck if c.symbol == sym]
        if state.deck[ids[0]].is_flipped:
            continue
        assert select_card(state, ids[0]).ok
        assert select_card(state, ids[1]).ok


def test_match_increments_pairs_and_clears_selection() -> None:
    state = _new()
    other = _partner(state, 0)

    res1 = select_card(state, 0)
    assert res1.ok
    assert state.selection == [0]
    assert phase(state) == "one_selected"

    res2 = select_card(state, other)
    assert res2.ok
    assert res2.pending is None
    assert state.matched_pairs == 1
    assert state.selection == []
    assert state.deck[0].is_flipped and state.deck[other].is_flipped
    assert [e["type"] for e in res2.events] == ["CARD_FLIPPED", "PAIR_MATCHED"]


def test_round_started_only_on_first_selection() -> None:
    state = _new()
    a, b = _mismatched_pair(state)
    first = select_card(state, a)
    second = select_card(state, b)
    assert first.events[0]["type"] == "ROUND_STARTED"
    assert all(e["type"] != "ROUND_STARTED" for e in second.events)


def test_mismatch_flips_then_resolution_hides() -> None:
    state = _new(3)
    a, b = _mismatched_pair(state)
    select_card(state, a)
    res = select_card(state, b)

    assert res.ok
    assert res.pending is not None
    assert res.pending.card_ids == (a, b)
    assert phase(state) == "resolving"
    assert state.deck[a].is_flipped and state.deck[b].is_flipped

    done = resolve_mismatch(state, res.pending)
    assert done.ok
    assert not state.deck[a].is_flipped
    assert not state.deck[b].is_flipped
    assert state.selection == []
    assert state.matched_pairs == 0
    assert phase(state) == "idle"


def test_selection_is_full_while_resolving() -> None:
    state = _new(4)
    a, b = _mismatched_pair(state)
    select_card(state, a)
    select_card(state, b)
    third = next(c.id for c in state.deck if not c.is_flipped)

    res = select_card(state, third)
    assert not res.ok
    assert res.error == "Selection is full."
    assert not state.deck[third].is_flipped
    assert state.selection == [a, b]


def test_flipped_and_unknown_cards_are_ignored() -> None:
    state = _new()
    select_card(state, 5)
    log_len = len(state.event_log)

    again = select_card(state, 5)
    assert not again.ok
    assert state.selection == [5]

    missing = select_card(state, 42)
    assert not missing.ok
    assert missing.error == "Unknown card."
    assert len(state.event_log) == log_len


def test_game_won_exactly_once_and_then_frozen() -> None:
    state = _new(11)
    _play_out(state)

    assert state.matched_pairs == 6
    assert state.won
    assert phase(state) == "won"
    assert sum(1 for e in state.event_log if e["type"] == "GAME_WON") == 1

    res = select_card(state, 0)
    assert not res.ok
    assert res.error == "Game already won."


def test_not_won_before_last_pair() -> None:
    state = _new(12)
    for sym in SYMBOLS[:-1]:
        ids = [c.id for c in state.deck if c.symbol == sym]
        select_card(state, ids[0])
        select_card(state, ids[1])
    assert state.matched_pairs == 5
    assert not state.won


def test_stale_token_after_restart_is_noop() -> None:
    rng = random.Random(5)
    old = new_game(rng)
    a, b = _mismatched_pair(old)
    select_card(old, a)
    token = select_card(old, b).pending
    assert token is not None

    fresh = restart(old, rng)
    assert fresh.generation == old.generation + 1
    assert fresh.matched_pairs == 0 and not fresh.won and fresh.selection == []

    select_card(fresh, a)
    res = resolve_mismatch(fresh, token)
    assert not res.ok
    assert fresh.selection == [a]
    assert fresh.deck[a].is_flipped


def test_token_only_resolves_once() -> None:
    state = _new(6)
    a, b = _mismatched_pair(state)
    select_card(state, a)
    token = select_card(state, b).pending
    assert token is not None

    assert resolve_mismatch(state, token).ok
    select_card(state, a)
    assert not resolve_mismatch(state, token).ok
    assert state.deck[a].is_flipped


def test_pair_count_follows_symbol_set() -> None:
    import pytest

    from memomatch.engine.match import GameConfig

    assert GameConfig().pair_count == len(SYMBOLS)
    with pytest.raises(TypeError):
        GameConfig(pair_count=2)  # type: ignore[call-arg]

    state = new_game(random.Random(15), config=GameConfig(mismatch_delay=0.25))
    for sym in SYMBOLS[:2]:
        ids = [c.id for c in state.deck if c.symbol == sym]
        select_card(state, ids[0])
        select_card(state, ids[1])
    assert not state.won
