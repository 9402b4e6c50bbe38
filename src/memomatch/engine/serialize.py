from __future__ import annotations

from .match import GameState, MismatchToken, phase
from .types import Card


def card_to_dict(c: Card) -> dict[str, object]:
    return {"id": c.id, "symbol": c.symbol.value, "is_flipped": c.is_flipped}


def _token_to_dict(t: MismatchToken | None) -> dict[str, object] | None:
    if t is None:
        return None
    return {"generation": t.generation, "round": t.round, "card_ids": list(t.card_ids)}


def snapshot(state: GameState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current game state."""
    return {
        "generation": state.generation,
        "round": state.round,
        "phase": phase(state),
        "deck": [card_to_dict(c) for c in state.deck],
        "selection": list(state.selection),
        "matched_pairs": state.matched_pairs,
        "won": state.won,
        "pending": _token_to_dict(state.pending),
    }
