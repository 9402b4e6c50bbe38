"""Logic core of a memory-matching card game."""

import logging

from .session import GameSession, SessionSnapshot

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["GameSession", "SessionSnapshot"]
