from __future__ import annotations

import logging

from memomatch.engine.types import BestTime

from .storage import HIGH_SCORE_KEY, HIGH_SCORE_SCHEMA, RecordStore, StorageError, load_schema, validate_json

logger = logging.getLogger(__name__)


class BestTimeTracker:
    """Keeps the lowest winning time and persists it on every change.

    Storage is best effort: read failures count as "no record yet" and
    write failures are logged while the in-memory value stays authoritative.
    """

    def __init__(self, store: RecordStore, *, key: str = HIGH_SCORE_KEY, schema: object | None = None) -> None:
        self._store = store
        self._key = key
        self._schema = schema if schema is not None else load_schema(HIGH_SCORE_SCHEMA)
        self.best = BestTime()
        self.load()

    @property
    def value(self) -> int:
        return self.best.value

    def load(self) -> BestTime:
        self.best = self._read()
        return self.best

    def _read(self) -> BestTime:
        try:
            raw = self._store.load(self._key)
        except Exception as e:
            logger.warning("Could not read best time %r: %s", self._key, e)
            return BestTime()
        if raw is None:
            return BestTime()
        try:
            validate_json(raw, self._schema, context=self._key)
        except StorageError as e:
            logger.warning("Ignoring invalid best time record: %s", e)
            return BestTime()
        return BestTime(value=int(raw["highScore"]))

    def _persist(self) -> None:
        try:
            self._store.save(self._key, {"highScore": self.best.value})
        except Exception as e:
            logger.warning("Could not save best time %r: %s", self._key, e)

    def attempt_record(self, candidate_seconds: int) -> bool:
        """Store ``candidate_seconds`` if it beats the record; non-positive times never do."""
        if candidate_seconds <= 0:
            # 0 is the unset sentinel and can never be stored as a record
            return False
        if self.best.is_set and candidate_seconds >= self.best.value:
            return False
        logger.info("New best time: %ss (was %s)", candidate_seconds, self.best.value or "unset")
        self.best = BestTime(value=candidate_seconds)
        self._persist()
        return True

    def reset_manually(self) -> None:
        self.best = BestTime()
        self._persist()
