from .best_time import BestTimeTracker
from .storage import HIGH_SCORE_KEY, JsonFileStore, MemoryStore, RecordStore, StorageError
from .telemetry import TelemetryService

__all__ = [
    "HIGH_SCORE_KEY",
    "BestTimeTracker",
    "JsonFileStore",
    "MemoryStore",
    "RecordStore",
    "StorageError",
    "TelemetryService",
]
