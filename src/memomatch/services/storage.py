from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Mapping, Protocol

from jsonschema import Draft202012Validator

from memomatch.paths import get_paths

HIGH_SCORE_KEY = "memory_match_high_score"
HIGH_SCORE_SCHEMA = "high_score.schema.json"


class StorageError(RuntimeError):
    pass


class RecordStore(Protocol):
    def load(self, key: str) -> Mapping[str, object] | None: ...

    def save(self, key: str, record: Mapping[str, object]) -> None: ...


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise StorageError(f"Missing file: {path}") from e
    except OSError as e:
        raise StorageError(f"Cannot read {path}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise StorageError(f"Invalid JSON in {path}: {e}") from e


def load_schema(name: str, schema_dir: Path | None = None) -> object:
    base = schema_dir or get_paths().schema_dir
    return _load_json(base / name)


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.path))
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise StorageError("\n".join(lines))


class JsonFileStore:
    """One ``<key>.json`` file per record under ``root``."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = root if root is not None else get_paths().userdata_dir

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def load(self, key: str) -> Mapping[str, object] | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        raw = _load_json(path)
        if not isinstance(raw, dict):
            raise StorageError(f"Expected a JSON object in {path}")
        return raw

    def save(self, key: str, record: Mapping[str, object]) -> None:
        path = self.path_for(key)
        tmp = path.with_name(path.name + ".tmp")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(dict(record), indent=2), encoding="utf-8")
            os.replace(tmp, path)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise StorageError(f"Cannot write {path}: {e}") from e


class MemoryStore:
    def __init__(self, records: Mapping[str, Mapping[str, object]] | None = None) -> None:
        self.records: dict[str, dict[str, object]] = {k: dict(v) for k, v in (records or {}).items()}

    def load(self, key: str) -> Mapping[str, object] | None:
        rec = self.records.get(key)
        return dict(rec) if rec is not None else None

    def save(self, key: str, record: Mapping[str, object]) -> None:
        self.records[key] = dict(record)
