from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

USERDATA_ENV = "MEMOMATCH_USERDATA_DIR"


@dataclass(frozen=True)
class Paths:
    data_dir: Path
    schema_dir: Path
    userdata_dir: Path


def get_paths() -> Paths:
    # data ships inside the package; user records live outside it
    data_dir = Path(__file__).resolve().parent / "data"
    schema_dir = data_dir / "schemas"
    override = os.environ.get(USERDATA_ENV)
    userdata_dir = Path(override) if override else Path.home() / ".memomatch"
    return Paths(
        data_dir=data_dir,
        schema_dir=schema_dir,
        userdata_dir=userdata_dir,
    )
