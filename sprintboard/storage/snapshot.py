"""Versioned key/value snapshot storage on disk.

One JSON file per key, wrapped as ``{"v": <version>, "data": ...}``. A
missing, unreadable or wrong-version file loads as the caller's default.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SnapshotStore:
    def __init__(self, directory: Path, namespace: str = "so.", version: int = 1) -> None:
        self._directory = Path(directory)
        self._namespace = namespace
        self._version = version

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        return self._directory / f"{self._namespace}{key}.json"

    def load(self, key: str, default: T) -> T | Any:
        path = self.path_for(key)
        if not path.exists():
            return default
        try:
            envelope = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Unreadable snapshot %s: %s", path, exc)
            return default
        if not isinstance(envelope, dict) or envelope.get("v") != self._version:
            logger.warning("Snapshot %s has unexpected version; using default", path)
            return default
        return envelope.get("data", default)

    def save(self, key: str, data: Any) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(
            json.dumps({"v": self._version, "data": data}, indent=2, default=str),
            encoding="utf-8",
        )
        tmp.replace(path)
