"""History of processed test runs kept in a JSON file."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from .process import Test

SNAPSHOT_PATH = Path(".ballast_snapshot.json")

_PARSE_ERROR = "Failed to parse .ballast_snapshot.json, were changes made to it by hand?"


class SnapshotError(Exception):
    """Raised when the snapshot file cannot be parsed or written."""


@dataclass
class Snapshot:
    """The tests of one run and the Unix time, in seconds, it was taken at."""

    tests: list[Test] = field(default_factory=list)
    timestamp: int = 0

    @classmethod
    def create(cls, tests: Iterable[Test]) -> Snapshot:
        return cls(tests=list(tests), timestamp=int(time.time()))

    def _to_dict(self) -> dict[str, Any]:
        return {"tests": [test.to_dict() for test in self.tests], "timestamp": self.timestamp}

    @classmethod
    def _from_dict(cls, data: Any) -> Snapshot:
        if not isinstance(data, dict) or not isinstance(data.get("tests"), list):
            raise ValueError("a snapshot must hold a list of tests")
        timestamp = data.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, int) or timestamp < 0:
            raise ValueError("a snapshot timestamp must be a non-negative integer")
        return cls(tests=[Test.from_dict(item) for item in data["tests"]], timestamp=timestamp)

    @classmethod
    def read(cls, path: str | Path = SNAPSHOT_PATH) -> list[Snapshot]:
        """Return every stored snapshot; a missing file means none."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError:
            return []
        try:
            data = json.loads(text)
            if not isinstance(data, list):
                raise ValueError("the snapshot file must hold a list")
            return [cls._from_dict(item) for item in data]
        except ValueError as exc:
            raise SnapshotError(_PARSE_ERROR) from exc

    def write(self, path: str | Path = SNAPSHOT_PATH) -> None:
        """Append this snapshot to the stored history."""
        snapshots = self.read(path)
        snapshots.append(self)
        text = json.dumps([s._to_dict() for s in snapshots], separators=(",", ":"))
        try:
            Path(path).write_text(text, encoding="utf-8")
        except OSError as exc:
            raise SnapshotError("Failed to write to .ballast_snapshot.json") from exc

    @classmethod
    def latest(cls, path: str | Path = SNAPSHOT_PATH) -> Snapshot | None:
        """Return the most recent snapshot, the last written one among equal timestamps."""
        snapshots = cls.read(path)
        if not snapshots:
            return None
        return sorted(snapshots, key=lambda s: s.timestamp)[-1]