from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict


@dataclass(frozen=True)
class Ms5611Reading:
    d1: int
    d2: int
    temperature: float
    pressure: float


@dataclass(frozen=True)
class SensorRecord:
    """One logged poll: the MS5611 block plus both thermometers (0.0 when unread)."""

    ms5611: Ms5611Reading
    ds18b20_1: float
    ds18b20_2: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


class JsonLinesLogger:
    """
    Append-only JSON-lines writer. The file is opened per record so a rotated
    or removed log is recreated on the next append.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def append(self, record: SensorRecord) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(record.to_json() + "\n")
