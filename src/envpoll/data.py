"""Loading utilities for the station's JSON-lines sensor log."""
from __future__ import annotations

import json
import logging
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)

LOG_COLUMNS = ["d1", "d2", "temperature", "pressure", "ds18b20_1", "ds18b20_2"]
THERMOMETER_COLUMNS = ["ds18b20_1", "ds18b20_2"]


def load_sensor_log(path: str | Path) -> pd.DataFrame:
    """Load a ``sensor_data.json`` log into a flat table.

    Parameters
    ----------
    path:
        JSON-lines file written by the station poller, one record per line with
        a nested ``ms5611`` block and two ``ds18b20_*`` values.

    Returns
    -------
    pandas.DataFrame
        One row per record with the columns in ``LOG_COLUMNS``, plus a
        ``sample`` index counting records in file order. Lines that are not
        valid JSON, or that hold a JSON value other than an object, are
        skipped with a warning.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)

    records: list[dict] = []
    with path.open("r", encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as exc:
                logger.warning("Skipping bad JSON at %s:%d (%s)", path, lineno, exc)
                continue
            if not isinstance(obj, dict):
                logger.warning("Skipping bad JSON at %s:%d (not an object: %r)", path, lineno, obj)
                continue
            records.append(obj)

    if not records:
        return pd.DataFrame(columns=["sample", *LOG_COLUMNS])

    df = pd.json_normalize(records)
    df = df.rename(columns=lambda name: name.split(".", 1)[1] if name.startswith("ms5611.") else name)
    missing = set(LOG_COLUMNS) - set(df.columns)
    if missing:
        raise ValueError(f"Sensor log is missing fields: {sorted(missing)}")
    df = df[LOG_COLUMNS].copy()
    df.insert(0, "sample", range(len(df)))
    return df
