"""Summary statistics for a station sensor log."""
from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd

from .data import THERMOMETER_COLUMNS

SUMMARY_COLUMNS = ["temperature", "pressure", "ds18b20_1", "ds18b20_2"]


def mask_failed_thermometers(df: pd.DataFrame) -> pd.DataFrame:
    """Replace the 0.0 placeholder of failed thermometer reads with NaN."""
    masked = df.copy()
    for column in THERMOMETER_COLUMNS:
        masked[column] = masked[column].astype(float).replace(0.0, np.nan)
    return masked


def summarize_log(df: pd.DataFrame) -> pd.DataFrame:
    """
    Per-field statistics (count/mean/std/min/max) plus the number of failed
    thermometer reads. Placeholder zeros do not enter the statistics.

    The log writes 0.0 for a failed DS18B20 read, so a genuine 0.0 °C reading
    cannot be told apart from a failure and is counted under ``failed``.
    """
    masked = mask_failed_thermometers(df)
    rows: list[dict[str, object]] = []
    for column in SUMMARY_COLUMNS:
        values = masked[column].to_numpy(dtype=float)
        valid = values[~np.isnan(values)]
        rows.append(
            {
                "field": column,
                "count": int(valid.size),
                "failed": int(values.size - valid.size),
                "mean": float(valid.mean()) if valid.size else np.nan,
                "std": float(valid.std(ddof=1)) if valid.size > 1 else np.nan,
                "min": float(valid.min()) if valid.size else np.nan,
                "max": float(valid.max()) if valid.size else np.nan,
            }
        )
    return pd.DataFrame(rows)


def export_summary(summary: pd.DataFrame, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    summary.to_csv(output_path, index=False)
