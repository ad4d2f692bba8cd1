"""Plotting helpers for station sensor logs."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from .reporting import mask_failed_thermometers


def plot_sensor_log(df: pd.DataFrame, out_path: Path) -> Path:
    plt = _require_matplotlib()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    data = mask_failed_thermometers(df)
    fig, axes = plt.subplots(2, 1, figsize=(12, 7), sharex=True)

    _plot_pressure(data, axes[0])
    _plot_temperatures(data, axes[1])

    fig.tight_layout()
    fig.savefig(out_path, dpi=150)
    plt.close(fig)
    return out_path


def _plot_pressure(df: pd.DataFrame, ax) -> None:
    ax.plot(df["sample"], df["pressure"], color="tab:orange", label="MS5611 pressure")
    ax.set_title("Pressure")
    ax.set_ylabel("Pressure [hPa]")
    ax.legend(loc="best")


def _plot_temperatures(df: pd.DataFrame, ax) -> None:
    styles = {
        "temperature": ("MS5611", "tab:blue"),
        "ds18b20_1": ("DS18B20 1", "tab:green"),
        "ds18b20_2": ("DS18B20 2", "tab:red"),
    }
    for column, (label, color) in styles.items():
        ax.plot(df["sample"], df[column], color=color, label=label)
    ax.set_title("Temperatures")
    ax.set_xlabel("Sample")
    ax.set_ylabel("Temperature [°C]")
    ax.legend(loc="best")


def _require_matplotlib() -> Any:
    home_cache = Path.home() / ".cache" / "fontconfig"
    try:
        home_cache.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RuntimeError("matplotlib cannot write font cache in this environment") from exc

    try:
        import matplotlib
        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # type: ignore
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError("matplotlib is required for plotting; install envpoll[plot]") from exc
    except Exception as exc:  # pragma: no cover - environment issues
        raise RuntimeError(f"matplotlib initialisation failed: {exc}") from exc
    return plt
