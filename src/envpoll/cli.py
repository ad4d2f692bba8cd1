"""Command line interface for the envpoll package."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from .data import load_sensor_log
from .plotting import plot_sensor_log
from .reporting import export_summary, summarize_log
from .station.runner import app as station_app

app = typer.Typer(context_settings={"help_option_names": ["-h", "--help"]})
app.add_typer(station_app, name="station")


def _load_log(log_path: Path):
    try:
        return load_sensor_log(log_path)
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(f"Cannot load sensor log: {exc}", param_hint="--log") from exc


@app.command()
def summary(
    log_path: Path = typer.Option(Path("sensor_data.json"), "--log", help="JSON-lines sensor log."),
    csv_path: Optional[Path] = typer.Option(None, "--csv", help="Also write the summary table as CSV."),
) -> None:
    """Print per-field statistics of a sensor log."""

    df = _load_log(log_path)
    table = summarize_log(df)
    typer.echo(f"Records: {len(df)}")
    typer.echo(table.to_string(index=False, float_format=lambda value: f"{value:.3f}"))
    if csv_path is not None:
        export_summary(table, csv_path)
        typer.echo(f"Summary written to {csv_path}")


@app.command()
def plot(
    log_path: Path = typer.Option(Path("sensor_data.json"), "--log", help="JSON-lines sensor log."),
    out_path: Path = typer.Option(Path("sensor_data.png"), "--out", help="Output PNG."),
) -> None:
    """Plot pressure and temperatures of a sensor log."""

    df = _load_log(log_path)
    if df.empty:
        typer.echo("Sensor log is empty, nothing to plot")
        raise typer.Exit(code=1)
    try:
        figure_path = plot_sensor_log(df, out_path)
    except RuntimeError as exc:
        typer.echo(f"[warning] plotting skipped: {exc}")
        raise typer.Exit(code=1) from exc
    typer.echo(f"Plot written to {figure_path}")


def run() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    run()
