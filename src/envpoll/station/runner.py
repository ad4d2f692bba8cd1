from __future__ import annotations

import json
import logging
import signal
import threading
from pathlib import Path
from typing import Optional, Protocol

import typer

from .config import StationConfig, config_as_dict, load_config
from .ms5611 import Ms5611Sensor
from .records import JsonLinesLogger, Ms5611Reading, SensorRecord
from .transport import TransportError
from .w1 import ThermometerReader

logger = logging.getLogger(__name__)

THERMOMETER_FAILED = 0.0


class ReadingSource(Protocol):
    def read(self) -> Ms5611Reading: ...


class Thermometers(Protocol):
    def read(self, sensor_id: str) -> float: ...


class RecordSink(Protocol):
    def append(self, record: SensorRecord) -> None: ...


class StationPoller:
    """
    Sequential poll loop: MS5611, both thermometers, one log append, then wait.

    The wait is a ``threading.Event`` so :meth:`stop` ends the loop between
    cycles without interrupting a bus transaction.
    """

    def __init__(
        self,
        config: StationConfig,
        sensor: Optional[ReadingSource] = None,
        thermometers: Optional[Thermometers] = None,
        sink: Optional[RecordSink] = None,
    ):
        self.config = config
        self.sensor = sensor or Ms5611Sensor(config.ms5611)
        self.thermometers = thermometers or ThermometerReader(config.thermometers.devices_root)
        self.sink = sink or JsonLinesLogger(config.log_path)
        self._stop_event = threading.Event()
        self._cycles = 0
        self._logged = 0
        self._skipped = 0

    def stop(self) -> None:
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stats(self) -> dict[str, int]:
        return {"cycles": self._cycles, "logged": self._logged, "skipped": self._skipped}

    def run(self, max_cycles: Optional[int] = None) -> None:
        while not self._stop_event.is_set():
            try:
                self.run_cycle()
            except Exception:
                self._skipped += 1
                logger.exception("Unexpected error in poll cycle")
            if max_cycles is not None and self._cycles >= max_cycles:
                break
            self._stop_event.wait(self.config.interval_sec)
        stats = self.stats()
        logger.info(
            "Poller stopped: cycles=%d logged=%d skipped=%d",
            stats["cycles"],
            stats["logged"],
            stats["skipped"],
        )

    def run_cycle(self) -> Optional[SensorRecord]:
        """Poll once. Returns the logged record, or ``None`` when the MS5611 read failed."""
        self._cycles += 1
        try:
            reading = self.sensor.read()
        except (TransportError, OSError) as exc:
            self._skipped += 1
            logger.error("MS5611 read failed: %s", exc)
            return None

        logger.info("Raw D1 (pressure): %d", reading.d1)
        logger.info("Raw D2 (temperature): %d", reading.d2)
        logger.info("MS5611 temperature: %.2f °C", reading.temperature)
        logger.info("MS5611 pressure: %.2f hPa", reading.pressure)

        first_id, second_id = self.config.thermometers.sensor_ids
        record = SensorRecord(
            ms5611=reading,
            ds18b20_1=self._read_thermometer(1, first_id),
            ds18b20_2=self._read_thermometer(2, second_id),
        )
        logger.info("DS18B20 1 temperature: %.2f °C", record.ds18b20_1)
        logger.info("DS18B20 2 temperature: %.2f °C", record.ds18b20_2)

        try:
            self.sink.append(record)
        except OSError as exc:
            logger.error("Failed to append record to %s: %s", self.config.log_path, exc)
            return None
        self._logged += 1
        return record

    def _read_thermometer(self, slot: int, sensor_id: str) -> float:
        try:
            return self.thermometers.read(sensor_id)
        except (OSError, ValueError) as exc:
            logger.warning("DS18B20 %d (%s) read failed: %s", slot, sensor_id, exc)
            return THERMOMETER_FAILED


def _load(config_path: Optional[Path], override: Optional[list[str]]) -> StationConfig:
    try:
        return load_config(config_path, override or None)
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(f"Invalid configuration: {exc}") from exc


app = typer.Typer(add_completion=False, help="MS5611 + DS18B20 station utilities.")


@app.command()
def run(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Station config JSON (defaults built in)."),
    override: Optional[list[str]] = typer.Option(
        None,
        "--set",
        help="Override config keys, e.g. --set ms5611.address=0x76 --set interval_sec=10",
    ),
    cycles: int = typer.Option(0, "--cycles", "-n", help="Stop after N cycles (0 = run until signalled)."),
    log_level: str = typer.Option("INFO", "--log-level", help="Console log level."),
):
    """Poll the sensors every interval and append records to the JSON-lines log."""

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cfg = _load(config_path, override)
    poller = StationPoller(cfg)

    def _handle_signal(signum, _frame) -> None:
        logger.info("Received signal %d, stopping after the current cycle", signum)
        poller.stop()

    signal.signal(signal.SIGTERM, _handle_signal)
    logger.info(
        "Polling MS5611 on bus %d at 0x%02X every %.1fs, logging to %s",
        cfg.ms5611.bus,
        cfg.ms5611.address,
        cfg.interval_sec,
        cfg.log_path,
    )
    try:
        poller.run(max_cycles=cycles or None)
    except KeyboardInterrupt:
        logger.info("Stopping poller (Ctrl+C)")


@app.command()
def prom(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Station config JSON (defaults built in)."),
    override: Optional[list[str]] = typer.Option(
        None,
        "--set",
        help="Override config keys, e.g. --set ms5611.address=0x76 --set interval_sec=10",
    ),
):
    """Read and print the MS5611 calibration coefficients."""

    cfg = _load(config_path, override)
    sensor = Ms5611Sensor(cfg.ms5611)
    try:
        calibration = sensor.read_calibration()
    except TransportError as exc:
        typer.echo(f"PROM read FAILED: {exc}")
        raise typer.Exit(code=1) from exc
    for index, (address, value) in enumerate(zip(cfg.ms5611.prom_addresses, calibration.as_tuple()), start=1):
        typer.echo(f"C{index} @0x{address:02X}: {value} (0x{value:04X})")


@app.command()
def read(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Station config JSON (defaults built in)."),
    override: Optional[list[str]] = typer.Option(
        None,
        "--set",
        help="Override config keys, e.g. --set ms5611.address=0x76 --set interval_sec=10",
    ),
):
    """Take one reading from every sensor and print it without logging."""

    cfg = _load(config_path, override)
    sensor = Ms5611Sensor(cfg.ms5611)
    try:
        reading = sensor.read()
    except TransportError as exc:
        typer.echo(f"MS5611 read FAILED: {exc}")
        raise typer.Exit(code=1) from exc
    typer.echo(f"Raw D1: {reading.d1}")
    typer.echo(f"Raw D2: {reading.d2}")
    typer.echo(f"Temperature: {reading.temperature:.2f} °C")
    typer.echo(f"Pressure: {reading.pressure:.2f} hPa")
    thermometers = ThermometerReader(cfg.thermometers.devices_root)
    for slot, sensor_id in enumerate(cfg.thermometers.sensor_ids, start=1):
        try:
            typer.echo(f"DS18B20 {slot} ({sensor_id}): {thermometers.read(sensor_id):.3f} °C")
        except (OSError, ValueError) as exc:
            typer.echo(f"DS18B20 {slot} ({sensor_id}): FAILED ({exc})")


@app.command("config")
def show_config(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Station config JSON (defaults built in)."),
    override: Optional[list[str]] = typer.Option(
        None,
        "--set",
        help="Override config keys, e.g. --set ms5611.address=0x76 --set interval_sec=10",
    ),
):
    """Print the effective configuration as JSON."""

    cfg = _load(config_path, override)
    typer.echo(json.dumps(config_as_dict(cfg), indent=2))
