"""DS18B20 readings from the kernel 1-Wire driver (``w1_slave`` reports).

A report looks like::

    72 01 4b 46 7f ff 0e 10 57 : crc=57 YES
    72 01 4b 46 7f ff 0e 10 57 t=23125

``YES`` means the CRC check passed; ``t=`` carries milli-degrees Celsius.
"""
from __future__ import annotations

from pathlib import Path

CRC_OK_MARKER = "YES"
TEMPERATURE_MARKER = "t="


def parse_w1_slave(text: str) -> float:
    """Return degrees Celsius from a ``w1_slave`` report or raise ``ValueError``."""
    if CRC_OK_MARKER not in text:
        raise ValueError("DS18B20 report has no CRC OK marker")
    idx = text.find(TEMPERATURE_MARKER)
    if idx < 0:
        raise ValueError("DS18B20 report has no 't=' field")
    raw = text[idx + len(TEMPERATURE_MARKER):].strip()
    try:
        millidegrees = int(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid DS18B20 temperature field {raw!r}") from exc
    return millidegrees / 1000.0


class ThermometerReader:
    def __init__(self, devices_root: Path = Path("/sys/bus/w1/devices")):
        self.devices_root = Path(devices_root)

    def report_path(self, sensor_id: str) -> Path:
        return self.devices_root / sensor_id / "w1_slave"

    def read(self, sensor_id: str) -> float:
        text = self.report_path(sensor_id).read_text(encoding="ascii", errors="replace")
        return parse_w1_slave(text)
