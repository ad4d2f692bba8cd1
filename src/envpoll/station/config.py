from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Sequence, Tuple

DEFAULT_PROM_ADDRESSES: Tuple[int, ...] = (0xA2, 0xA4, 0xA6, 0xA8, 0xAA, 0xAC)
DEFAULT_THERMOMETER_IDS: Tuple[str, ...] = ("28-277a480a6461", "28-7c7a480a6461")


@dataclass
class Ms5611Config:
    bus: int = 1
    address: int = 0x77
    convert_d1: int = 0x48
    convert_d2: int = 0x58
    adc_read: int = 0x00
    prom_addresses: Tuple[int, ...] = DEFAULT_PROM_ADDRESSES


@dataclass
class ThermometerConfig:
    devices_root: Path = Path("/sys/bus/w1/devices")
    sensor_ids: Tuple[str, ...] = DEFAULT_THERMOMETER_IDS


@dataclass
class StationConfig:
    interval_sec: float = 5.0
    log_path: Path = Path("sensor_data.json")
    ms5611: Ms5611Config = field(default_factory=Ms5611Config)
    thermometers: ThermometerConfig = field(default_factory=ThermometerConfig)


def _load_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = {**base}
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merged[key] = _merge(base[key], value)  # type: ignore[index]
        else:
            merged[key] = value
    return merged


def _as_int(value: Any) -> int:
    # JSON has no hex literals, so "0x77" arrives as a string
    if isinstance(value, str):
        return int(value, 0)
    return int(value)


def load_config(path: Path | str | None = None, overrides: Sequence[str] | None = None) -> StationConfig:
    """
    Build a station configuration from an optional JSON file plus CLI-style overrides.

    Missing keys fall back to the built-in defaults (bus 1, address 0x77,
    5 s interval, ``sensor_data.json``). Overrides are dotted ``key=value``
    pairs, e.g.:
        ["ms5611.address=0x76", "interval_sec=10"]
    """
    data: Dict[str, Any] = _load_json(Path(path)) if path is not None else {}
    override_data: Dict[str, Any] = {}
    for override in overrides or []:
        key, raw_value = _parse_override(override)
        _assign_nested(override_data, key, raw_value)
    merged = _merge(data, override_data)

    ms_data = merged.get("ms5611") or {}
    th_data = merged.get("thermometers") or {}
    defaults = Ms5611Config()

    prom_addresses = tuple(_as_int(value) for value in ms_data.get("prom_addresses", DEFAULT_PROM_ADDRESSES))
    if len(prom_addresses) != 6:
        raise ValueError(f"ms5611.prom_addresses must list 6 addresses, got {len(prom_addresses)}")
    sensor_ids = tuple(str(value) for value in th_data.get("sensor_ids", DEFAULT_THERMOMETER_IDS))
    if len(sensor_ids) != 2:
        raise ValueError(f"thermometers.sensor_ids must list 2 identifiers, got {len(sensor_ids)}")
    interval = float(merged.get("interval_sec", 5.0))
    if not (math.isfinite(interval) and interval > 0):
        raise ValueError(f"interval_sec must be a positive number of seconds, got {interval}")

    ms5611 = Ms5611Config(
        bus=_as_int(ms_data.get("bus", defaults.bus)),
        address=_as_int(ms_data.get("address", defaults.address)),
        convert_d1=_as_int(ms_data.get("convert_d1", defaults.convert_d1)),
        convert_d2=_as_int(ms_data.get("convert_d2", defaults.convert_d2)),
        adc_read=_as_int(ms_data.get("adc_read", defaults.adc_read)),
        prom_addresses=prom_addresses,
    )
    _check_ms5611(ms5611)

    return StationConfig(
        interval_sec=interval,
        log_path=Path(merged.get("log_path", "sensor_data.json")),
        ms5611=ms5611,
        thermometers=ThermometerConfig(
            devices_root=Path(th_data.get("devices_root", "/sys/bus/w1/devices")),
            sensor_ids=sensor_ids,
        ),
    )


def _check_ms5611(config: Ms5611Config) -> None:
    if not 0 <= config.address <= 0x7F:
        raise ValueError(f"ms5611.address must be a 7-bit I2C address, got 0x{config.address:X}")
    commands = {
        "convert_d1": config.convert_d1,
        "convert_d2": config.convert_d2,
        "adc_read": config.adc_read,
    }
    for index, value in enumerate(config.prom_addresses):
        commands[f"prom_addresses[{index}]"] = value
    for name, value in commands.items():
        if not 0 <= value <= 0xFF:
            raise ValueError(f"ms5611.{name} must be a single byte, got 0x{value:X}")


def _parse_override(item: str) -> tuple[str, Any]:
    if "=" not in item:
        raise ValueError(f"Override '{item}' must use key=value syntax")
    key, raw_value = item.split("=", 1)
    key = key.strip()
    if not key:
        raise ValueError("Override key may not be empty")
    value = _coerce_value(raw_value.strip())
    return key, value


def _coerce_value(raw: str) -> Any:
    if raw.lower() in {"true", "false"}:
        return raw.lower() == "true"
    try:
        if raw.lower().startswith("0x"):
            return int(raw, 16)
        if "." in raw or "e" in raw.lower():
            return float(raw)
        return int(raw)
    except ValueError:
        pass
    if raw.startswith("[") and raw.endswith("]"):
        return json.loads(raw)
    if raw.startswith("{") and raw.endswith("}"):
        return json.loads(raw)
    return raw


def _assign_nested(target: Dict[str, Any], dotted_key: str, value: Any) -> None:
    cursor = target
    parts = dotted_key.split(".")
    for part in parts[:-1]:
        cursor = cursor.setdefault(part, {})
    cursor[parts[-1]] = value


def config_as_dict(config: StationConfig) -> Dict[str, Any]:
    """Inverse of :func:`load_config`, used to print the effective configuration."""
    return {
        "interval_sec": config.interval_sec,
        "log_path": str(config.log_path),
        "ms5611": {
            "bus": config.ms5611.bus,
            "address": f"0x{config.ms5611.address:02X}",
            "convert_d1": f"0x{config.ms5611.convert_d1:02X}",
            "convert_d2": f"0x{config.ms5611.convert_d2:02X}",
            "adc_read": f"0x{config.ms5611.adc_read:02X}",
            "prom_addresses": [f"0x{value:02X}" for value in config.ms5611.prom_addresses],
        },
        "thermometers": {
            "devices_root": str(config.thermometers.devices_root),
            "sensor_ids": list(config.thermometers.sensor_ids),
        },
    }
