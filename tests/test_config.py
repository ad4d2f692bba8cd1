from __future__ import annotations

from pathlib import Path

import pytest

from envpoll.station.config import StationConfig, config_as_dict, load_config

HOST_CONFIG = Path(__file__).resolve().parents[1] / "host_pi" / "config.json"


def test_defaults_without_file() -> None:
    cfg = load_config()
    assert cfg == StationConfig()
    assert cfg.interval_sec == 5.0
    assert cfg.log_path == Path("sensor_data.json")
    assert cfg.ms5611.bus == 1
    assert cfg.ms5611.address == 0x77
    assert cfg.ms5611.convert_d1 == 0x48
    assert cfg.ms5611.convert_d2 == 0x58
    assert cfg.ms5611.adc_read == 0x00
    assert cfg.ms5611.prom_addresses == (0xA2, 0xA4, 0xA6, 0xA8, 0xAA, 0xAC)
    assert cfg.thermometers.devices_root == Path("/sys/bus/w1/devices")
    assert cfg.thermometers.sensor_ids == ("28-277a480a6461", "28-7c7a480a6461")


def test_shipped_host_config_matches_defaults() -> None:
    assert load_config(HOST_CONFIG) == StationConfig()


def test_overrides_apply_on_top_of_file(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text('{"interval_sec": 2, "ms5611": {"bus": 3}}', encoding="utf-8")
    cfg = load_config(
        cfg_path,
        overrides=[
            "ms5611.address=0x76",
            "log_path=/var/log/station/data.json",
            'thermometers.sensor_ids=["28-a", "28-b"]',
        ],
    )
    assert cfg.interval_sec == 2.0
    assert cfg.ms5611.bus == 3
    assert cfg.ms5611.address == 0x76
    assert cfg.log_path == Path("/var/log/station/data.json")
    assert cfg.thermometers.sensor_ids == ("28-a", "28-b")


def test_config_round_trips_through_dict(tmp_path: Path) -> None:
    import json

    cfg = load_config(overrides=["ms5611.address=0x76", "interval_sec=10"])
    cfg_path = tmp_path / "effective.json"
    cfg_path.write_text(json.dumps(config_as_dict(cfg)), encoding="utf-8")
    assert load_config(cfg_path) == cfg


@pytest.mark.parametrize(
    "override",
    [
        "interval_sec",
        "=5",
        "interval_sec=0",
        'thermometers.sensor_ids=["28-a"]',
        "ms5611.prom_addresses=[162, 164]",
        "interval_sec=nan",
        "interval_sec=inf",
        "ms5611.convert_d1=0x148",
        "ms5611.adc_read=-1",
        "ms5611.address=0x80",
        "ms5611.prom_addresses=[162, 164, 166, 168, 170, 428]",
    ],
)
def test_invalid_config_raises(override: str) -> None:
    with pytest.raises(ValueError):
        load_config(overrides=[override])


def test_byte_range_error_names_the_field() -> None:
    with pytest.raises(ValueError, match="convert_d1 must be a single byte"):
        load_config(overrides=["ms5611.convert_d1=0x148"])


def test_edge_of_byte_range_is_accepted() -> None:
    cfg = load_config(overrides=["ms5611.address=0x7F", "ms5611.adc_read=0xFF"])
    assert cfg.ms5611.address == 0x7F
    assert cfg.ms5611.adc_read == 0xFF
