"""
MS5611 pressure/temperature and DS18B20 thermometer station.

The subpackage holds the bus transport, the MS5611 calibration, conversion and
compensation steps, the 1-Wire thermometer reader, the JSON-lines record
logger and the poll loop that ties them together on the Raspberry Pi.
"""

from .acquisition import RawConversion, acquire
from .calibration import CalibrationSet, read_calibration, read_calibration_word
from .compensation import CompensatedReading, CompensationTerms, compensate, compensation_terms
from .config import Ms5611Config, StationConfig, ThermometerConfig, load_config
from .ms5611 import Ms5611Sensor
from .records import JsonLinesLogger, Ms5611Reading, SensorRecord
from .runner import StationPoller
from .transport import BusTransport, SMBusTransport, TransportError
from .w1 import ThermometerReader, parse_w1_slave

__all__ = [
    "RawConversion",
    "acquire",
    "CalibrationSet",
    "read_calibration",
    "read_calibration_word",
    "CompensatedReading",
    "CompensationTerms",
    "compensate",
    "compensation_terms",
    "Ms5611Config",
    "StationConfig",
    "ThermometerConfig",
    "load_config",
    "Ms5611Sensor",
    "JsonLinesLogger",
    "Ms5611Reading",
    "SensorRecord",
    "StationPoller",
    "BusTransport",
    "SMBusTransport",
    "TransportError",
    "ThermometerReader",
    "parse_w1_slave",
]
