from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from .transport import BusTransport, read_exact

logger = logging.getLogger(__name__)

# ADC conversion time; the result is not valid before this has elapsed.
CONVERSION_SETTLE_SEC = 0.050


@dataclass(frozen=True)
class RawConversion:
    d1: int
    d2: int


def combine_adc(data: bytes) -> int:
    """Big-endian 24-bit ADC result from three bytes."""
    return (data[0] << 16) | (data[1] << 8) | data[2]


def read_conversion(
    transport: BusTransport,
    command: int,
    *,
    adc_read: int = 0x00,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    transport.write(bytes([command]))
    sleep(CONVERSION_SETTLE_SEC)
    transport.write(bytes([adc_read]))
    return combine_adc(read_exact(transport, 3))


def acquire(
    transport: BusTransport,
    *,
    convert_d1: int = 0x48,
    convert_d2: int = 0x58,
    adc_read: int = 0x00,
    sleep: Callable[[float], None] = time.sleep,
) -> RawConversion:
    """Run the pressure conversion, then the temperature conversion."""
    d1 = read_conversion(transport, convert_d1, adc_read=adc_read, sleep=sleep)
    d2 = read_conversion(transport, convert_d2, adc_read=adc_read, sleep=sleep)
    logger.debug("Raw D1=%d D2=%d", d1, d2)
    return RawConversion(d1=d1, d2=d2)
