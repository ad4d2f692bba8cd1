from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Sequence

from .transport import BusTransport, read_exact

logger = logging.getLogger(__name__)

PROM_SETTLE_SEC = 0.010


@dataclass(frozen=True)
class CalibrationSet:
    """Factory coefficients C1..C6 from the MS5611 PROM."""

    c1: int
    c2: int
    c3: int
    c4: int
    c5: int
    c6: int

    def as_tuple(self) -> tuple[int, int, int, int, int, int]:
        return (self.c1, self.c2, self.c3, self.c4, self.c5, self.c6)


def combine_word(data: bytes) -> int:
    """Big-endian 16-bit word from two bytes."""
    return (data[0] << 8) | data[1]


def read_calibration_word(
    transport: BusTransport,
    address: int,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    transport.write(bytes([address]))
    sleep(PROM_SETTLE_SEC)
    return combine_word(read_exact(transport, 2))


def read_calibration(
    transport: BusTransport,
    addresses: Sequence[int],
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> CalibrationSet:
    """
    Read the six calibration words, one transaction per PROM address.

    No fallback values exist: a transport error on any word propagates and the
    caller's cycle fails.
    """
    if len(addresses) != 6:
        raise ValueError(f"Expected 6 PROM addresses, got {len(addresses)}")
    words = [read_calibration_word(transport, address, sleep=sleep) for address in addresses]
    calibration = CalibrationSet(*words)
    logger.debug("Calibration C1..C6 = %s", calibration.as_tuple())
    return calibration
