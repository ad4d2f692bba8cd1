from __future__ import annotations

import logging
import time
from contextlib import closing
from typing import Callable, Optional

from .acquisition import RawConversion, acquire
from .calibration import CalibrationSet, read_calibration
from .compensation import compensate
from .config import Ms5611Config
from .records import Ms5611Reading
from .transport import BusTransport, SMBusTransport

logger = logging.getLogger(__name__)

TransportFactory = Callable[[], BusTransport]


class Ms5611Sensor:
    """
    One MS5611 on an I2C bus.

    Each :meth:`read` opens the transport, runs both conversions, reads the
    PROM and releases the bus again. Calibration is never cached between
    reads, so a device reset cannot leave stale coefficients behind.
    """

    def __init__(
        self,
        config: Ms5611Config,
        transport_factory: Optional[TransportFactory] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self._transport_factory = transport_factory or (lambda: SMBusTransport(config.bus))
        self._sleep = sleep

    def read(self) -> Ms5611Reading:
        with closing(self._open()) as transport:
            raw = self._acquire(transport)
            calibration = self._read_calibration(transport)
        reading = compensate(calibration, raw)
        return Ms5611Reading(
            d1=raw.d1,
            d2=raw.d2,
            temperature=reading.temperature,
            pressure=reading.pressure,
        )

    def read_calibration(self) -> CalibrationSet:
        with closing(self._open()) as transport:
            return self._read_calibration(transport)

    def _open(self) -> BusTransport:
        transport = self._transport_factory()
        try:
            transport.configure(self.config.address)
        except Exception:
            transport.close()
            raise
        return transport

    def _acquire(self, transport: BusTransport) -> RawConversion:
        return acquire(
            transport,
            convert_d1=self.config.convert_d1,
            convert_d2=self.config.convert_d2,
            adc_read=self.config.adc_read,
            sleep=self._sleep,
        )

    def _read_calibration(self, transport: BusTransport) -> CalibrationSet:
        return read_calibration(transport, self.config.prom_addresses, sleep=self._sleep)
