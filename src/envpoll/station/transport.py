from __future__ import annotations

import logging
from typing import Optional, Protocol

from smbus2 import SMBus, i2c_msg

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Raised when a bus write or read fails or returns short."""


class BusTransport(Protocol):
    """Raw byte channel to one peripheral on a two-wire bus."""

    def configure(self, address: int) -> None: ...

    def write(self, data: bytes) -> None: ...

    def read(self, length: int) -> bytes: ...

    def close(self) -> None: ...


class SMBusTransport:
    """
    ``BusTransport`` backed by ``smbus2``.

    Writes and reads are plain I2C messages (no register byte is prepended),
    which is what the MS5611 command protocol expects.
    """

    def __init__(self, bus_index: int):
        self.bus_index = bus_index
        self._bus: Optional[SMBus] = None
        self._address: Optional[int] = None

    def configure(self, address: int) -> None:
        if self._bus is None:
            try:
                self._bus = SMBus(self.bus_index)
            except OSError as exc:
                raise TransportError(f"Cannot open I2C bus {self.bus_index}: {exc}") from exc
            logger.debug("Opened I2C bus %d", self.bus_index)
        self._address = address

    def write(self, data: bytes) -> None:
        bus, address = self._require_open()
        try:
            bus.i2c_rdwr(i2c_msg.write(address, list(data)))
        except OSError as exc:
            raise TransportError(f"I2C write to 0x{address:02X} failed: {exc}") from exc

    def read(self, length: int) -> bytes:
        bus, address = self._require_open()
        msg = i2c_msg.read(address, length)
        try:
            bus.i2c_rdwr(msg)
        except OSError as exc:
            raise TransportError(f"I2C read from 0x{address:02X} failed: {exc}") from exc
        return bytes(list(msg))

    def close(self) -> None:
        if self._bus is not None:
            try:
                self._bus.close()
            finally:
                self._bus = None
                logger.debug("Closed I2C bus %d", self.bus_index)

    def _require_open(self) -> tuple[SMBus, int]:
        if self._bus is None or self._address is None:
            raise TransportError("Transport used before configure()")
        return self._bus, self._address


def read_exact(transport: BusTransport, length: int) -> bytes:
    data = transport.read(length)
    if len(data) != length:
        raise TransportError(f"Short read: expected {length} bytes, got {len(data)}")
    return data
