from __future__ import annotations

from typing import List

import pytest

from envpoll.station.transport import SMBusTransport, TransportError, read_exact


class FakeMsg:
    def __init__(self, kind: str, address: int, data: List[int]):
        self.kind = kind
        self.address = address
        self.data = data

    def __iter__(self):
        return iter(self.data)


class FakeI2cMsg:
    @staticmethod
    def write(address: int, data) -> FakeMsg:
        return FakeMsg("write", address, list(data))

    @staticmethod
    def read(address: int, length: int) -> FakeMsg:
        return FakeMsg("read", address, [0] * length)


class FakeSMBus:
    instances: List["FakeSMBus"] = []

    def __init__(self, bus_index: int):
        self.bus_index = bus_index
        self.messages: List[FakeMsg] = []
        self.closed = False
        self.fail = False
        self.read_data = [0x12, 0x34, 0x56]
        FakeSMBus.instances.append(self)

    def i2c_rdwr(self, *messages: FakeMsg) -> None:
        if self.fail:
            raise OSError(121, "Remote I/O error")
        for msg in messages:
            if msg.kind == "read":
                msg.data = self.read_data[: len(msg.data)]
            self.messages.append(msg)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_smbus(monkeypatch):
    FakeSMBus.instances = []
    monkeypatch.setattr("envpoll.station.transport.SMBus", FakeSMBus)
    monkeypatch.setattr("envpoll.station.transport.i2c_msg", FakeI2cMsg)
    return FakeSMBus


def test_smbus_transport_raw_write_and_read(fake_smbus) -> None:
    transport = SMBusTransport(1)
    transport.configure(0x77)
    transport.write(b"\x48")
    data = transport.read(3)
    transport.close()

    bus = fake_smbus.instances[0]
    assert bus.bus_index == 1
    assert bus.closed
    assert [(msg.kind, msg.address) for msg in bus.messages] == [("write", 0x77), ("read", 0x77)]
    assert bus.messages[0].data == [0x48]
    assert data == b"\x12\x34\x56"


def test_smbus_transport_wraps_os_error(fake_smbus) -> None:
    transport = SMBusTransport(1)
    transport.configure(0x77)
    fake_smbus.instances[0].fail = True
    with pytest.raises(TransportError):
        transport.write(b"\x00")
    with pytest.raises(TransportError):
        transport.read(2)


def test_smbus_transport_requires_configure(fake_smbus) -> None:
    transport = SMBusTransport(1)
    with pytest.raises(TransportError):
        transport.write(b"\x00")


def test_read_exact_rejects_short_read(fake_smbus) -> None:
    transport = SMBusTransport(1)
    transport.configure(0x77)
    fake_smbus.instances[0].read_data = [0x01]
    with pytest.raises(TransportError):
        read_exact(transport, 2)
