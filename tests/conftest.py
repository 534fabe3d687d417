import pytest

from ddc_input import monitor as monitor_module
from ddc_input.interface import VcpReply


class FakeDevice:
    """In-memory DDC/CI transport that replays queued display replies."""

    def __init__(self, path="fake://0"):
        self.path = path
        self.device_id = f"FakeDevice:{path}"
        self.writes = []
        self.opened = False
        self.closed = False
        self._buffer = bytearray()

    def __enter__(self):
        self.opened = True
        return self

    def __exit__(self, *args):
        self.closed = True

    def queue_reply(self, payload):
        body = bytes([0x6E, 0x80 | len(payload)]) + bytes(payload)
        checksum = 0x50
        for c in body:
            checksum ^= c
        self._buffer += body + bytes([checksum])

    def queue_raw(self, data):
        self._buffer += data

    def write(self, message):
        self.writes.append(bytes(message))

    def read(self, length):
        data = bytes(self._buffer[:length])
        del self._buffer[:length]
        return data


class FakeInterface:
    """Stands in for DDCInterface at the level of VCP requests."""

    def __init__(self, capabilities_string, current=0x11):
        self.capabilities_string = capabilities_string
        self.current = current
        self.result = 0
        self.requests = 0
        self.set_calls = []

    def __call__(self, device):
        self.device = device
        return self

    def request_capabilities(self):
        self.requests += 1
        return self.capabilities_string

    def get_value(self, code):
        return VcpReply(result=self.result, code=code, type=0, maximum=0x12, value=self.current)

    def set_value(self, code, value):
        self.set_calls.append((code, value))
        self.current = value


@pytest.fixture
def fake_device():
    return FakeDevice()


@pytest.fixture
def fake_interface():
    return FakeInterface


@pytest.fixture
def devices(monkeypatch):
    """Replace the real transports with FakeDevice, one per path."""
    created = {}

    def get_device(path):
        if path not in created:
            created[path] = FakeDevice(path)
        return created[path]

    monkeypatch.setattr(monitor_module, "get_device", get_device)
    return created
