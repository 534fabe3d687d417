import sqlite3
from contextlib import ExitStack

import pytest
from pyftdi.i2c import I2cController
from pyftdi.usbtools import UsbToolsError

from ddc_input.cache import CapabilitiesCache
from ddc_input.capabilities import Input
from ddc_input.errors import CapabilitiesError
from ddc_input.monitor import Monitor, open_monitors

CAPS = "(prot(monitor)type(lcd)vcp(10 12 60(11 12 0F 00))mccs_ver(2.1))"


class BrokenCache:
    def get(self, device_id):
        raise sqlite3.OperationalError("database is locked")

    def set(self, device_id, capabilities_string):
        raise sqlite3.OperationalError("database is locked")


def test_loads_capabilities(devices, fake_interface):
    interface = fake_interface(CAPS)
    with Monitor("/dev/i2c-3", interface_factory=interface) as monitor:
        assert devices["/dev/i2c-3"].opened
        assert monitor.name == "/dev/i2c-3"
        assert monitor.capabilities_string == CAPS
        assert monitor.capabilities.supported_inputs() == [
            Input.HDMI_1,
            Input.HDMI_2,
            Input.DISPLAYPORT_1,
        ]
    assert devices["/dev/i2c-3"].closed


def test_capabilities_are_cached(devices, fake_interface, tmp_path):
    cache = CapabilitiesCache(tmp_path / "capabilities.db")
    interface = fake_interface(CAPS)

    with Monitor("/dev/i2c-3", cache=cache, interface_factory=interface):
        pass
    with Monitor("/dev/i2c-3", cache=cache, interface_factory=interface) as monitor:
        assert monitor.capabilities.has_input_select()

    assert interface.requests == 1
    assert cache.get("FakeDevice:/dev/i2c-3") == CAPS


def test_invalid_cached_string_is_replaced(devices, fake_interface, tmp_path):
    cache = CapabilitiesCache(tmp_path / "capabilities.db")
    cache.set("FakeDevice:/dev/i2c-3", "(vcp(60(11")
    interface = fake_interface(CAPS)

    with Monitor("/dev/i2c-3", cache=cache, interface_factory=interface) as monitor:
        assert monitor.capabilities.has_input_select()

    assert interface.requests == 1
    assert cache.get("FakeDevice:/dev/i2c-3") == CAPS


def test_unparsable_string_is_not_cached(devices, fake_interface, tmp_path):
    cache = CapabilitiesCache(tmp_path / "capabilities.db")
    interface = fake_interface("(prot($))")

    with pytest.raises(CapabilitiesError):
        with Monitor("/dev/i2c-3", cache=cache, interface_factory=interface):
            pass

    assert cache.get("FakeDevice:/dev/i2c-3") is None
    assert devices["/dev/i2c-3"].closed


def test_empty_capabilities_string(devices, fake_interface):
    with pytest.raises(IOError):
        with Monitor("/dev/i2c-3", interface_factory=fake_interface("")):
            pass
    assert devices["/dev/i2c-3"].closed


def test_cache_errors_are_not_fatal(devices, fake_interface):
    interface = fake_interface(CAPS)
    with Monitor("/dev/i2c-3", cache=BrokenCache(), interface_factory=interface) as monitor:
        assert monitor.capabilities.has_input_select()
    assert interface.requests == 1


def test_input(devices, fake_interface):
    interface = fake_interface(CAPS, current=0x0F)
    with Monitor("/dev/i2c-3", interface_factory=interface) as monitor:
        assert monitor.input() is Input.DISPLAYPORT_1


def test_input_ignores_high_byte(devices, fake_interface):
    interface = fake_interface(CAPS, current=0x0112)
    with Monitor("/dev/i2c-3", interface_factory=interface) as monitor:
        assert monitor.input() is Input.HDMI_2


def test_unknown_input(devices, fake_interface):
    interface = fake_interface(CAPS, current=0x01)
    with Monitor("/dev/i2c-3", interface_factory=interface) as monitor:
        assert monitor.input() is None


def test_input_error_reply(devices, fake_interface):
    interface = fake_interface(CAPS)
    interface.result = 1
    with Monitor("/dev/i2c-3", interface_factory=interface) as monitor:
        with pytest.raises(IOError):
            monitor.input()


def test_set_input(devices, fake_interface):
    interface = fake_interface(CAPS)
    with Monitor("/dev/i2c-3", interface_factory=interface) as monitor:
        monitor.set_input(Input.DISPLAYPORT_1)
        assert monitor.input() is Input.DISPLAYPORT_1
    assert interface.set_calls == [(0x60, 0x0F)]


def test_set_unsupported_input(devices, fake_interface):
    interface = fake_interface(CAPS)
    with Monitor("/dev/i2c-3", interface_factory=interface) as monitor:
        with pytest.raises(ValueError, match="not supported"):
            monitor.set_input(Input.DISPLAYPORT_2)
    assert interface.set_calls == []


def test_set_input_without_input_select(devices, fake_interface):
    interface = fake_interface("(vcp(10 12))")
    with Monitor("/dev/i2c-3", interface_factory=interface) as monitor:
        with pytest.raises(ValueError):
            monitor.set_input(Input.HDMI_1)


def test_open_monitors_skips_failures(devices, fake_interface):
    strings = {"/dev/i2c-3": CAPS, "/dev/i2c-4": "(vcp(01 02 monitor))", "/dev/i2c-5": "(vcp(10))"}

    def factory(device):
        return fake_interface(strings[device.path])

    with ExitStack() as stack:
        monitors = open_monitors(list(strings), stack, interface_factory=factory)
        assert [monitor.name for monitor in monitors] == ["/dev/i2c-3", "/dev/i2c-5"]
        assert not devices["/dev/i2c-5"].closed

    assert devices["/dev/i2c-3"].closed
    assert devices["/dev/i2c-4"].closed
    assert devices["/dev/i2c-5"].closed


def test_trailing_nul_from_device(devices, fake_interface):
    interface = fake_interface(CAPS + "\x00")
    with Monitor("/dev/i2c-3", interface_factory=interface) as monitor:
        assert monitor.capabilities.supported_inputs()[0] is Input.HDMI_1


def test_open_monitors_skips_missing_ftdi_bridge(monkeypatch):
    def configure(self, url, frequency):
        raise UsbToolsError("URL string is missing device port")

    monkeypatch.setattr(I2cController, "configure", configure)
    monkeypatch.setattr(I2cController, "close", lambda self: None)
    with ExitStack() as stack:
        assert open_monitors(["ftdi://ftdi:232h"], stack) == []
