# SPDX-License-Identifier: GPL-3.0-or-later
#
# Copyright 2025 Jason Gerecke <jason.gerecke@wacom.com>
# Copyright 2025 Wacom Co., Ltd.
#
# See the NOTICE file distributed with this work for additional information
# regarding copyright ownership.

"""
Byte transports to the DDC/CI endpoint of a display.

Every transport is a context manager providing read() and write(). The
messages written always start with the destination address; transports
whose hardware inserts the address on its own drop that byte.
"""

import logging

from pyftdi.i2c import I2cController
from pyftdi.usbtools import UsbToolsError
import serial
from smbus2 import SMBus, i2c_msg

from . import config

logger = logging.getLogger(__name__)


class DDCDevice:
    """
    Common behaviour of the DDC/CI transports.

    'path' identifies the device on the command line and is also used as
    the key of the capabilities cache.
    """

    def __init__(self, path):
        self._path = path

    @property
    def path(self):
        return self._path

    @property
    def device_id(self):
        return f"{type(self).__name__}:{self._path}"

    def __repr__(self):
        return f"<{type(self).__name__} {self._path}>"

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *args):
        self.close()

    def open(self):
        raise NotImplementedError

    def close(self):
        raise NotImplementedError

    def write(self, message):
        raise NotImplementedError

    def read(self, length):
        raise NotImplementedError


class FtdiDevice(DDCDevice):
    """
    A display reachable through an FTDI FT232H bridge chip, addressed by a
    PyFtdi URL such as "ftdi://ftdi:232h/1".
    """

    def __init__(self, url):
        super().__init__(url)
        self._i2c_master = None
        self._port = None

    def open(self):
        i2c = I2cController()
        try:
            i2c.configure(self._path, frequency=100000.0)
        except UsbToolsError as e:
            i2c.close()
            raise IOError(f"Unable to open {self._path}: {e}") from e
        logger.debug(f"Opened i2c connection to {self._path} at {i2c.frequency}Hz")
        self._port = i2c.get_port(config.DDC_ADDRESS)
        self._i2c_master = i2c

    def close(self):
        if self._i2c_master is not None:
            self._i2c_master.close()
        self._i2c_master = None
        self._port = None

    def write(self, message):
        # The bridge inserts the destination address itself
        self._port.write(message[1:])
        self._port.flush()

    def read(self, length):
        return bytes(self._port.read(length))


class SerialDevice(DDCDevice):
    """
    A display behind a serial bridge such as the Silicon Labs CP210x, e.g.
    "/dev/ttyUSB0".
    """

    def __init__(self, path):
        super().__init__(path)
        self._serial = None

    def open(self):
        self._serial = serial.Serial(self._path)
        logger.debug(f"Opened serial connection to {self._path}")

    def close(self):
        if self._serial is not None:
            self._serial.close()
        self._serial = None

    def write(self, message):
        self._serial.write(message)
        self._serial.flush()

    def read(self, length):
        return self._serial.read(length)


class I2cDevice(DDCDevice):
    """A display reachable through a Linux I2C device node, e.g. "/dev/i2c-3"."""

    def __init__(self, path):
        super().__init__(path)
        self._bus = None

    def open(self):
        self._bus = SMBus(self._path)
        logger.debug(f"Opened i2c connection to {self._path}")

    def close(self):
        if self._bus is not None:
            self._bus.close()
        self._bus = None

    def write(self, message):
        request = i2c_msg.write(config.DDC_ADDRESS, message[1:])
        self._bus.i2c_rdwr(request)

    def read(self, length):
        reply = i2c_msg.read(config.DDC_ADDRESS, length)
        self._bus.i2c_rdwr(reply)
        return bytes(reply)


def get_device(path):
    """
    Choose the transport for a device path. The returned device still has
    to be opened, normally by using it as a context manager.

    >>> get_device("ftdi://ftdi:232h/1")
    <FtdiDevice ftdi://ftdi:232h/1>
    >>> get_device("/dev/i2c-3")
    <I2cDevice /dev/i2c-3>
    >>> get_device("/dev/ttyUSB0").device_id
    'SerialDevice:/dev/ttyUSB0'
    """
    if path.startswith("ftdi://"):
        return FtdiDevice(path)
    elif path.startswith("/dev/i2c-"):
        return I2cDevice(path)
    return SerialDevice(path)
