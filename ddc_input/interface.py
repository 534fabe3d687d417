# SPDX-License-Identifier: GPL-3.0-or-later
#
# Copyright 2025 Jason Gerecke <jason.gerecke@wacom.com>
# Copyright 2025 Wacom Co., Ltd.
#
# See the NOTICE file distributed with this work for additional information
# regarding copyright ownership.

"""DDC/CI requests as described by the VESA DDC/CI Standard, Version 1.1."""

import logging
import struct
import time
from typing import NamedTuple

import pyftdi.misc

from . import config

logger = logging.getLogger(__name__)

# Destination address byte of every message sent to the display
DISPLAY_ADDRESS = 0x6E
# Address assumed for replies, which the transports do not report
HOST_ADDRESS = 0x6F
# Checksums of replies are computed as if sent to this address
VIRTUAL_HOST_ADDRESS = 0x50
NULL_MESSAGE = b"\x6f\x6e\x80\xbe"


class VcpReply(NamedTuple):
    result: int
    code: int
    type: int
    maximum: int
    value: int


class DDCInterface:
    """
    Interface for interacting with DDC/CI devices.

    The provided 'ddc_device' must support read() and write() calls, like
    the transports in ddc_input.devices.
    """

    def __init__(self, ddc_device, retries=None, sleep_multiplier=None):
        self._ddc_device = ddc_device
        self._retries = config.RETRIES if retries is None else retries
        if sleep_multiplier is None:
            sleep_multiplier = config.SLEEP_MULTIPLIER
        self._sleep_multiplier = sleep_multiplier

    def get_value(self, code):
        """Read the current and maximum value of a VCP code."""
        # VESA DDC/CI 1.1
        # Section 4.3 "Get VCP Feature & VCP Feature Reply"
        DDCInterface._check_code(code)
        message = bytes([DISPLAY_ADDRESS, 0x51, 0x82, 0x01, code])
        data = self._query(message, sleep=0.040)
        if len(data) != 12:
            raise IOError(f"Received VCP reply of unexpected length {len(data)}")
        if data[3] != 0x02:
            raise IOError(f"Received VCP reply with unexpected opcode {data[3]:#04x}")
        return VcpReply(
            result=data[4],
            code=data[5],
            type=data[6],
            maximum=int.from_bytes(data[7:9], "big"),
            value=int.from_bytes(data[9:11], "big"),
        )

    def set_value(self, code, value):
        # VESA DDC/CI 1.1
        # Section 4.4 "Set VCP Feature"
        DDCInterface._check_code(code)
        if value > 0xFFFF or value < 0:
            raise ValueError(f"Invalid value {value} for VCP code {code:#04x}")
        message = bytes([DISPLAY_ADDRESS, 0x51, 0x84, 0x03, code]) + value.to_bytes(2, "big")
        self._write(message, sleep=0.050)

    def save_settings(self):
        """
        Ask the display to store the current adjustments in non-volatile
        memory.
        """
        # VESA DDC/CI 1.1
        # Section 4.5 "Save Current Settings"
        message = bytes([DISPLAY_ADDRESS, 0x51, 0x81, 0x0C])
        self._write(message, sleep=0.200)

    def request_capabilities(self):
        """
        Read the complete capabilities string of the display.

        The string is transferred in fragments; an empty fragment marks
        the end.
        """
        # VESA DDC/CI 1.1
        # Section 4.6 "Capabilities Request & Capabilities Reply"
        result = b""
        offset = 0
        while True:
            # The offset field is 16 bits wide
            if offset > 0xFFFF:
                raise IOError("Capabilities string is too long; no terminating fragment received")
            message = bytes([DISPLAY_ADDRESS, 0x51, 0x83, 0xF3]) + struct.pack(">H", offset)
            self._write(message, sleep=0.040)
            data = self._read(sleep=0.050)
            if data[3] != 0xE3:
                raise IOError(f"Received capabilities reply with unexpected opcode {data[3]:#04x}")
            payload = data[6:-1]
            if len(payload) == 0:
                break
            result += payload
            offset += len(payload)
        logger.debug(f"Read {offset} bytes of capabilities")
        try:
            return result.decode("ascii")
        except UnicodeDecodeError as e:
            raise IOError(f"Capabilities string is not ASCII: {e}") from e

    @staticmethod
    def _check_code(code):
        if code > 255 or code < 0:
            raise ValueError(f"Invalid VCP control code {code}")

    @staticmethod
    def _checksum(data, destination_address=None):
        r"""
        Calculate the DDC/CI checksum of a chunk of data.

        The checksum is the XOR of all message bytes. If a destination
        address is given it takes the place of the first message byte, as
        needed for replies, which are checked against the virtual host
        address 0x50.

        >>> DDCInterface._checksum(b'\x6e\x51\x81\x0c')
        178
        >>> DDCInterface._checksum(b'\x01\x02\x03')
        0
        >>> DDCInterface._checksum(b'\x6f\x6e\x80', destination_address=0x50)
        190
        """
        # VESA DDC/CI 1.1
        # Section 1.6 "I2C Bus Notation"
        checksum = 0
        for c in data:
            checksum = checksum ^ c
        if destination_address is not None:
            checksum = checksum ^ data[0] ^ destination_address
        return checksum

    def _retry(self, fn, sleep=0.040):
        """
        Call 'fn' until it succeeds or the retries are used up, in which
        case the last error is raised.
        """
        # VESA DDC/CI 1.1
        # Section 5 "Communication Protocol"
        saved_exception = None
        for attempt in range(0, self._retries + 1):
            try:
                return fn()
            except IOError as e:
                saved_exception = e
                logger.debug(f"Failed attempt #{attempt + 1}: {e}")
                time.sleep(sleep * self._sleep_multiplier)
        raise saved_exception

    def _write(self, message, sleep):
        return self._retry(lambda: self._write_once(message, sleep))

    def _write_once(self, message, sleep):
        """
        Write a message followed by its checksum, then give the display
        'sleep' seconds (scaled) to process it. No retries.
        """
        data = message + bytes([DDCInterface._checksum(message)])
        logger.debug(f"Writing: {pyftdi.misc.hexline(data)}")
        self._ddc_device.write(data)
        time.sleep(sleep * self._sleep_multiplier)

    def _read(self, sleep):
        return self._retry(lambda: self._read_once(sleep))

    def _read_once(self, sleep):
        """
        Read one message from the display. No retries.

        Only messages from source address 0x6E are accepted. The returned
        message starts with the (assumed) destination address.
        """
        # The transports do not report the destination address on read()
        data = bytes([HOST_ADDRESS]) + self._ddc_device.read(2)
        if len(data) != 3:
            raise IOError("Short reply from display")
        if data[1] != DISPLAY_ADDRESS:
            raise IOError(f"Unexpected reply from address {data[1]:#04x}")
        length = (data[2] & 0x7F) + 1
        data = data + self._ddc_device.read(length)
        if len(data) != 3 + length:
            raise IOError("Short reply from display")
        logger.debug(f"Read: {pyftdi.misc.hexline(data)}")
        if DDCInterface._checksum(data, VIRTUAL_HOST_ADDRESS) != 0:
            raise IOError(f"Received data with BAD checksum: {data}")
        if data == NULL_MESSAGE:
            raise IOError("Received NULL message")
        time.sleep(sleep * self._sleep_multiplier)
        return data

    def _query(self, message, sleep):
        """Write a request and read the reply, retrying each on failure."""
        self._write(message, sleep)
        return self._read(sleep)
