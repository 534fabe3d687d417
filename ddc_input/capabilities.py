# SPDX-License-Identifier: GPL-3.0-or-later
#
# Copyright 2025 Jason Gerecke <jason.gerecke@wacom.com>
# Copyright 2025 Wacom Co., Ltd.
#
# See the NOTICE file distributed with this work for additional information
# regarding copyright ownership.

"""Decoded monitor capabilities and the video inputs they advertise."""

import enum
from dataclasses import dataclass
from typing import Optional, Tuple

# VESA MCCS "Input Select" control. Shared by the capability queries
# below and by the get/set VCP requests in ddc_input.monitor.
INPUT_SELECT_CODE = 0x60


class Input(enum.IntEnum):
    """
    Video inputs that can be selected through VCP code 0x60.

    The member values are the bytes used on the wire, so this enum is the
    one and only table between input names and VCP values.
    """

    DISPLAYPORT_1 = 0x0F
    DISPLAYPORT_2 = 0x10
    HDMI_1 = 0x11
    HDMI_2 = 0x12

    def __str__(self):
        return self.name.lower().replace("_", "-")

    def __format__(self, format_spec):
        return format(str(self), format_spec)

    @classmethod
    def from_value(cls, value):
        """
        Return the input for a VCP 0x60 value, or None if the value has no
        known input.

        >>> Input.from_value(0x11)
        <Input.HDMI_1: 17>
        >>> Input.from_value(0x00) is None
        True
        """
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def from_name(cls, name):
        """
        Look up an input by its label (e.g. "hdmi-1") or by its VCP value
        in decimal or hexadecimal (e.g. "0x11").

        >>> Input.from_name("displayport-2")
        <Input.DISPLAYPORT_2: 16>
        >>> Input.from_name("0x12")
        <Input.HDMI_2: 18>
        """
        for item in cls:
            if str(item) == name.strip().lower():
                return item
        try:
            value = int(name, 0)
        except ValueError:
            value = None
        result = cls.from_value(value)
        if result is None:
            choices = ", ".join(str(item) for item in cls)
            raise ValueError(f"Unknown input '{name}' (expected one of: {choices})")
        return result


@dataclass(frozen=True)
class VcpCode:
    """
    A VCP code supported by a monitor.

    'values' lists the discrete values the monitor accepts for the code. It
    is empty for continuous controls such as brightness.
    """

    code: int
    values: Tuple[int, ...] = ()


@dataclass(frozen=True)
class Capabilities:
    """
    The parts of a capabilities string that are understood.

    'vcp' is None when the capabilities string had no vcp() group at all,
    which is different from an empty vcp() group.
    """

    vcp: Optional[Tuple[VcpCode, ...]] = None

    def get(self, code):
        if self.vcp is None:
            return None
        for vcp_code in self.vcp:
            if vcp_code.code == code:
                return vcp_code
        return None

    def has_input_select(self):
        return self.get(INPUT_SELECT_CODE) is not None

    def supported_inputs(self):
        """
        Return the inputs advertised for VCP 0x60 in the order the monitor
        declares them, or None if input selection is not supported.

        Values that do not correspond to a known Input are left out.
        """
        input_select = self.get(INPUT_SELECT_CODE)
        if input_select is None:
            return None
        inputs = [Input.from_value(value) for value in input_select.values]
        return [item for item in inputs if item is not None]
