# SPDX-License-Identifier: GPL-3.0-or-later
#
# Copyright 2025 Jason Gerecke <jason.gerecke@wacom.com>
# Copyright 2025 Wacom Co., Ltd.
#
# See the NOTICE file distributed with this work for additional information
# regarding copyright ownership.

"""A display whose video input can be queried and changed over DDC/CI."""

import logging
import sqlite3

from .capabilities import INPUT_SELECT_CODE, Input
from .devices import get_device
from .errors import CapabilitiesError
from .interface import DDCInterface
from .parser import parse_capabilities_string

logger = logging.getLogger(__name__)


class Monitor:
    """
    A display opened through one of the DDC/CI transports.

    Entering the context opens the transport and loads the capabilities
    of the display, from the cache if possible.
    """

    def __init__(self, path, cache=None, interface_factory=None):
        self._path = path
        self._cache = cache
        self._interface_factory = interface_factory or DDCInterface
        self._device = None
        self._interface = None
        self.capabilities_string = None
        self.capabilities = None

    @property
    def name(self):
        return self._path

    def __enter__(self):
        self._device = get_device(self._path).__enter__()
        try:
            self._interface = self._interface_factory(self._device)
            self._load_capabilities()
        except BaseException:
            self.__exit__()
            raise
        return self

    def __exit__(self, *args):
        if self._device is not None:
            self._device.__exit__()
        self._device = None
        self._interface = None

    def _load_capabilities(self):
        device_id = self._device.device_id
        cached = self._cache_get(device_id)
        if cached is not None:
            try:
                self.capabilities = parse_capabilities_string(cached)
            except CapabilitiesError as e:
                logger.warning(f"Ignoring cached capabilities of {self.name}: {e}")
            else:
                logger.debug(f"Using cached capabilities for {self.name}")
                self.capabilities_string = cached
                return

        logger.debug(f"Requesting capabilities from {self.name}...")
        capabilities_string = self._interface.request_capabilities()
        if len(capabilities_string) == 0:
            raise IOError(f"Received an empty capabilities string from {self.name}")
        self.capabilities = parse_capabilities_string(capabilities_string)
        self.capabilities_string = capabilities_string
        self._cache_set(device_id, capabilities_string)

    def _cache_get(self, device_id):
        if self._cache is None:
            return None
        try:
            return self._cache.get(device_id)
        except (sqlite3.Error, OSError) as e:
            logger.warning(f"Unable to read the capabilities cache: {e}")
            return None

    def _cache_set(self, device_id, capabilities_string):
        if self._cache is None:
            return
        try:
            self._cache.set(device_id, capabilities_string)
        except (sqlite3.Error, OSError) as e:
            logger.warning(f"Unable to update the capabilities cache: {e}")

    def input(self):
        """
        Return the currently selected input, or None if the display reports
        a value that is not a known Input.
        """
        result = self._interface.get_value(INPUT_SELECT_CODE)
        if result.result != 0:
            raise IOError(
                f"Failed to retrieve the value of VCP code {INPUT_SELECT_CODE:#04x} "
                f"for monitor '{self.name}'"
            )
        if result.code != INPUT_SELECT_CODE:
            raise IOError(f"Unexpected response for VCP code {result.code:#04x}")
        # Some displays report a non-zero high byte
        current = Input.from_value(result.value & 0xFF)
        if current is None:
            logger.debug(f"Monitor '{self.name}' reports unknown input {result.value:#06x}")
        return current

    def set_input(self, target):
        supported = self.capabilities.supported_inputs() or []
        if target not in supported:
            raise ValueError(
                f"Input {target} is not supported by monitor '{self.name}' "
                f"(supported: {', '.join(str(item) for item in supported) or 'none'})"
            )
        self._interface.set_value(INPUT_SELECT_CODE, int(target))
        logger.debug(f"Set input of monitor '{self.name}' to {target}")


def open_monitors(paths, stack, cache=None, interface_factory=None):
    """
    Open a Monitor for each path on the given contextlib.ExitStack.

    Displays that cannot be opened or whose capabilities cannot be decoded
    are logged and left out; they do not prevent the others from being
    used.
    """
    monitors = []
    for path in paths:
        try:
            monitor = Monitor(path, cache=cache, interface_factory=interface_factory)
            monitors.append(stack.enter_context(monitor))
        except (OSError, ValueError) as e:
            logger.error(f"An error occurred while getting information for '{path}': {e}")
    return monitors
