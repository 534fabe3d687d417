# SPDX-License-Identifier: GPL-3.0-or-later
#
# Copyright 2025 Jason Gerecke <jason.gerecke@wacom.com>
# Copyright 2025 Wacom Co., Ltd.
#
# See the NOTICE file distributed with this work for additional information
# regarding copyright ownership.

"""
Settings shared by the device, cache and command-line code.

Values may be overridden through the environment:

    DDC_INPUT_CACHE_DIR          Directory holding the capabilities cache.
    DDC_INPUT_RETRIES            Attempts made after a failed DDC/CI transfer.
    DDC_INPUT_SLEEP_MULTIPLIER   Scale applied to every DDC/CI delay.
"""

import os
from pathlib import Path

PROGRAM_NAME = "ddc-input"

# I2C slave address of the DDC/CI endpoint of a display
DDC_ADDRESS = 0x37

RETRIES = int(os.environ.get("DDC_INPUT_RETRIES", "3"))
SLEEP_MULTIPLIER = float(os.environ.get("DDC_INPUT_SLEEP_MULTIPLIER", "1.5"))


def cache_dir():
    """
    Return the directory used to cache capabilities strings.

    >>> import os
    >>> os.environ["DDC_INPUT_CACHE_DIR"] = "/tmp/ddc"
    >>> cache_dir()
    PosixPath('/tmp/ddc')
    >>> del os.environ["DDC_INPUT_CACHE_DIR"]
    """
    override = os.environ.get("DDC_INPUT_CACHE_DIR")
    if override:
        return Path(override)
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache) / "ddc_input"
    return Path.home() / ".cache" / "ddc_input"


def cache_path():
    return cache_dir() / "capabilities.db"
