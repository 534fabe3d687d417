# SPDX-License-Identifier: GPL-3.0-or-later
#
# Copyright 2025 Jason Gerecke <jason.gerecke@wacom.com>
# Copyright 2025 Wacom Co., Ltd.
#
# See the NOTICE file distributed with this work for additional information
# regarding copyright ownership.

"""
On-disk cache of capabilities strings.

Reading the capabilities of a display over DDC/CI takes several seconds,
so the raw strings are kept in a small SQLite database keyed by device.
"""

import logging
import sqlite3
from contextlib import closing

from . import config

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS capabilities (
    device_id           TEXT PRIMARY KEY,
    capabilities_string TEXT NOT NULL
)
"""


class CapabilitiesCache:
    def __init__(self, path=None):
        self._path = config.cache_path() if path is None else path

    @property
    def path(self):
        return self._path

    def _connect(self):
        self._path.parent.mkdir(parents=True, exist_ok=True)
        connection = sqlite3.connect(str(self._path))
        connection.execute(_SCHEMA)
        return connection

    def get(self, device_id):
        """Return the cached capabilities string of a device, or None."""
        with closing(self._connect()) as connection:
            row = connection.execute(
                "SELECT capabilities_string FROM capabilities WHERE device_id = ?",
                (device_id,),
            ).fetchone()
        if row is None:
            return None
        return row[0]

    def set(self, device_id, capabilities_string):
        with closing(self._connect()) as connection, connection:
            connection.execute(
                "INSERT OR REPLACE INTO capabilities (device_id, capabilities_string) "
                "VALUES (?, ?)",
                (device_id, capabilities_string),
            )
        logger.debug(f"Cached capabilities of {device_id} in {self._path}")

    def clear(self):
        with closing(self._connect()) as connection, connection:
            connection.execute("DELETE FROM capabilities")
        logger.debug(f"Cleared capabilities cache {self._path}")
