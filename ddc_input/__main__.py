# SPDX-License-Identifier: GPL-3.0-or-later
#
# Copyright 2025 Jason Gerecke <jason.gerecke@wacom.com>
# Copyright 2025 Wacom Co., Ltd.
#
# See the NOTICE file distributed with this work for additional information
# regarding copyright ownership.

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
