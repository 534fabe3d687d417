# SPDX-License-Identifier: GPL-3.0-or-later
#
# Copyright 2025 Jason Gerecke <jason.gerecke@wacom.com>
# Copyright 2025 Wacom Co., Ltd.
#
# See the NOTICE file distributed with this work for additional information
# regarding copyright ownership.

"""Query and change the video input of monitors over DDC/CI."""

__version__ = "0.1.0"

from .capabilities import INPUT_SELECT_CODE, Capabilities, Input, VcpCode
from .errors import (
    CapabilitiesError,
    EndOfFile,
    ExpectedValue,
    InvalidToken,
    UnexpectedToken,
)
from .lexer import Token, TokenKind, tokenize
from .parser import Parser, parse, parse_capabilities_string
