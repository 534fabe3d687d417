# SPDX-License-Identifier: GPL-3.0-or-later
#
# Copyright 2025 Jason Gerecke <jason.gerecke@wacom.com>
# Copyright 2025 Wacom Co., Ltd.
#
# See the NOTICE file distributed with this work for additional information
# regarding copyright ownership.

"""Errors raised while decoding a DDC/CI capabilities string."""


class CapabilitiesError(ValueError):
    """
    Base class for all failures to decode a capabilities string.

    A monitor whose capabilities cannot be decoded should be treated as
    unusable for input switching; this is never fatal for other monitors.
    """


class InvalidToken(CapabilitiesError):
    """
    The capabilities string contains characters that are not part of any
    token.

    The offending text and its offsets into the original string are kept
    so that the exact problem can be reported.
    """

    def __init__(self, text, start, end):
        super().__init__(f"unexpected character(s) '{text}' at offset {start}")
        self.text = text
        self.start = start
        self.end = end


class UnexpectedToken(CapabilitiesError):
    """
    The parser required a specific kind of token and found another.

    'expected' is a single TokenKind, or a tuple of them when any of
    several kinds would have been accepted.
    """

    def __init__(self, expected, found):
        if isinstance(expected, tuple):
            wanted = " or ".join(str(kind) for kind in expected)
        else:
            wanted = str(expected)
        super().__init__(f"expected {wanted}, found {found.kind} at offset {found.start}")
        self.expected = expected
        self.found = found


class ExpectedValue(CapabilitiesError):
    """A VCP code or value slot held something other than a hex byte."""

    def __init__(self, found):
        super().__init__(
            f"expected hexadecimal number, found {found.kind} '{found.text}' "
            f"at offset {found.start}"
        )
        self.found = found


class EndOfFile(CapabilitiesError):
    """The capabilities string ended before the grammar was satisfied."""

    def __init__(self):
        super().__init__("unexpected end-of-file")
