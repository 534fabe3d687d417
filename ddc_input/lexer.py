# SPDX-License-Identifier: GPL-3.0-or-later
#
# Copyright 2025 Jason Gerecke <jason.gerecke@wacom.com>
# Copyright 2025 Wacom Co., Ltd.
#
# See the NOTICE file distributed with this work for additional information
# regarding copyright ownership.

"""Split a DDC/CI capabilities string into tokens."""

import enum
import re
from typing import NamedTuple

from .errors import InvalidToken


class TokenKind(enum.Enum):
    LEFT_PAREN = "'('"
    RIGHT_PAREN = "')'"
    VCP = "vcp"
    BYTE = "hexadecimal number"
    IDENTIFIER = "identifier"

    def __str__(self):
        return self.value


class Token(NamedTuple):
    kind: TokenKind
    text: str
    start: int

    @property
    def end(self):
        return self.start + len(self.text)

    @property
    def value(self):
        """Integer value of a BYTE token, None for every other kind."""
        if self.kind is not TokenKind.BYTE:
            return None
        return int(self.text, 16)


_SKIP = " \x00"
_WORD = re.compile(r"[A-Za-z0-9_.]+")
_BYTE = re.compile(r"[0-9A-F]{2}")
_INVALID = re.compile(r"[^A-Za-z0-9_.() \x00]+")


def tokenize(source):
    r"""
    Convert a capabilities string into a list of tokens.

    Words are matched greedily and then classified, so "vcp" and two-digit
    upper-case hex numbers only become keyword and byte tokens when they
    stand alone. Spaces and NUL bytes are skipped.

    ## Examples:
    >>> [token.text for token in tokenize("(vcp(60(11 0F)))\x00")]
    ['(', 'vcp', '(', '60', '(', '11', '0F', ')', ')', ')']
    >>> [token.kind.name for token in tokenize("mccs_ver(2.1) 0C 0c")]
    ['IDENTIFIER', 'LEFT_PAREN', 'IDENTIFIER', 'RIGHT_PAREN', 'BYTE', 'IDENTIFIER']
    >>> tokenize("(prot($))")
    Traceback (most recent call last):
        ...
    ddc_input.errors.InvalidToken: unexpected character(s) '$' at offset 6
    """
    tokens = []
    pos = 0
    while pos < len(source):
        char = source[pos]
        if char in _SKIP:
            pos += 1
            continue
        if char == "(":
            tokens.append(Token(TokenKind.LEFT_PAREN, char, pos))
            pos += 1
            continue
        if char == ")":
            tokens.append(Token(TokenKind.RIGHT_PAREN, char, pos))
            pos += 1
            continue

        match = _WORD.match(source, pos)
        if match is None:
            bad = _INVALID.match(source, pos)
            raise InvalidToken(bad.group(), bad.start(), bad.end())

        text = match.group()
        if text == "vcp":
            kind = TokenKind.VCP
        elif _BYTE.fullmatch(text):
            kind = TokenKind.BYTE
        else:
            kind = TokenKind.IDENTIFIER
        tokens.append(Token(kind, text, pos))
        pos = match.end()
    return tokens
