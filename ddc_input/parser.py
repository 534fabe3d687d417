# SPDX-License-Identifier: GPL-3.0-or-later
#
# Copyright 2025 Jason Gerecke <jason.gerecke@wacom.com>
# Copyright 2025 Wacom Co., Ltd.
#
# See the NOTICE file distributed with this work for additional information
# regarding copyright ownership.

"""
Recursive-descent parser for DDC/CI capabilities strings.

Only the vcp() group is decoded. The grammar handled here is:

    capabilities  := '(' group* ')'
    group         := vcp-group | unknown-group
    vcp-group     := 'vcp' '(' vcp-entry* ')'
    vcp-entry     := byte [ '(' byte* ')' ]
    unknown-group := identifier '(' ... ')'
"""

from .capabilities import Capabilities, VcpCode
from .errors import EndOfFile, ExpectedValue, UnexpectedToken
from .lexer import TokenKind, tokenize


class Parser:
    def __init__(self, tokens):
        self._tokens = tokens
        self._index = 0

    def parse(self):
        """
        Parse the complete token list into a Capabilities object.

        Anything after the closing parenthesis of the outer group is
        ignored.
        """
        vcp = None

        self.expect(TokenKind.LEFT_PAREN)
        while not self.check(TokenKind.RIGHT_PAREN):
            token = self.next()
            if token.kind is TokenKind.VCP:
                vcp = self._parse_vcp()
            elif token.kind is TokenKind.IDENTIFIER:
                self.skip_group()
            else:
                raise UnexpectedToken((TokenKind.VCP, TokenKind.IDENTIFIER), token)
        self.expect(TokenKind.RIGHT_PAREN)

        return Capabilities(vcp=vcp)

    def _parse_vcp(self):
        self.expect(TokenKind.LEFT_PAREN)
        vcp_codes = []
        while not self.check(TokenKind.RIGHT_PAREN):
            vcp_codes.append(self._parse_vcp_code())
        self.expect(TokenKind.RIGHT_PAREN)
        return tuple(vcp_codes)

    def _parse_vcp_code(self):
        code = self._parse_byte()
        values = []
        if self.eat(TokenKind.LEFT_PAREN):
            while not self.check(TokenKind.RIGHT_PAREN):
                values.append(self._parse_byte())
            self.expect(TokenKind.RIGHT_PAREN)
        return VcpCode(code, tuple(values))

    def _parse_byte(self):
        token = self.next()
        if token.kind is not TokenKind.BYTE:
            raise ExpectedValue(token)
        return token.value

    def skip_group(self):
        """
        Consume a parenthesized group whose contents are not decoded.

        Nested parentheses are balanced, so a group such as "model(A (B))"
        is skipped as a whole.
        """
        self.expect(TokenKind.LEFT_PAREN)
        depth = 1
        while depth > 0:
            token = self.next()
            if token.kind is TokenKind.LEFT_PAREN:
                depth += 1
            elif token.kind is TokenKind.RIGHT_PAREN:
                depth -= 1

    def expect(self, kind):
        """Consume the next token, which must be of the given kind."""
        token = self.next()
        if token.kind is not kind:
            raise UnexpectedToken(kind, token)
        return token

    def eat(self, kind):
        """
        Consume the next token if it is of the given kind. Returns whether
        a token was consumed.
        """
        if self.check(kind):
            self._index += 1
            return True
        return False

    def check(self, kind):
        """Return whether the next token is of the given kind."""
        return self._index < len(self._tokens) and self._tokens[self._index].kind is kind

    def next(self):
        if self._index >= len(self._tokens):
            raise EndOfFile()
        token = self._tokens[self._index]
        self._index += 1
        return token


def parse(tokens):
    return Parser(tokens).parse()


def parse_capabilities_string(source):
    """
    Decode the capabilities string reported by a monitor.

    Raises a CapabilitiesError subclass if the string is malformed.

    ## Examples:
    >>> caps = parse_capabilities_string("(prot(monitor)type(lcd)vcp(10 60(11 0F)))")
    >>> caps.vcp
    (VcpCode(code=16, values=()), VcpCode(code=96, values=(17, 15)))
    >>> caps.supported_inputs()
    [<Input.HDMI_1: 17>, <Input.DISPLAYPORT_1: 15>]
    """
    return parse(tokenize(source))
