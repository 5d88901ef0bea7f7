"""
Lexer State Classes - Each state handles bytes and determines transitions.

The lexer works on raw UTF-8 bytes so that every emitted token carries
byte-exact offsets. String contents are collected undecoded and handed to
the json module once the closing quote is seen.
"""

import json as json_module
import re
from typing import TYPE_CHECKING

from .errors import JsonSyntaxError
from .tokens import Token

if TYPE_CHECKING:
    from .lexer import Lexer


WHITESPACE = b' \t\n\r'
DIGITS = b'0123456789'
NUMBER_CHARS = b'0123456789+-.eE'
HEX_DIGITS = b'0123456789abcdefABCDEF'
SIMPLE_ESCAPES = b'"\\/bfnrt'

OPEN_BRACE = ord('{')
CLOSE_BRACE = ord('}')
OPEN_BRACKET = ord('[')
CLOSE_BRACKET = ord(']')
QUOTE = ord('"')
BACKSLASH = ord('\\')
COLON = ord(':')
COMMA = ord(',')
MINUS = ord('-')
UTF8_BOM = b'\xef\xbb\xbf'

_NUMBER_RE = re.compile(rb'-?(?:0|[1-9][0-9]*)(\.[0-9]+)?([eE][+-]?[0-9]+)?\Z')
_LITERALS = {
    b'true': (Token.VALUE_TRUE, True),
    b'false': (Token.VALUE_FALSE, False),
    b'null': (Token.VALUE_NULL, None),
}


def describe(byte: int) -> str:
    """Render a byte for error messages."""
    if 0x20 <= byte < 0x7f:
        return repr(chr(byte))
    return f"0x{byte:02x}"


# ========================================================================
# SHARED HELPER FUNCTIONS
# ========================================================================

def open_container(lexer: 'Lexer', bracket: int) -> None:
    """Handle { or [ - used by every state that accepts a value."""
    tracker = lexer.tracker
    if tracker.depth >= lexer.config.max_depth:
        raise JsonSyntaxError(
            f"Maximum nesting depth of {lexer.config.max_depth} exceeded",
            tracker.location())

    name = tracker.claim_value_name()
    start = tracker.location()
    if bracket == OPEN_BRACE:
        lexer.emit(Token.START_OBJECT, name, '{', None, start, tracker.location_after())
        tracker.push_scope('{', name)
        lexer._transition(ObjectStartState(lexer))
    else:
        lexer.emit(Token.START_ARRAY, name, '[', None, start, tracker.location_after())
        tracker.push_scope('[', name)
        lexer._transition(ArrayStartState(lexer))


def close_container(lexer: 'Lexer', bracket: int) -> None:
    """Handle } or ] - used by multiple states."""
    tracker = lexer.tracker
    expected = '{' if bracket == CLOSE_BRACE else '['
    if tracker.peek_bracket() != expected:
        raise JsonSyntaxError(f"Unexpected {describe(bracket)}", tracker.location())

    scope = tracker.pop_scope()
    token = Token.END_OBJECT if bracket == CLOSE_BRACE else Token.END_ARRAY
    lexer.emit(token, scope.name, chr(bracket), None,
               tracker.location(), tracker.location_after())
    lexer._transition(AfterValueState(lexer))


def start_value(lexer: 'Lexer', byte: int) -> None:
    """Begin whatever value starts with the given byte."""
    if byte == OPEN_BRACE or byte == OPEN_BRACKET:
        open_container(lexer, byte)
    elif byte == QUOTE:
        lexer.begin_value()
        lexer._transition(ValueStringState(lexer))
    elif byte == MINUS or byte in DIGITS:
        lexer.begin_value()
        lexer.buffer.append(byte)
        lexer._transition(NumberState(lexer))
    elif byte in b'tfn':
        lexer.begin_value()
        lexer.buffer.append(byte)
        lexer._transition(LiteralState(lexer))
    else:
        raise JsonSyntaxError(f"Unexpected {describe(byte)}, expected a value",
                              lexer.tracker.location())


def decode_string(lexer: 'Lexer') -> str:
    """Decode the buffered string contents, escapes included."""
    raw = bytes(lexer.buffer)
    try:
        return json_module.loads(b'"' + raw + b'"')
    except ValueError as e:
        raise JsonSyntaxError(f"Invalid string: {e}", lexer.token_start) from e


# ========================================================================
# BASE STATE CLASS
# ========================================================================

class LexerState:
    """Base class for lexer states."""

    def __init__(self, lexer: 'Lexer'):
        self.lexer = lexer
        self.tracker = lexer.tracker

    def handle(self, byte: int) -> None:
        """Handle a byte. Subclasses must implement."""
        raise NotImplementedError

    def finish(self) -> None:
        """Handle end of input."""
        raise JsonSyntaxError("Unexpected end of input", self.tracker.location())


# ========================================================================
# CONCRETE STATE CLASSES
# ========================================================================

class RootState(LexerState):
    """
    Before the root value.

    A UTF-8 byte order mark at the very start is skipped; its bytes still
    count towards offsets.
    """

    def __init__(self, lexer: 'Lexer'):
        super().__init__(lexer)
        self.bom_matched = 0
        self.started = False

    def handle(self, byte: int) -> None:
        if not self.started:
            if byte == UTF8_BOM[self.bom_matched]:
                self.bom_matched += 1
                self.started = self.bom_matched == len(UTF8_BOM)
                return
            self._check_bom()
            self.started = True
        if byte in WHITESPACE:
            return
        start_value(self.lexer, byte)

    def _check_bom(self) -> None:
        if self.bom_matched:
            raise JsonSyntaxError("Incomplete byte order mark", self.tracker.location())

    def finish(self) -> None:
        # Empty input
        if not self.started:
            self._check_bom()


class ValueState(LexerState):
    """Expecting a value: after a colon or a comma in an array."""

    def handle(self, byte: int) -> None:
        if byte in WHITESPACE:
            return
        start_value(self.lexer, byte)


class ArrayStartState(ValueState):
    """Just opened an array, expecting a value or end."""

    def handle(self, byte: int) -> None:
        if byte == CLOSE_BRACKET:
            close_container(self.lexer, byte)
        else:
            super().handle(byte)


class ObjectStartState(LexerState):
    """Just opened an object, expecting a field name or end."""

    def handle(self, byte: int) -> None:
        if byte in WHITESPACE:
            return
        if byte == QUOTE:
            self._handle_field_start()
        elif byte == CLOSE_BRACE:
            close_container(self.lexer, byte)
        else:
            raise JsonSyntaxError(f"Unexpected {describe(byte)}, expected a field name",
                                  self.tracker.location())

    def _handle_field_start(self) -> None:
        self.lexer.begin_token()
        self.lexer._transition(FieldNameState(self.lexer))


class MemberState(ObjectStartState):
    """After a comma in an object, expecting a field name."""

    def handle(self, byte: int) -> None:
        if byte == CLOSE_BRACE:
            raise JsonSyntaxError("Unexpected '}' after ','", self.tracker.location())
        super().handle(byte)


class FieldNameState(LexerState):
    """Parsing a field name (before colon)."""

    def handle(self, byte: int) -> None:
        if byte == BACKSLASH:
            self._handle_escape(byte)
        elif byte == QUOTE:
            self._handle_end_quote()
        else:
            self.lexer.buffer.append(byte)

    def _handle_escape(self, byte: int) -> None:
        self.lexer.buffer.append(byte)
        self.lexer._transition(EscapeState(self.lexer, self))

    def _handle_end_quote(self) -> None:
        name = decode_string(self.lexer)
        self.tracker.set_field_name(name)
        self.lexer.emit(Token.FIELD_NAME, name, name, name,
                        self.lexer.token_start, self.tracker.location_after())
        self.lexer._transition(AfterFieldNameState(self.lexer))


class AfterFieldNameState(LexerState):
    """Just finished field name, expecting colon."""

    def handle(self, byte: int) -> None:
        if byte in WHITESPACE:
            return
        if byte == COLON:
            self.lexer._transition(ValueState(self.lexer))
        else:
            raise JsonSyntaxError(f"Unexpected {describe(byte)}, expected ':'",
                                  self.tracker.location())


class ValueStringState(FieldNameState):
    """Inside a string value."""

    def _handle_end_quote(self) -> None:
        value = decode_string(self.lexer)
        self.lexer.emit(Token.VALUE_STRING, self.lexer.value_name, value, value,
                        self.lexer.token_start, self.tracker.location_after())
        self.lexer._transition(AfterValueState(self.lexer))


class EscapeState(LexerState):
    """Processing escape sequence \\X."""

    def __init__(self, lexer: 'Lexer', source: LexerState):
        super().__init__(lexer)
        self.source = source

    def handle(self, byte: int) -> None:
        if byte == ord('u'):
            self.lexer.buffer.append(byte)
            self.lexer._transition(UnicodeEscapeState(self.lexer, self.source))
        elif byte in SIMPLE_ESCAPES:
            self.lexer.buffer.append(byte)
            self.lexer._transition(self.source)
        else:
            raise JsonSyntaxError(f"Invalid escape sequence \\{chr(byte)}",
                                  self.tracker.location())


class UnicodeEscapeState(LexerState):
    """Processing unicode escape \\uXXXX."""

    def __init__(self, lexer: 'Lexer', source: LexerState):
        super().__init__(lexer)
        self.source = source
        self.remaining = 4

    def handle(self, byte: int) -> None:
        if byte not in HEX_DIGITS:
            raise JsonSyntaxError(f"Invalid unicode escape digit {describe(byte)}",
                                  self.tracker.location())
        self.lexer.buffer.append(byte)
        self.remaining -= 1
        if self.remaining == 0:
            self.lexer._transition(self.source)


class NumberState(LexerState):
    """Parsing a number; ends at the first byte that cannot belong to it."""

    def handle(self, byte: int) -> None:
        if byte in NUMBER_CHARS:
            self.lexer.buffer.append(byte)
            return
        self._emit()
        self.lexer.state.handle(byte)

    def finish(self) -> None:
        self._emit()
        self.lexer.state.finish()

    def _emit(self) -> None:
        raw = bytes(self.lexer.buffer)
        match = _NUMBER_RE.match(raw)
        if match is None:
            raise JsonSyntaxError(f"Invalid number {raw.decode('ascii')!r}",
                                  self.lexer.token_start)
        text = raw.decode('ascii')
        if match.group(1) or match.group(2):
            token, value = Token.VALUE_NUMBER_FLOAT, float(text)
        else:
            token, value = Token.VALUE_NUMBER_INT, int(text)
        self.lexer.emit(token, self.lexer.value_name, text, value,
                        self.lexer.token_start, self.tracker.location())
        self.lexer._transition(AfterValueState(self.lexer))


class LiteralState(NumberState):
    """Parsing true, false or null."""

    def handle(self, byte: int) -> None:
        if ord('a') <= byte <= ord('z'):
            self.lexer.buffer.append(byte)
            return
        self._emit()
        self.lexer.state.handle(byte)

    def _emit(self) -> None:
        raw = bytes(self.lexer.buffer)
        if raw not in _LITERALS:
            raise JsonSyntaxError(f"Invalid literal {raw.decode('ascii', 'replace')!r}",
                                  self.lexer.token_start)
        token, value = _LITERALS[raw]
        self.lexer.emit(token, self.lexer.value_name, raw.decode('ascii'), value,
                        self.lexer.token_start, self.tracker.location())
        self.lexer._transition(AfterValueState(self.lexer))


class AfterValueState(LexerState):
    """After a complete value, expecting a separator or end."""

    def handle(self, byte: int) -> None:
        if byte in WHITESPACE:
            return
        if not self.tracker.depth:
            raise JsonSyntaxError(f"Unexpected {describe(byte)} after root value",
                                  self.tracker.location())
        if byte == COMMA:
            self._handle_comma()
        elif byte == CLOSE_BRACE or byte == CLOSE_BRACKET:
            close_container(self.lexer, byte)
        else:
            raise JsonSyntaxError(f"Unexpected {describe(byte)}, expected ',' or end",
                                  self.tracker.location())

    def _handle_comma(self) -> None:
        if self.tracker.in_array():
            self.lexer._transition(ValueState(self.lexer))
        else:
            self.lexer._transition(MemberState(self.lexer))

    def finish(self) -> None:
        if self.tracker.depth:
            super().finish()
