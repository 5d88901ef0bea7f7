"""
Tokenizer - Pull-style token cursor over a binary stream.

The cursor only moves forward. It reads the stream in chunks and feeds the
lexer one byte at a time until a token is available, so locations always
describe the token under the cursor and never the lookahead.
"""

import logging
from typing import Any, BinaryIO, Optional

from .config import DEFAULT_CONFIG, TokenizerConfig
from .errors import JsonSyntaxError, MalformedStructureError
from .lexer import Lexer
from .tokens import Location, Token, TokenEvent

logger = logging.getLogger(__name__)


class Tokenizer:
    """
    Forward-only JSON token cursor.

    Args:
        stream: Binary stream holding UTF-8 JSON.
        config: Settings; the stream is only closed on close() when
            config.auto_close_source is set.
        base_offset: Byte offset of the first stream byte within the
            artifact, added to every reported offset.
    """

    def __init__(self, stream: BinaryIO, config: TokenizerConfig = DEFAULT_CONFIG,
                 base_offset: int = 0):
        self._stream = stream
        self._config = config
        self._lexer = Lexer(config, base_offset)
        self._chunk = b''
        self._pos = 0
        self._eof = False
        self._event: Optional[TokenEvent] = None
        self._closed = False

    @property
    def config(self) -> TokenizerConfig:
        return self._config

    # ========================================================================
    # CURSOR STATE
    # ========================================================================

    @property
    def current_token(self) -> Optional[Token]:
        """Token under the cursor, None before the first and after the last."""
        return self._event.token if self._event else None

    @property
    def current_name(self) -> Optional[str]:
        """
        Name of the current value within its parent.

        Field name inside objects, decimal index inside arrays, None for the
        root value. Container end tokens report the container's own name.
        """
        return self._event.name if self._event else None

    @property
    def text(self) -> Optional[str]:
        """Text of the current token; strings and names are decoded."""
        return self._event.text if self._event else None

    @property
    def value(self) -> Any:
        """Decoded scalar value of the current token."""
        return self._event.value if self._event else None

    @property
    def token_location(self) -> Location:
        """Location of the first byte of the current token."""
        if self._event:
            return self._event.start
        return self._lexer.tracker.location()

    @property
    def current_location(self) -> Location:
        """Location just past the last byte of the current token."""
        if self._event:
            return self._event.end
        return self._lexer.tracker.location()

    # ========================================================================
    # MOVEMENT
    # ========================================================================

    def next_token(self) -> Optional[Token]:
        """Advance to the next token and return it, or None at end of input."""
        pending = self._lexer.pending
        while not pending:
            if self._pos >= len(self._chunk):
                if self._eof:
                    self._event = None
                    return None
                self._fill()
                continue
            byte = self._chunk[self._pos]
            self._pos += 1
            self._lexer.feed_byte(byte)
        self._event = pending.popleft()
        return self._event.token

    def _fill(self) -> None:
        self._chunk = self._stream.read(self._config.chunk_size) or b''
        self._pos = 0
        if not self._chunk:
            self._eof = True
            self._lexer.finish()

    def next_token_in_container(self) -> Token:
        """Like next_token(), for callers inside a container: end of input is an error."""
        token = self.next_token()
        if token is None:
            raise JsonSyntaxError("Unexpected end of input", self.current_location)
        return token

    def skip_children(self) -> None:
        """
        If the cursor is on an object or array start, move it to the
        matching end token. Otherwise do nothing.
        """
        if self.current_token is None or not self.current_token.is_start:
            return
        depth = 1
        while depth:
            token = self.next_token_in_container()
            if token.is_start:
                depth += 1
            elif token.is_end:
                depth -= 1

    def read_value(self) -> Any:
        """
        Materialize the value under the cursor as plain Python data.

        Leaves the cursor on the last token of the value.
        """
        token = self.current_token
        if token is Token.START_OBJECT:
            result = {}
            while self.next_token_in_container() is not Token.END_OBJECT:
                name = self.text
                self.next_token_in_container()
                result[name] = self.read_value()
            return result
        if token is Token.START_ARRAY:
            items = []
            while self.next_token_in_container() is not Token.END_ARRAY:
                items.append(self.read_value())
            return items
        if token is not None and token.is_scalar:
            return self.value
        raise MalformedStructureError("Expected a value", self.token_location)

    # ========================================================================
    # RESOURCES
    # ========================================================================

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._config.auto_close_source:
            logger.debug("Closing source stream")
            self._stream.close()

    def __enter__(self) -> 'Tokenizer':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Tokenizer({self.current_token}, {self.current_location})"
