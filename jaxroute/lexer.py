"""
Lexer - Incremental byte-level JSON lexer using the state machine pattern.

Bytes are fed one at a time (or in chunks); complete tokens are queued as
TokenEvent records carrying their start and end locations.
"""

from collections import deque
from typing import Deque, Optional

from .config import DEFAULT_CONFIG, TokenizerConfig
from .states import LexerState, RootState
from .tokens import Location, Token, TokenEvent
from .tracker import Tracker


class Lexer:
    """
    Lex JSON incrementally using an explicit state machine.

    Each state is an object with a handle() method that processes one byte
    and determines state transitions.
    """

    def __init__(self, config: TokenizerConfig = DEFAULT_CONFIG, base_offset: int = 0):
        self.config = config
        self.tracker = Tracker(base_offset)
        self.pending: Deque[TokenEvent] = deque()

        # Token under construction
        self.buffer = bytearray()
        self.token_start: Optional[Location] = None
        self.value_name: Optional[str] = None

        self._finished = False
        self._state: LexerState = RootState(self)

    @property
    def state(self) -> LexerState:
        """Current lexer state object."""
        return self._state

    @property
    def finished(self) -> bool:
        return self._finished

    # ========================================================================
    # CORE LEXING METHODS
    # ========================================================================

    def _transition(self, new_state: LexerState) -> None:
        """Transition to a new state."""
        self._state = new_state

    def begin_token(self) -> None:
        """Mark the current byte as the first byte of a token."""
        self.buffer.clear()
        self.token_start = self.tracker.location()

    def begin_value(self) -> None:
        """Mark the start of a scalar value and claim its name."""
        self.begin_token()
        self.value_name = self.tracker.claim_value_name()

    def emit(self, token: Token, name, text: str, value,
             start: Location, end: Location) -> None:
        self.pending.append(TokenEvent(token, name, text, value, start, end))

    def feed_byte(self, byte: int) -> None:
        """Lex one byte."""
        self._state.handle(byte)
        self.tracker.advance(byte)

    def feed(self, data: bytes) -> None:
        """Lex a chunk of bytes."""
        for byte in data:
            self.feed_byte(byte)

    def finish(self) -> None:
        """Signal end of input, flushing a trailing number or literal."""
        if not self._finished:
            self._finished = True
            self._state.finish()
