"""
Handlers - What runs when the dispatcher reaches a registered path.

A handler is invoked with the cursor on the first token of a value and
must leave it on the last token of that value.
"""

from typing import Callable, TYPE_CHECKING

from .tokenizer import Tokenizer
from .tokens import Location, Token

if TYPE_CHECKING:
    from .parser import StreamParser


class Handler:
    """
    Base handler class.
    Subclasses override handle() to consume the value under the cursor.
    """

    def handle(self, cursor: Tokenizer) -> None:
        """Consume the value under the cursor."""
        raise NotImplementedError


class TerminalHandler(Handler):
    """
    Wraps a callback that consumes a scalar or a whole subtree.

    If the callback returns while the cursor is still on the container start
    it was given, the container is skipped.
    """

    def __init__(self, callback: Callable[[Tokenizer], None]):
        self.callback = callback

    def handle(self, cursor: Tokenizer) -> None:
        token = cursor.current_token
        start: Location = cursor.token_location
        self.callback(cursor)
        if token.is_start and cursor.current_token is token and cursor.token_location == start:
            cursor.skip_children()

    def __repr__(self) -> str:
        return f"TerminalHandler({getattr(self.callback, '__name__', self.callback)!r})"


class ContainerHandler(Handler):
    """
    Recurses into the children of an object or array.

    Children are dispatched through the owning parser with this handler's
    path as their parent path. Scalars are left alone.
    """

    def __init__(self, parser: 'StreamParser', path: str):
        self.parser = parser
        self.path = path

    def handle(self, cursor: Tokenizer) -> None:
        if cursor.current_token in (Token.START_OBJECT, Token.START_ARRAY):
            self.parser.parse_object_or_array_children(cursor, self.path)

    def __repr__(self) -> str:
        return f"ContainerHandler({self.path!r})"
