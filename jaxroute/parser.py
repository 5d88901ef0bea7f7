"""
Stream Parser - Base class for path-routed JSON parsers.

Subclasses declare which property paths they care about; a single forward
pass over the token stream invokes the matching handlers and skips
everything else without materializing it.

    class RunParser(StreamParser):
        fields = [bind('tool_name', str, path='/tool/driver/name')]

        def add_handlers(self, registry):
            registry.register('/results/*', self._handle_result)

        def _handle_result(self, cursor):
            self.results.append(get_region(cursor))

        def finish(self):
            return self.tool_name

Every intermediate hop (here '/', '/tool', '/tool/driver' and '/results')
gets a ContainerHandler automatically.
"""

import logging
from contextlib import ExitStack
from typing import Any, BinaryIO, Callable, List, Optional, Sequence

from .binding import FieldBinding, add_field_binders
from .config import DEFAULT_CONFIG, TokenizerConfig
from .errors import JsonSyntaxError, RegistrationError
from .handler import ContainerHandler
from .paths import ROOT, join_path
from .region import Region, restrict
from .registry import PathRegistry
from .sources import ArtifactSource, BytesSource, suffix_filter
from .tokenizer import Tokenizer
from .tokens import Token
from .traversal import (
    TRACE,
    assert_start_array,
    assert_start_object,
    skip_children,
)

logger = logging.getLogger(__name__)


class StreamParser:
    """
    Parse JSON documents by dispatching property paths to handlers.

    Handlers are set up on construction by initialize_handlers(). A subclass
    that needs its own state first passes initialize_handlers=False and calls
    initialize_handlers() at the end of its constructor.

    Class attributes:
        artifact_suffix: Name suffix of the artifact parse() reads.
        fields: Declared slots, each filled by a generated field binder.
    """

    artifact_suffix: str = '.json'
    fields: Sequence[FieldBinding] = ()

    def __init__(self, config: TokenizerConfig = DEFAULT_CONFIG,
                 initialize_handlers: bool = True):
        self.config = config
        self.registry = PathRegistry()
        for binding in self.fields:
            if binding.setter is None and not hasattr(self, binding.name):
                setattr(self, binding.name, None)
        if initialize_handlers:
            self.initialize_handlers()

    # ========================================================================
    # HANDLER SETUP
    # ========================================================================

    def initialize_handlers(self) -> None:
        """
        Build the path registry:

        - add_handlers(): explicit handlers from the subclass
        - field binders for every declared slot
        - parent handlers for every intermediate path
        """
        if self.registry.frozen:
            raise RegistrationError("Handlers are already initialized")
        self.add_handlers(self.registry)
        add_field_binders(self.registry, self, self.fields, self.config)
        self.registry.add_parent_handlers(self._create_parent_handler)
        self.registry.freeze()

    def add_handlers(self, registry: PathRegistry) -> None:
        """
        Override to register handlers for property paths, for example
        registry.register('/runs/*/tool', self._handle_tool).
        """
        pass

    def _create_parent_handler(self, path: str) -> ContainerHandler:
        return ContainerHandler(self, path)

    # ========================================================================
    # ENTRY POINTS
    # ========================================================================

    def parse(self, source: ArtifactSource, region: Optional[Region] = None) -> Any:
        """
        Parse the first artifact of source whose name ends with
        artifact_suffix, optionally only the given region of it.

        Returns the result of finish().
        """
        with ExitStack() as stack:
            stream = stack.enter_context(source.open_stream(suffix_filter(self.artifact_suffix)))
            return self.parse_stream(stream, region)

    def parse_stream(self, stream: BinaryIO, region: Optional[Region] = None) -> Any:
        """
        Parse a binary stream owned by the caller.

        With a region, only bytes in [start, end) are visible, and reported
        offsets stay relative to the whole stream. Anything but whitespace
        after the root value is a JsonSyntaxError.
        """
        with ExitStack() as stack:
            content = restrict(stream, region)
            if content is not stream:
                stack.enter_context(content)
            base_offset = region.start if region is not None else 0
            cursor = stack.enter_context(Tokenizer(content, self.config, base_offset))
            cursor.next_token()
            self.assert_parse_start(cursor)
            self.dispatch(cursor, ROOT)
            if cursor.next_token() is not None:
                raise JsonSyntaxError("Unexpected data after root value", cursor.token_location)
            return self.finish()

    def parse_bytes(self, data: bytes, region: Optional[Region] = None) -> Any:
        """Parse an in-memory document."""
        return self.parse(BytesSource({'document' + self.artifact_suffix: data}), region)

    def assert_parse_start(self, cursor: Tokenizer) -> None:
        """
        Check the first token of a document or region. Objects are expected
        by default; override for documents that start with an array.
        """
        assert_start_object(cursor)

    def parse_and_finish(self, cursor: Tokenizer, parent_path: str) -> Any:
        """Dispatch the current value, then call finish()."""
        self.dispatch(cursor, parent_path)
        return self.finish()

    def finish(self) -> Any:
        """Override to act once parsing has completed; the result is returned by parse()."""
        return None

    # ========================================================================
    # DISPATCH
    # ========================================================================

    def dispatch(self, cursor: Tokenizer, parent_path: str) -> None:
        """
        Invoke the handler registered for the current value, or skip it.

        Only value tokens (container starts and scalars) are dispatched. On
        return the cursor is on the last token of the value; recursion into
        children is left to the handlers.
        """
        token = cursor.current_token
        if token is None or not (token.is_start or token.is_scalar):
            return
        current_path = join_path(parent_path, cursor.current_name)
        logger.log(TRACE, "Processing %s", current_path)
        handler = self.registry.resolve(current_path)
        if handler is not None:
            logger.debug("Handling %s", current_path)
            handler.handle(cursor)
        else:
            skip_children(cursor)

    def parse_object_or_array_children(self, cursor: Tokenizer, current_path: str) -> None:
        """Dispatch the children of the current object or array."""
        token = cursor.current_token
        if token is Token.START_OBJECT:
            self.parse_object_properties(cursor, current_path)
        elif token is Token.START_ARRAY:
            self.parse_array_entries(cursor, current_path)

    def parse_object_properties(self, cursor: Tokenizer, current_path: str) -> None:
        """Dispatch each property value of the current object."""
        assert_start_object(cursor)
        self._parse_children(cursor, current_path, Token.END_OBJECT)

    def parse_object_properties_and_finish(self, cursor: Tokenizer, current_path: str) -> Any:
        """Dispatch each property value of the current object, then call finish()."""
        self.parse_object_properties(cursor, current_path)
        return self.finish()

    def parse_array_entries(self, cursor: Tokenizer, current_path: str) -> None:
        """Dispatch each entry of the current array."""
        assert_start_array(cursor)
        self._parse_children(cursor, current_path, Token.END_ARRAY)

    def _parse_children(self, cursor: Tokenizer, current_path: str, end_token: Token) -> None:
        while cursor.next_token_in_container() is not end_token:
            self.dispatch(cursor, current_path)


ParserFactory = Callable[[], StreamParser]


def parse_array_of_parsers(cursor: Tokenizer, parser_factory: ParserFactory) -> List[Any]:
    """
    Parse each object of the array under the cursor with its own parser.

    For every entry a fresh parser comes from parser_factory, walks the
    entry's properties with its own registry (paths relative to the entry)
    and has its finish() called. Returns the finish() results in order.
    Entries that are not objects raise MalformedStructureError.
    """
    assert_start_array(cursor)
    results = []
    while cursor.next_token_in_container() is not Token.END_ARRAY:
        assert_start_object(cursor)
        parser = parser_factory()
        results.append(parser.parse_object_properties_and_finish(cursor, ROOT))
    return results
