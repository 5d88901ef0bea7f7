"""
Traversal - Structural assertions and dispatch-free walks over a cursor.

These helpers never invoke handlers: they check where the cursor is, skip
subtrees, count children, and compute byte regions.
"""

import logging

from .errors import MalformedStructureError
from .region import Region
from .tokenizer import Tokenizer
from .tokens import Token

TRACE = 5
logging.addLevelName(TRACE, 'TRACE')

logger = logging.getLogger(__name__)

# Offsets are byte offsets into UTF-8 input, where both brackets are one byte.
_OPENING_BRACKET_LENGTH = len('['.encode('utf-8'))


# ========================================================================
# ASSERTIONS
# ========================================================================

def assert_start_array(cursor: Tokenizer) -> None:
    """Raise MalformedStructureError unless the cursor is on an array start."""
    if cursor.current_token is not Token.START_ARRAY:
        raise MalformedStructureError("Expected array start", cursor.token_location)


def assert_start_object(cursor: Tokenizer) -> None:
    """Raise MalformedStructureError unless the cursor is on an object start."""
    if cursor.current_token is not Token.START_OBJECT:
        raise MalformedStructureError("Expected object start", cursor.token_location)


def assert_start_object_or_array(cursor: Tokenizer) -> None:
    """Raise MalformedStructureError unless the cursor is on a container start."""
    if cursor.current_token not in (Token.START_OBJECT, Token.START_ARRAY):
        raise MalformedStructureError("Expected object or array start", cursor.token_location)


# ========================================================================
# SKIPPING AND COUNTING
# ========================================================================

def skip_children(cursor: Tokenizer) -> None:
    """If the cursor is on an object or array start, skip to its end."""
    token = cursor.current_token
    if token is not None and token.is_start:
        logger.log(TRACE, "Skipping children")
        cursor.skip_children()


def count_array_entries(cursor: Tokenizer) -> int:
    """
    Count the entries of the array under the cursor without dispatching.

    Leaves the cursor on the array end.
    """
    assert_start_array(cursor)
    result = 0
    while cursor.next_token_in_container() is not Token.END_ARRAY:
        result += 1
        skip_children(cursor)
    return result


def count_object_entries(cursor: Tokenizer) -> int:
    """
    Count the properties of the object under the cursor without dispatching.

    Leaves the cursor on the object end.
    """
    assert_start_object(cursor)
    result = 0
    while cursor.next_token_in_container() is not Token.END_OBJECT:
        # Field name, then its value
        cursor.next_token_in_container()
        result += 1
        skip_children(cursor)
    return result


# ========================================================================
# REGIONS
# ========================================================================

def get_region(cursor: Tokenizer) -> Region:
    """
    Return the byte region of the object or array under the cursor.

    The cursor has already consumed the opening bracket, so the region
    starts one bracket length before the current offset. The subtree is
    skipped and the region ends just past the closing bracket.
    """
    assert_start_object_or_array(cursor)
    start = cursor.current_location.byte_offset - _OPENING_BRACKET_LENGTH
    cursor.skip_children()
    end = cursor.current_location.byte_offset
    region = Region(start, end)
    logger.debug("Computed region %s", region)
    return region
