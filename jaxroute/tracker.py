"""
Tracker - Manages nesting and position state while lexing.

This class tracks:
- Scope stack ({} and [] nesting, with the name each container has in its parent)
- Current field name of each open object and next index of each open array
- Byte offset, line and column of the next input byte
"""

from typing import List, Optional

from .tokens import Location

_NEWLINE = ord('\n')


class Scope:
    """One open container."""

    __slots__ = ('bracket', 'name', 'field_name', 'index')

    def __init__(self, bracket: str, name: Optional[str]):
        self.bracket = bracket
        self.name = name
        self.field_name: Optional[str] = None
        self.index = 0

    def __repr__(self) -> str:
        return f"Scope({self.bracket!r}, name={self.name!r})"


class Tracker:
    """
    Manages all lexing state besides the current lexer state object.

    Offsets start at base_offset so that a tokenizer reading a region of a
    larger artifact reports positions in that artifact.
    """

    def __init__(self, base_offset: int = 0):
        self._scopes: List[Scope] = []
        self._offset = base_offset
        self._line = 1
        self._column = 1

    # ========================================================================
    # SCOPE TRACKING
    # ========================================================================

    @property
    def depth(self) -> int:
        return len(self._scopes)

    @property
    def scopes(self) -> List[Scope]:
        """Get the scope stack (for direct access)."""
        return self._scopes

    def push_scope(self, bracket: str, name: Optional[str]) -> Scope:
        """Push a container ({ or [) onto the stack."""
        scope = Scope(bracket, name)
        self._scopes.append(scope)
        return scope

    def pop_scope(self) -> Scope:
        """Pop and return the innermost container."""
        return self._scopes.pop()

    def peek_bracket(self) -> str:
        """Return the innermost bracket without popping."""
        return self._scopes[-1].bracket if self._scopes else ''

    def in_array(self) -> bool:
        return bool(self._scopes) and self._scopes[-1].bracket == '['

    def in_object(self) -> bool:
        return bool(self._scopes) and self._scopes[-1].bracket == '{'

    def set_field_name(self, field_name: str) -> None:
        """Record the field name whose value comes next in the current object."""
        self._scopes[-1].field_name = field_name

    def claim_value_name(self) -> Optional[str]:
        """
        Return the name of a value starting now.

        Objects give the pending field name, arrays give the next index (as a
        string) and advance it, the root gives None.
        """
        if not self._scopes:
            return None
        scope = self._scopes[-1]
        if scope.bracket == '[':
            name = str(scope.index)
            scope.index += 1
            return name
        return scope.field_name

    # ========================================================================
    # POSITION TRACKING
    # ========================================================================

    def location(self) -> Location:
        """Location of the next byte to be consumed."""
        return Location(self._offset, self._line, self._column)

    def location_after(self) -> Location:
        """Location just past the byte being consumed, on the same line."""
        return Location(self._offset + 1, self._line, self._column + 1)

    def advance(self, byte: int) -> None:
        """Move past one input byte."""
        self._offset += 1
        if byte == _NEWLINE:
            self._line += 1
            self._column = 1
        else:
            self._column += 1

    def __repr__(self) -> str:
        return f"Tracker({self.depth} scopes, {self.location()})"
