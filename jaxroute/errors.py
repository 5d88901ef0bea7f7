"""
Errors - Exception hierarchy for path-routed JSON parsing.

A parse either completes or aborts with one of these. Unregistered paths
are never errors; they are skipped.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .tokens import Location


class JaxrouteError(Exception):
    """Base exception for all jaxroute errors."""


class ParseError(JaxrouteError):
    """
    Raised when a document cannot be parsed.

    Carries the location of the offending token when one is known, and
    appends it to the message.
    """

    def __init__(self, message: str, location: Optional['Location'] = None):
        self.message = message
        self.location = location
        if location is not None:
            message = f"{message} at {location}"
        super().__init__(message)

    @property
    def line(self) -> Optional[int]:
        return self.location.line if self.location else None

    @property
    def column(self) -> Optional[int]:
        return self.location.column if self.location else None

    @property
    def byte_offset(self) -> Optional[int]:
        return self.location.byte_offset if self.location else None


class MalformedStructureError(ParseError):
    """Raised when an expected object or array start is missing."""


class JsonSyntaxError(MalformedStructureError):
    """Raised by the lexer for input that is not valid JSON."""


class FieldBindingError(ParseError):
    """Raised when a value cannot be converted to its declared field type."""

    def __init__(self, message: str, path: str, field_name: str,
                 location: Optional['Location'] = None):
        super().__init__(message, location)
        self.path = path
        self.field_name = field_name


class RegistrationError(JaxrouteError, ValueError):
    """Raised for invalid or duplicate handler registrations."""


class ArtifactNotFoundError(JaxrouteError, LookupError):
    """Raised when no artifact in a source matches the requested filter."""
