"""
jaxroute - A path-routed streaming JSON parser.
"""

from .binding import FieldBinding, bind
from .config import DEFAULT_CONFIG, TokenizerConfig
from .errors import (
    ArtifactNotFoundError,
    FieldBindingError,
    JaxrouteError,
    JsonSyntaxError,
    MalformedStructureError,
    ParseError,
    RegistrationError,
)
from .handler import ContainerHandler, Handler, TerminalHandler
from .parser import StreamParser, parse_array_of_parsers
from .region import Region, RegionReader
from .registry import PathRegistry
from .sources import ArtifactSource, BytesSource, DirectorySource, ZipSource
from .tokenizer import Tokenizer
from .tokens import Location, Token
from .traversal import (
    assert_start_array,
    assert_start_object,
    assert_start_object_or_array,
    count_array_entries,
    count_object_entries,
    get_region,
    skip_children,
)

__all__ = [
    'StreamParser', 'parse_array_of_parsers',
    'PathRegistry', 'Handler', 'TerminalHandler', 'ContainerHandler',
    'FieldBinding', 'bind',
    'Tokenizer', 'Token', 'Location',
    'Region', 'RegionReader',
    'ArtifactSource', 'BytesSource', 'DirectorySource', 'ZipSource',
    'TokenizerConfig', 'DEFAULT_CONFIG',
    'assert_start_array', 'assert_start_object', 'assert_start_object_or_array',
    'count_array_entries', 'count_object_entries', 'get_region', 'skip_children',
    'JaxrouteError', 'ParseError', 'MalformedStructureError', 'JsonSyntaxError',
    'FieldBindingError', 'RegistrationError', 'ArtifactNotFoundError',
]
__version__ = '0.1.0'
