"""
Binding - Field binders generated from declared (path, type, setter) slots.

A parser declares the slots it wants filled:

    class RunParser(StreamParser):
        fields = [
            bind('tool_name', str, path='/tool/driver/name'),
            bind('tool_driver_version', str),
        ]

Without an explicit path, each '_' in the name reads as '/', so
'tool_driver_version' binds '/tool/driver/version'.

Each slot becomes a handler that reads the value at its path, converts it
to the declared type with pydantic, and stores it on the parser.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Iterable, List, Optional, TYPE_CHECKING

from pydantic import BaseModel, TypeAdapter, ValidationError

from .config import DEFAULT_CONFIG, TokenizerConfig
from .errors import FieldBindingError
from .handler import Handler
from .paths import normalize_path
from .tokenizer import Tokenizer

if TYPE_CHECKING:
    from .registry import PathRegistry

logger = logging.getLogger(__name__)

Setter = Callable[[Any, Any], None]


@dataclass(frozen=True)
class FieldBinding:
    """
    One declared slot.

    Attributes:
        name: Attribute written on the target object.
        type: Type the value is converted to; Any keeps plain JSON data.
        path: Property path of the value. Defaults to the name with each
            '_' replaced by '/'.
        setter: Called as setter(target, value); defaults to setattr.
    """

    name: str
    type: Any = Any
    path: Optional[str] = None
    setter: Optional[Setter] = None

    @property
    def target_path(self) -> str:
        if self.path:
            return normalize_path(self.path)
        return normalize_path('/' + self.name.replace('_', '/'))

    def assign(self, target: Any, value: Any) -> None:
        if self.setter is not None:
            self.setter(target, value)
        else:
            setattr(target, self.name, value)


def bind(name: str, type_: Any = Any, path: Optional[str] = None,
         setter: Optional[Setter] = None) -> FieldBinding:
    """Declare a slot bound to the value at path (default derived from name)."""
    return FieldBinding(name, type_, path, setter)


@lru_cache(maxsize=None)
def _cached_type_adapter(target_type: Any) -> TypeAdapter:
    return TypeAdapter(target_type)


def type_adapter(target_type: Any) -> TypeAdapter:
    """Return a TypeAdapter for target_type, cached when the type is hashable."""
    try:
        hash(target_type)
    except TypeError:
        # e.g. Annotated[...] with dict metadata
        return TypeAdapter(target_type)
    return _cached_type_adapter(target_type)


def unknown_properties(value: Any, target_type: Any) -> List[str]:
    """Return object keys a pydantic model type does not declare."""
    if not (isinstance(value, dict) and isinstance(target_type, type)
            and issubclass(target_type, BaseModel)):
        return []
    known = set()
    for field_name, info in target_type.model_fields.items():
        known.add(field_name)
        if info.alias:
            known.add(info.alias)
    return sorted(key for key in value if key not in known)


def convert(value: Any, target_type: Any, config: TokenizerConfig = DEFAULT_CONFIG) -> Any:
    """
    Convert plain JSON data to target_type.

    Raises pydantic.ValidationError when the value does not fit, and
    ValueError for undeclared model properties when the config does not
    tolerate them.
    """
    if target_type is Any:
        return value
    if not config.ignore_unknown_properties:
        unknown = unknown_properties(value, target_type)
        if unknown:
            raise ValueError(f"Unknown properties {unknown} for {target_type.__name__}")
    return type_adapter(target_type).validate_python(value)


class FieldBinderHandler(Handler):
    """Reads the value under the cursor into one slot of a target object."""

    def __init__(self, binding: FieldBinding, target: Any,
                 config: TokenizerConfig = DEFAULT_CONFIG):
        self.binding = binding
        self.target = target
        self.config = config

    def handle(self, cursor: Tokenizer) -> None:
        location = cursor.token_location
        value = cursor.read_value()
        try:
            converted = convert(value, self.binding.type, self.config)
        except (ValidationError, ValueError) as e:
            raise FieldBindingError(
                f"Cannot bind value at {self.binding.target_path} to field "
                f"{self.binding.name!r} of type {_type_name(self.binding.type)}",
                self.binding.target_path, self.binding.name, location) from e
        self.binding.assign(self.target, converted)

    def __repr__(self) -> str:
        return f"FieldBinderHandler({self.binding.name!r}, {self.binding.target_path!r})"


def _type_name(target_type: Any) -> str:
    return getattr(target_type, '__name__', None) or repr(target_type)


def add_field_binders(registry: 'PathRegistry', target: Any,
                      bindings: Iterable[FieldBinding],
                      config: TokenizerConfig = DEFAULT_CONFIG) -> None:
    """Register a binder for every declared slot of target."""
    for binding in bindings:
        logger.debug("Adding property handler for property path %s", binding.target_path)
        registry.register_binder(binding.target_path,
                                 FieldBinderHandler(binding, target, config))
