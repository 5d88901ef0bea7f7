"""
Path Registry - Maps normalized property paths to handlers.

Built once per parser from explicit registrations, generated field binders
and synthesized parent handlers, then frozen for the lifetime of the parser.
"""

import logging
from typing import Callable, Dict, Iterator, Optional, Set, Union

from .errors import RegistrationError
from .handler import Handler, TerminalHandler
from .paths import normalize_path, path_prefixes, wildcard_path
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)


class PathRegistry:
    """
    Path to handler mapping with parent synthesis and wildcard lookup.

    Explicit registrations and generated binders are tracked separately so
    that an explicit handler wins over a binder for the same path.
    """

    def __init__(self):
        self._handlers: Dict[str, Handler] = {}
        self._explicit: Set[str] = set()
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Reject any further registration."""
        self._frozen = True

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RegistrationError("Registry is frozen; register handlers before parsing")

    # ========================================================================
    # REGISTRATION
    # ========================================================================

    def register(self, path: str, handler: Union[Handler, Callable[[Tokenizer], None]]) -> None:
        """
        Bind a handler to an exact path. Duplicates are rejected.

        A plain callable is wrapped in a TerminalHandler.
        """
        self._check_mutable()
        path = normalize_path(path)
        if not isinstance(handler, Handler):
            handler = TerminalHandler(handler)
        if path in self._handlers:
            raise RegistrationError(f"A handler is already registered for {path}")
        logger.debug("Adding handler for %s", path)
        self._handlers[path] = handler
        self._explicit.add(path)

    def register_binder(self, path: str, handler: Handler) -> None:
        """
        Bind a generated field binder to a path.

        An explicit handler for the same path takes precedence; the binder is
        then dropped. Two binders for one path are rejected.
        """
        self._check_mutable()
        path = normalize_path(path)
        if path in self._explicit:
            logger.debug("Explicit handler for %s overrides field binder", path)
            return
        if path in self._handlers:
            raise RegistrationError(f"More than one field is bound to {path}")
        self._handlers[path] = handler

    def add_parent_handlers(self, factory: Callable[[str], Handler]) -> None:
        """
        Give every ancestor of every registered path a handler.

        For each prefix without a handler, factory(prefix) is registered;
        it is expected to recurse into the prefix's children.
        """
        self._check_mutable()
        for key in list(self._handlers):
            logger.debug("Adding parent handlers for %s", key)
            for prefix in path_prefixes(key)[:-1]:
                if prefix not in self._handlers:
                    logger.debug("Adding parent handler for %s", prefix)
                    self._handlers[prefix] = factory(prefix)

    # ========================================================================
    # LOOKUP
    # ========================================================================

    def get(self, path: str) -> Optional[Handler]:
        """Exact lookup."""
        return self._handlers.get(path)

    def resolve(self, path: str) -> Optional[Handler]:
        """
        Exact lookup, then one level of wildcard fallback.

        '/a/b/3' falls back to '/a/b/*' but never to '/a/*/3' or '/*/b/3'.
        """
        handler = self._handlers.get(path)
        if handler is None:
            fallback = wildcard_path(path)
            if fallback is not None:
                handler = self._handlers.get(fallback)
        return handler

    def __contains__(self, path: str) -> bool:
        return path in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __repr__(self) -> str:
        return f"PathRegistry({len(self._handlers)} paths, frozen={self._frozen})"
