"""Test the path registry: registration rules, synthesis and lookup."""

import pytest
from jaxroute import (
    ContainerHandler,
    PathRegistry,
    RegistrationError,
    StreamParser,
    TerminalHandler,
    bind,
)
from jaxroute.paths import path_prefixes


def noop(cursor):
    pass


class TestRegistration:
    """Test explicit and generated registrations."""

    def test_callable_is_wrapped(self):
        registry = PathRegistry()
        registry.register('/a', noop)
        assert isinstance(registry.get('/a'), TerminalHandler)

    def test_path_is_normalized(self):
        registry = PathRegistry()
        registry.register('a/b/', noop)
        assert '/a/b' in registry

    def test_duplicate_explicit_registration_rejected(self):
        registry = PathRegistry()
        registry.register('/a', noop)
        with pytest.raises(RegistrationError, match="already registered"):
            registry.register('/a/', noop)

    def test_explicit_handler_wins_over_binder(self):
        registry = PathRegistry()
        explicit = TerminalHandler(noop)
        registry.register('/a', explicit)
        registry.register_binder('/a', TerminalHandler(noop))
        assert registry.get('/a') is explicit

    def test_two_binders_for_one_path_rejected(self):
        registry = PathRegistry()
        registry.register_binder('/a', TerminalHandler(noop))
        with pytest.raises(RegistrationError):
            registry.register_binder('/a', TerminalHandler(noop))

    def test_frozen_registry_rejects_registration(self):
        registry = PathRegistry()
        registry.freeze()
        with pytest.raises(RegistrationError, match="frozen"):
            registry.register('/a', noop)


class TestSynthesis:
    """Test parent handler synthesis."""

    def test_every_ancestor_gets_a_handler(self):
        """After synthesis, every prefix of every registered path has a handler."""
        registry = PathRegistry()
        leaves = ['/runs/*/tool/driver/name', '/runs/*/results/*', '/version']
        for leaf in leaves:
            registry.register(leaf, noop)
        registry.add_parent_handlers(lambda path: ContainerHandler(None, path))

        for leaf in leaves:
            for prefix in path_prefixes(leaf):
                assert prefix in registry, prefix

        assert sorted(registry) == sorted([
            '/', '/runs', '/runs/*', '/runs/*/tool', '/runs/*/tool/driver',
            '/runs/*/tool/driver/name', '/runs/*/results', '/runs/*/results/*',
            '/version',
        ])

    def test_synthesis_keeps_existing_handlers(self):
        registry = PathRegistry()
        explicit = TerminalHandler(noop)
        registry.register('/a', explicit)
        registry.register('/a/b', noop)
        registry.add_parent_handlers(lambda path: ContainerHandler(None, path))

        assert registry.get('/a') is explicit
        assert isinstance(registry.get('/'), ContainerHandler)

    def test_synthesized_handlers_know_their_path(self):
        registry = PathRegistry()
        registry.register('/a/*/b', noop)
        registry.add_parent_handlers(lambda path: ContainerHandler(None, path))
        assert registry.get('/a/*').path == '/a/*'

    def test_parser_synthesizes_binder_ancestors(self):
        """Binders are registered before synthesis, so their parents exist too."""
        class Parser(StreamParser):
            fields = [bind('name', str, path='/tool/driver/name')]

        parser = Parser()
        assert isinstance(parser.registry.get('/tool/driver'), ContainerHandler)
        assert parser.registry.get('/tool/driver').parser is parser
        assert parser.registry.frozen


class TestResolve:
    """Test exact lookup with one-level wildcard fallback."""

    def setup_method(self):
        self.exact = TerminalHandler(noop)
        self.wildcard = TerminalHandler(noop)
        self.registry = PathRegistry()
        self.registry.register('/items/1', self.exact)
        self.registry.register('/items/*', self.wildcard)

    def test_exact_match_wins(self):
        assert self.registry.resolve('/items/1') is self.exact

    def test_wildcard_fallback(self):
        assert self.registry.resolve('/items/7') is self.wildcard

    def test_fallback_is_one_level_only(self):
        assert self.registry.resolve('/items/7/name') is None

    def test_miss(self):
        assert self.registry.resolve('/other') is None
        assert self.registry.resolve('/') is None

    def test_fallback_is_not_cached(self):
        self.registry.resolve('/items/7')
        assert '/items/7' not in self.registry
