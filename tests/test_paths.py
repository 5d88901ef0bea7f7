"""Test the property path helpers."""

import pytest
from jaxroute.errors import RegistrationError
from jaxroute.paths import (
    join_path,
    normalize_path,
    parent_path,
    path_prefixes,
    segments,
    wildcard_path,
)


@pytest.mark.parametrize("raw,expected", [
    ('/', '/'),
    ('', '/'),
    ('/a/b', '/a/b'),
    ('a/b', '/a/b'),
    ('/a/b/', '/a/b'),
    ('/runs/*/results', '/runs/*/results'),
])
def test_normalize_path(raw, expected):
    assert normalize_path(raw) == expected


def test_normalize_rejects_empty_segment():
    with pytest.raises(RegistrationError):
        normalize_path('/a//b')


def test_join_path():
    """Test joining names and indexes onto parent paths, root included."""
    assert join_path('/', 'a') == '/a'
    assert join_path('/a', 'b') == '/a/b'
    assert join_path('/a', 0) == '/a/0'
    assert join_path('/a', None) == '/a'
    assert join_path('/', None) == '/'
    assert join_path('', None) == '/'


def test_parent_path():
    assert parent_path('/a/b') == '/a'
    assert parent_path('/a') == '/'
    assert parent_path('/') is None


def test_wildcard_path():
    """The wildcard alternative replaces only the last segment."""
    assert wildcard_path('/items/3') == '/items/*'
    assert wildcard_path('/a/b/3') == '/a/b/*'
    assert wildcard_path('/a') == '/*'
    assert wildcard_path('/') is None


def test_segments_and_prefixes():
    assert segments('/') == []
    assert segments('/runs/*/results') == ['runs', '*', 'results']
    assert path_prefixes('/') == ['/']
    assert path_prefixes('/runs/*/results') == ['/', '/runs', '/runs/*', '/runs/*/results']
