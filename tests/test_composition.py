"""Test composing parsers: one child parser per array element."""

import pytest
from jaxroute import (
    MalformedStructureError,
    StreamParser,
    assert_start_array,
    bind,
    parse_array_of_parsers,
)


class ElementParser(StreamParser):
    fields = [bind('a', int)]

    def finish(self):
        return {'a': self.a}


class RootArrayParser(StreamParser):
    """Hands every element of a root array to a fresh child parser."""

    def __init__(self, factory, **kwargs):
        self.factory = factory
        self.results = None
        super().__init__(**kwargs)

    def assert_parse_start(self, cursor):
        assert_start_array(cursor)

    def add_handlers(self, registry):
        registry.register('/', self._handle_root)

    def _handle_root(self, cursor):
        self.results = parse_array_of_parsers(cursor, self.factory)

    def finish(self):
        return self.results


def test_one_parser_per_element():
    created = []

    def factory():
        parser = ElementParser()
        created.append(parser)
        return parser

    results = RootArrayParser(factory).parse_bytes(b'[{"a": 1}, {"a": 2, "b": [3]}]')

    assert results == [{'a': 1}, {'a': 2}]
    assert len(created) == 2
    assert created[0] is not created[1]


def test_empty_array():
    assert RootArrayParser(ElementParser).parse_bytes(b'[]') == []


def test_non_object_element_is_rejected():
    """The error points at the offending element."""
    data = b'[{"a": 1}, 7]'

    with pytest.raises(MalformedStructureError, match="Expected object start") as excinfo:
        RootArrayParser(ElementParser).parse_bytes(data)

    assert excinfo.value.byte_offset == data.index(b'7')


def test_element_paths_are_relative_to_the_element():
    """Child parsers register paths as if each element were a document."""

    class ResultParser(StreamParser):
        fields = [
            bind('rule', str, path='/rule/id'),
            bind('line', int, path='/location/region/startLine'),
        ]

        def finish(self):
            return (self.rule, self.line)

    class RunParser(StreamParser):
        def __init__(self):
            self.results = []
            super().__init__()

        def add_handlers(self, registry):
            registry.register('/runs/*/results', self._handle_results)

        def _handle_results(self, cursor):
            self.results.extend(parse_array_of_parsers(cursor, ResultParser))

        def finish(self):
            return self.results

    data = b'''{
        "runs": [
            {"results": [
                {"rule": {"id": "R1"}, "location": {"region": {"startLine": 4}}},
                {"rule": {"id": "R2"}, "location": {"region": {"startLine": 9}}}
            ]},
            {"results": [{"rule": {"id": "R3"}, "location": {"region": {"startLine": 1}}}]}
        ]
    }'''

    assert RunParser().parse_bytes(data) == [('R1', 4), ('R2', 9), ('R3', 1)]


def test_missing_fields_stay_none():
    results = RootArrayParser(ElementParser).parse_bytes(b'[{"b": 1}]')
    assert results == [{'a': None}]
