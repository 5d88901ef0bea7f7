"""Test artifact sources and stream ownership."""

import io
import zipfile

import pytest
from jaxroute import (
    ArtifactNotFoundError,
    BytesSource,
    DirectorySource,
    JsonSyntaxError,
    StreamParser,
    ZipSource,
    bind,
)

SARIF = b'{"version": "2.1.0", "runs": []}'


class VersionParser(StreamParser):
    artifact_suffix = '.sarif'
    fields = [bind('version', str)]

    def finish(self):
        return self.version


class TrackingSource(BytesSource):
    """Remembers the streams it hands out."""

    def __init__(self, artifacts):
        super().__init__(artifacts)
        self.opened = []

    def _open(self, name):
        stream = super()._open(name)
        self.opened.append(stream)
        return stream


def test_directory_source(tmp_path):
    (tmp_path / 'scans').mkdir()
    (tmp_path / 'scans' / 'result.sarif').write_bytes(SARIF)
    (tmp_path / 'notes.txt').write_text('not json')

    source = DirectorySource(tmp_path)

    assert sorted(source.names()) == ['notes.txt', 'scans/result.sarif']
    assert VersionParser().parse(source) == '2.1.0'


def test_zip_source(tmp_path):
    path = tmp_path / 'bundle.zip'
    with zipfile.ZipFile(path, 'w') as archive:
        archive.writestr('README.md', 'readme')
        archive.writestr('out/scan.sarif', SARIF)

    assert VersionParser().parse(ZipSource(path)) == '2.1.0'


def test_first_match_in_sorted_order():
    source = BytesSource({
        'b.sarif': b'{"version": "b"}',
        'a.sarif': b'{"version": "a"}',
    })
    assert VersionParser().parse(source) == 'a'


def test_no_matching_artifact():
    source = BytesSource({'scan.json': SARIF})

    with pytest.raises(ArtifactNotFoundError):
        VersionParser().parse(source)
    with pytest.raises(LookupError):
        VersionParser().parse(source)


def test_stream_closed_after_parse():
    source = TrackingSource({'scan.sarif': SARIF})

    VersionParser().parse(source)

    [stream] = source.opened
    assert stream.closed


def test_stream_closed_after_failed_parse():
    source = TrackingSource({'scan.sarif': b'{"version": '})

    with pytest.raises(JsonSyntaxError):
        VersionParser().parse(source)

    [stream] = source.opened
    assert stream.closed


def test_parse_stream_leaves_caller_stream_open():
    stream = io.BytesIO(SARIF)

    assert VersionParser().parse_stream(stream) == '2.1.0'
    assert not stream.closed
