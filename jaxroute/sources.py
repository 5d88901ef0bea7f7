"""
Sources - Where parsers get their input bytes from.

A source holds named artifacts; a parser asks for the first artifact whose
name passes a filter (usually a suffix check) and reads it as a binary
stream.
"""

import io
import logging
import os
import zipfile
from pathlib import Path
from typing import BinaryIO, Callable, Dict, List, Union

from .errors import ArtifactNotFoundError

logger = logging.getLogger(__name__)

NameFilter = Callable[[str], bool]


def suffix_filter(suffix: str) -> NameFilter:
    """Return a name filter accepting names that end with the suffix."""
    return lambda name: name.endswith(suffix)


class ArtifactSource:
    """
    Base class for artifact sources.

    Subclasses implement names() and _open(); open_stream() picks the first
    matching name in sorted order.
    """

    def names(self) -> List[str]:
        """Return all artifact names."""
        raise NotImplementedError

    def _open(self, name: str) -> BinaryIO:
        raise NotImplementedError

    def open_stream(self, name_filter: NameFilter) -> BinaryIO:
        """Open the first artifact accepted by name_filter."""
        matches = sorted(name for name in self.names() if name_filter(name))
        if not matches:
            raise ArtifactNotFoundError(f"No matching artifact in {self!r}")
        if len(matches) > 1:
            logger.debug("Multiple matching artifacts %s, using %s", matches, matches[0])
        logger.debug("Opening artifact %s", matches[0])
        return self._open(matches[0])


class BytesSource(ArtifactSource):
    """In-memory artifacts, keyed by name."""

    def __init__(self, artifacts: Dict[str, bytes]):
        self._artifacts = dict(artifacts)

    def names(self) -> List[str]:
        return list(self._artifacts)

    def _open(self, name: str) -> BinaryIO:
        return io.BytesIO(self._artifacts[name])

    def __repr__(self) -> str:
        return f"BytesSource({sorted(self._artifacts)})"


class DirectorySource(ArtifactSource):
    """Files below a directory; names are relative and '/' separated."""

    def __init__(self, root: Union[str, os.PathLike]):
        self._root = Path(root)

    def names(self) -> List[str]:
        return [
            path.relative_to(self._root).as_posix()
            for path in self._root.rglob('*')
            if path.is_file()
        ]

    def _open(self, name: str) -> BinaryIO:
        return (self._root / name).open('rb')

    def __repr__(self) -> str:
        return f"DirectorySource({str(self._root)!r})"


class ZipSource(ArtifactSource):
    """Members of a zip archive, such as an uploaded scan bundle."""

    def __init__(self, path: Union[str, os.PathLike]):
        self._path = Path(path)

    def names(self) -> List[str]:
        with zipfile.ZipFile(self._path) as archive:
            return [info.filename for info in archive.infolist() if not info.is_dir()]

    def _open(self, name: str) -> BinaryIO:
        # The member stream keeps the archive file open until it is closed.
        archive = zipfile.ZipFile(self._path)
        try:
            return archive.open(name)
        finally:
            archive.close()

    def __repr__(self) -> str:
        return f"ZipSource({str(self._path)!r})"
