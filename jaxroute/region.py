"""
Region - Byte ranges of JSON values and a reader restricted to one range.
"""

import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Region:
    """A [start, end) byte range identifying one JSON value in an artifact."""

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid region [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        return self.end - self.start

    def __len__(self) -> int:
        return self.length

    def slice(self, data: bytes) -> bytes:
        """Return the bytes of this region from the full artifact contents."""
        return data[self.start:self.end]

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"


class RegionReader(io.RawIOBase):
    """
    Read-only binary stream exposing only one region of another stream.

    The wrapped stream is positioned at the region start on first read,
    by seeking when possible and by reading and discarding otherwise.
    Closing the reader does not close the wrapped stream.
    """

    def __init__(self, stream: BinaryIO, region: Region):
        super().__init__()
        self._stream = stream
        self._region = region
        self._remaining = region.length
        self._positioned = False

    @property
    def region(self) -> Region:
        return self._region

    def readable(self) -> bool:
        return True

    def _position(self) -> None:
        self._positioned = True
        start = self._region.start
        if start == 0:
            return
        seekable = getattr(self._stream, 'seekable', None)
        if seekable is not None and seekable():
            self._stream.seek(start)
            return
        logger.debug("Skipping %d bytes of non-seekable stream", start)
        to_skip = start
        while to_skip:
            skipped = self._stream.read(min(to_skip, 65536))
            if not skipped:
                self._remaining = 0
                return
            to_skip -= len(skipped)

    def readinto(self, buffer) -> int:
        if not self._positioned:
            self._position()
        if self._remaining <= 0:
            return 0
        size = min(len(buffer), self._remaining)
        data = self._stream.read(size)
        if not data:
            self._remaining = 0
            return 0
        n = len(data)
        buffer[:n] = data
        self._remaining -= n
        return n


def restrict(stream: BinaryIO, region: Optional[Region]) -> BinaryIO:
    """Return the stream itself, or a reader limited to the given region."""
    if region is None:
        return stream
    return io.BufferedReader(RegionReader(stream, region))
