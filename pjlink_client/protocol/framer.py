# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink line framer.

Splits the raw byte stream received from the projector into CR-terminated
lines, carrying partial lines across chunk boundaries.
"""

from __future__ import annotations

from ..internal_types import *
from ..constants import DEFAULT_ENCODING
from .constants import END_OF_LINE_BYTES

class LineFramer:
    """Reassembles CR-terminated protocol lines from arbitrary byte chunks.

    There is no limit on line length; a projector that never sends a CR
    grows the carry-over buffer without bound.
    """

    encoding: str
    _buffer: bytearray

    def __init__(self, encoding: str=DEFAULT_ENCODING):
        self.encoding = encoding
        self._buffer = bytearray()

    def feed(self, chunk: bytes) -> List[str]:
        """Adds a chunk of received bytes and returns all lines completed by it.

        Lines are returned in arrival order with the terminating CR removed. Any
        trailing partial line is retained for the next call.
        """
        self._buffer.extend(chunk)
        lines: List[str] = []
        offset = 0
        while True:
            i = self._buffer.find(END_OF_LINE_BYTES, offset)
            if i < 0:
                break
            lines.append(bytes(self._buffer[offset:i]).decode(self.encoding, errors='replace'))
            offset = i + len(END_OF_LINE_BYTES)
        if offset > 0:
            del self._buffer[:offset]
        return lines

    def reset(self) -> None:
        """Discards any buffered partial line."""
        self._buffer.clear()

    @property
    def pending(self) -> bytes:
        """The bytes of the current incomplete line."""
        return bytes(self._buffer)

    def __str__(self) -> str:
        return f"LineFramer(pending={self.pending!r})"

    def __repr__(self) -> str:
        return str(self)
