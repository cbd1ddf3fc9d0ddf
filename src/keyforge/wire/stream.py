"""Byte buffer cursor used by the wire codec."""
from __future__ import annotations

from ..exceptions import DecodeError


class BinaryStream:
    """Cursor over a byte buffer with independent read and write positions.

    Reads consume from the front of the buffer, writes always append. A stream
    is created for one parse or serialize call and then discarded.
    """

    __slots__ = ("_buffer", "_read_pos")

    def __init__(self, data: bytes | bytearray | memoryview = b"") -> None:
        self._buffer = bytearray(data)
        self._read_pos = 0

    @property
    def read_position(self) -> int:
        return self._read_pos

    @property
    def write_position(self) -> int:
        return len(self._buffer)

    @property
    def remaining(self) -> int:
        return len(self._buffer) - self._read_pos

    def at_end(self) -> bool:
        return self._read_pos >= len(self._buffer)

    def read(self, size: int) -> bytes:
        if size < 0:
            raise DecodeError(f"Negative read length: {size}")
        if size > self.remaining:
            raise DecodeError(
                f"Length mismatch: need {size} bytes, {self.remaining} remaining"
            )
        start = self._read_pos
        self._read_pos += size
        return bytes(self._buffer[start : self._read_pos])

    def read_rest(self) -> bytes:
        return self.read(self.remaining)

    def peek(self, size: int) -> bytes:
        if size > self.remaining:
            raise DecodeError(
                f"Length mismatch: need {size} bytes, {self.remaining} remaining"
            )
        return bytes(self._buffer[self._read_pos : self._read_pos + size])

    def write(self, data: bytes | bytearray | memoryview) -> int:
        self._buffer.extend(data)
        return len(data)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def unread(self) -> bytes:
        """Bytes that have not been consumed yet, without moving the cursor."""
        return bytes(self._buffer[self._read_pos :])

    def __len__(self) -> int:
        return len(self._buffer)


__all__ = ["BinaryStream"]
