"""RFC 4251 primitive field codec.

Every decoder returns a :class:`Decoded` pair of ``(value, consumed)`` and every
encoder returns the number of bytes written, so composite decoders can account
for the exact size of what they parsed.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Sequence, TypeVar

from ..exceptions import DecodeError
from .stream import BinaryStream

T = TypeVar("T")

UINT32_MAX = 2**32 - 1
UINT64_MAX = 2**64 - 1
# 16384-bit magnitude plus one sign byte.
MAX_MPINT_BYTES = 2049


class FieldType(str, Enum):
    BYTE = "byte"
    BOOLEAN = "boolean"
    UINT32 = "uint32"
    UINT64 = "uint64"
    STRING = "string"
    BUFFER = "buffer"
    NAME_LIST = "name-list"
    MPINT = "mpint"


@dataclass(frozen=True, slots=True)
class Decoded(Generic[T]):
    value: T
    consumed: int


def mpint_bytes(value: int) -> bytes:
    """Minimal two's-complement big-endian payload of an mpint."""
    if value == 0:
        return b""
    if value > 0:
        length = (value.bit_length() + 8) // 8
    else:
        length = ((~value).bit_length() + 8) // 8
    return value.to_bytes(length, "big", signed=True)


def _decode_fixed(stream: BinaryStream, size: int) -> Decoded[int]:
    return Decoded(int.from_bytes(stream.read(size), "big"), size)


def _decode_byte(stream: BinaryStream, **_: Any) -> Decoded[int]:
    return _decode_fixed(stream, 1)


def _decode_boolean(stream: BinaryStream, **_: Any) -> Decoded[bool]:
    raw = _decode_fixed(stream, 1)
    return Decoded(raw.value != 0, raw.consumed)


def _decode_uint32(stream: BinaryStream, **_: Any) -> Decoded[int]:
    return _decode_fixed(stream, 4)


def _decode_uint64(stream: BinaryStream, **_: Any) -> Decoded[int]:
    return _decode_fixed(stream, 8)


def _decode_string(
    stream: BinaryStream, *, text: bool = False, max_length: int | None = None, **_: Any
) -> Decoded[Any]:
    length = _decode_uint32(stream)
    if max_length is not None and length.value > max_length:
        raise DecodeError(f"Field length {length.value} exceeds limit {max_length}")
    if length.value > stream.remaining:
        raise DecodeError(
            f"Length mismatch: declared {length.value} bytes, {stream.remaining} remaining"
        )
    raw = stream.read(length.value)
    value: Any = raw
    if text:
        value = raw.decode("utf-8", errors="surrogateescape")
    return Decoded(value, length.consumed + length.value)


def _decode_name_list(stream: BinaryStream, **_: Any) -> Decoded[List[str]]:
    raw = _decode_string(stream, text=True)
    names = raw.value.split(",") if raw.value else []
    if any(not name for name in names):
        raise DecodeError("Empty name in name-list")
    return Decoded(names, raw.consumed)


def _decode_mpint(stream: BinaryStream, **_: Any) -> Decoded[int]:
    raw = _decode_string(stream, max_length=MAX_MPINT_BYTES)
    payload = raw.value
    if len(payload) > 1 and (
        (payload[0] == 0x00 and not payload[1] & 0x80)
        or (payload[0] == 0xFF and payload[1] & 0x80)
    ):
        raise DecodeError("mpint has a superfluous leading byte")
    return Decoded(int.from_bytes(payload, "big", signed=True), raw.consumed)


def _encode_byte(value: int, stream: BinaryStream) -> int:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"byte out of range: {value}")
    return stream.write(bytes([value]))


def _encode_boolean(value: bool, stream: BinaryStream) -> int:
    return stream.write(b"\x01" if value else b"\x00")


def _encode_uint32(value: int, stream: BinaryStream) -> int:
    if not 0 <= value <= UINT32_MAX:
        raise ValueError(f"uint32 out of range: {value}")
    return stream.write(value.to_bytes(4, "big"))


def _encode_uint64(value: int, stream: BinaryStream) -> int:
    if not 0 <= value <= UINT64_MAX:
        raise ValueError(f"uint64 out of range: {value}")
    return stream.write(value.to_bytes(8, "big"))


def _encode_string(value: bytes | str, stream: BinaryStream) -> int:
    if isinstance(value, str):
        value = value.encode("utf-8", errors="surrogateescape")
    written = _encode_uint32(len(value), stream)
    return written + stream.write(value)


def _encode_name_list(value: Sequence[str], stream: BinaryStream) -> int:
    if any(not name or "," in name for name in value):
        raise ValueError("name-list entries must be non-empty and comma free")
    return _encode_string(",".join(value), stream)


def _encode_mpint(value: int, stream: BinaryStream) -> int:
    return _encode_string(mpint_bytes(value), stream)


_DECODERS: Dict[FieldType, Callable[..., Decoded[Any]]] = {
    FieldType.BYTE: _decode_byte,
    FieldType.BOOLEAN: _decode_boolean,
    FieldType.UINT32: _decode_uint32,
    FieldType.UINT64: _decode_uint64,
    FieldType.STRING: _decode_string,
    FieldType.BUFFER: _decode_string,
    FieldType.NAME_LIST: _decode_name_list,
    FieldType.MPINT: _decode_mpint,
}

_ENCODERS: Dict[FieldType, Callable[[Any, BinaryStream], int]] = {
    FieldType.BYTE: _encode_byte,
    FieldType.BOOLEAN: _encode_boolean,
    FieldType.UINT32: _encode_uint32,
    FieldType.UINT64: _encode_uint64,
    FieldType.STRING: _encode_string,
    FieldType.BUFFER: _encode_string,
    FieldType.NAME_LIST: _encode_name_list,
    FieldType.MPINT: _encode_mpint,
}


def decode(field: FieldType, stream: BinaryStream, **options: Any) -> Decoded[Any]:
    """Decode one field of type ``field`` from the read position of ``stream``.

    ``STRING`` accepts ``text=True`` to return ``str`` and ``max_length`` to
    bound the declared length.
    """
    return _DECODERS[FieldType(field)](stream, **options)


def encode(field: FieldType, value: Any, stream: BinaryStream) -> int:
    """Append ``value`` encoded as ``field`` to ``stream``; return bytes written."""
    return _ENCODERS[FieldType(field)](value, stream)


class FieldReader:
    """Sequential decoder that tracks the total number of bytes consumed."""

    __slots__ = ("stream", "consumed")

    def __init__(self, stream: BinaryStream) -> None:
        self.stream = stream
        self.consumed = 0

    def read(self, field: FieldType, **options: Any) -> Any:
        result = decode(field, self.stream, **options)
        self.consumed += result.consumed
        return result.value

    def uint32(self) -> int:
        return self.read(FieldType.UINT32)

    def string(self, *, text: bool = False) -> Any:
        return self.read(FieldType.STRING, text=text)

    def buffer(self) -> bytes:
        return self.read(FieldType.BUFFER)

    def mpint(self) -> int:
        return self.read(FieldType.MPINT)

    def nested(self, decoded: Decoded[T]) -> T:
        """Account for a composite value decoded from the same stream."""
        self.consumed += decoded.consumed
        return decoded.value

    def done(self, value: T) -> Decoded[T]:
        return Decoded(value, self.consumed)


class FieldWriter:
    """Sequential encoder that tracks the total number of bytes written."""

    __slots__ = ("stream", "written")

    def __init__(self, stream: BinaryStream) -> None:
        self.stream = stream
        self.written = 0

    def write(self, field: FieldType, value: Any) -> int:
        count = encode(field, value, self.stream)
        self.written += count
        return count

    def uint32(self, value: int) -> int:
        return self.write(FieldType.UINT32, value)

    def string(self, value: bytes | str) -> int:
        return self.write(FieldType.STRING, value)

    def buffer(self, value: bytes) -> int:
        return self.write(FieldType.BUFFER, value)

    def mpint(self, value: int) -> int:
        return self.write(FieldType.MPINT, value)

    def raw(self, data: bytes) -> int:
        count = self.stream.write(data)
        self.written += count
        return count


def read_blob(data: bytes, parser: Callable[[BinaryStream], Decoded[T]]) -> T:
    """Parse ``data`` completely with ``parser``; leftover or missing bytes fail."""
    stream = BinaryStream(data)
    result = parser(stream)
    if result.consumed != len(data) or not stream.at_end():
        raise DecodeError(
            f"Length mismatch: parsed {result.consumed} of {len(data)} bytes"
        )
    return result.value


__all__ = [
    "FieldType",
    "Decoded",
    "FieldReader",
    "FieldWriter",
    "decode",
    "encode",
    "mpint_bytes",
    "read_blob",
    "MAX_MPINT_BYTES",
]
