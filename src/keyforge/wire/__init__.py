"""Wire codec exports."""
from .fields import (
    Decoded,
    FieldReader,
    FieldType,
    FieldWriter,
    decode,
    encode,
    mpint_bytes,
    read_blob,
)
from .stream import BinaryStream

__all__ = [
    "BinaryStream",
    "Decoded",
    "FieldReader",
    "FieldType",
    "FieldWriter",
    "decode",
    "encode",
    "mpint_bytes",
    "read_blob",
]
