from hypothesis import given, strategies as st

from keyforge.exceptions import DecodeError
from keyforge.wire import BinaryStream, FieldReader, FieldType, decode, encode, mpint_bytes

_fields = st.one_of(
    st.tuples(st.just(FieldType.STRING), st.binary(max_size=64)),
    st.tuples(st.just(FieldType.UINT32), st.integers(min_value=0, max_value=2**32 - 1)),
    st.tuples(st.just(FieldType.UINT64), st.integers(min_value=0, max_value=2**64 - 1)),
    st.tuples(st.just(FieldType.BOOLEAN), st.booleans()),
    st.tuples(st.just(FieldType.MPINT), st.integers(min_value=-(2**256), max_value=2**256)),
)


@given(st.integers(min_value=-(2**4096), max_value=2**4096))
def test_mpint_is_minimal(value: int) -> None:
    payload = mpint_bytes(value)
    assert int.from_bytes(payload, "big", signed=True) == value
    if len(payload) > 1:
        # a leading 0x00 or 0xFF only ever carries the sign
        assert not (payload[0] == 0x00 and payload[1] < 0x80)
        assert not (payload[0] == 0xFF and payload[1] >= 0x80)


@given(st.lists(_fields, max_size=12))
def test_consumed_matches_written(fields) -> None:
    stream = BinaryStream()
    for field, value in fields:
        encode(field, value, stream)

    reader = FieldReader(BinaryStream(stream.getvalue()))
    for field, value in fields:
        assert reader.read(field) == value
    assert reader.consumed == len(stream)
    assert reader.stream.at_end()


@given(st.binary(max_size=64))
def test_malformed_string_never_overreads(data: bytes) -> None:
    stream = BinaryStream(data)
    try:
        result = decode(FieldType.STRING, stream)
    except DecodeError:
        return
    assert result.consumed == 4 + len(result.value) <= len(data)


@given(st.integers(min_value=-(2**512), max_value=2**512).filter(lambda value: value != 0))
def test_sign_extended_mpint_is_rejected(value: int) -> None:
    payload = mpint_bytes(value)
    padded = (b"\xff" if value < 0 else b"\x00") + payload
    stream = BinaryStream(len(padded).to_bytes(4, "big") + padded)
    try:
        decode(FieldType.MPINT, stream)
    except DecodeError:
        return
    raise AssertionError(f"accepted padded payload {padded.hex()}")
