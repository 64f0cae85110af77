import io
import struct

import pytest

from resembla.cdb import (
    BYTEORDER_CHECK,
    DATA_BEGIN,
    CdbBuilder,
    CdbBuilderError,
    CdbError,
    CdbReader,
    murmurhash2,
)


def build(pairs, prefix=b""):
    stream = io.BytesIO()
    stream.write(prefix)
    with CdbBuilder(stream) as builder:
        for key, value in pairs:
            builder.put(key, value)
    return stream.getvalue()


def test_header_layout_fixed_by_format():
    data = build([(b"key", b"value")])
    assert data[:4] == b"CDB+"
    size, version, byteorder = struct.unpack_from("<III", data, 4)
    assert size == len(data)
    assert version == 1
    assert byteorder == BYTEORDER_CHECK


def test_empty_database_is_header_only():
    data = build([])
    assert len(data) == DATA_BEGIN
    reader = CdbReader(data)
    assert len(reader) == 0
    assert reader.get(b"anything") is None


def test_round_trip_many_keys():
    pairs = [(f"{i:06d}".encode(), struct.pack("<i", i)) for i in range(2000)]
    reader = CdbReader(build(pairs))
    assert len(reader) == len(pairs)
    for key, value in pairs:
        assert reader.get(key) == value


def test_missing_key_and_contains():
    reader = CdbReader(build([(b"alpha", b"1"), (b"beta", b"2")]))
    assert b"alpha" in reader
    assert b"gamma" not in reader
    assert reader.get(b"gamma") is None


def test_empty_value_and_high_bytes():
    pairs = [(b"\xff\xfe\x80", b""), (b"\x00", b"\x01\x02"), (b"", b"empty-key")]
    reader = CdbReader(build(pairs))
    for key, value in pairs:
        assert reader.get(key) == value


def test_chunk_embedded_after_prefix():
    prefix = b"some leading bytes"
    data = build([(b"k", b"v")], prefix=prefix)
    reader = CdbReader(data[len(prefix):])
    assert reader.get(b"k") == b"v"

    stream = io.BytesIO(data)
    stream.seek(len(prefix))
    from_stream = CdbReader.from_stream(stream)
    assert from_stream.get(b"k") == b"v"
    assert from_stream.chunk_size == len(data) - len(prefix)


def test_from_stream_bad_header_restores_position():
    stream = io.BytesIO(b"xxxxNOPE" + b"\x00" * 100)
    stream.seek(4)
    with pytest.raises(CdbError):
        CdbReader.from_stream(stream)
    assert stream.tell() == 4


def test_hash_is_32_bit_and_deterministic():
    for data in [b"", b"a", b"ab", b"abc", b"abcd", b"abcde", b"\xff\xff\xff"]:
        h = murmurhash2(data)
        assert 0 <= h <= 0xFFFFFFFF
        assert murmurhash2(data) == h
    assert murmurhash2(b"abc") != murmurhash2(b"abd")


def test_too_small_image():
    with pytest.raises(CdbError, match="smaller than a chunk header"):
        CdbReader(b"CDB+" + b"\x00" * 10)


def test_bad_magic():
    data = bytearray(build([]))
    data[:4] = b"XXXX"
    with pytest.raises(CdbError, match="Incorrect chunk header"):
        CdbReader(bytes(data))


def test_bad_byteorder():
    data = bytearray(build([]))
    struct.pack_into("<I", data, 12, 0x71534462)
    with pytest.raises(CdbError, match="byte order"):
        CdbReader(bytes(data))


def test_bad_version():
    data = bytearray(build([]))
    struct.pack_into("<I", data, 8, 2)
    with pytest.raises(CdbError, match="versions"):
        CdbReader(bytes(data))


def test_truncated_image():
    data = build([(b"key", b"value")])
    with pytest.raises(CdbError, match="chunk size"):
        CdbReader(data[:-1])


def test_inconsistent_stream_offset():
    stream = io.BytesIO()
    builder = CdbBuilder(stream)
    builder.put(b"k", b"v")
    stream.write(b"junk")
    with pytest.raises(CdbBuilderError, match="Inconsistent"):
        builder.close()


def test_put_after_close_fails():
    stream = io.BytesIO()
    builder = CdbBuilder(stream)
    builder.close()
    with pytest.raises(CdbBuilderError):
        builder.put(b"k", b"v")