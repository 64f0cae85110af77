"""Constant database (CDB++ chunk format) with MurmurHash2 keys.

A database is a chunk made of a 16-byte header, 256 hash-table references,
the key/value records and the open-addressed hash tables. All integers are
stored as little-endian unsigned 32-bit values.
"""

from __future__ import annotations

import struct
from typing import BinaryIO

VERSION = 1
NUM_TABLES = 256
BYTEORDER_CHECK = 0x62445371
MAGIC = b"CDB+"

_MASK = 0xFFFFFFFF
_U32 = struct.Struct("<I")
_PAIR = struct.Struct("<II")
_HEADER = struct.Struct("<4sIII")
DATA_BEGIN = _HEADER.size + _PAIR.size * NUM_TABLES


class CdbError(ValueError):
    """Raised when a database image cannot be read."""


class CdbBuilderError(ValueError):
    """Raised when a database cannot be written."""


def murmurhash2(data: bytes) -> int:
    """Return the 32-bit MurmurHash2 of ``data`` with the CDB++ seed."""
    m = 0x5BD1E995
    data = bytes(data)
    size = len(data)
    h = (0x87654321 ^ size) & _MASK

    full = size - size % 4
    for (k,) in struct.iter_unpack("<I", data[:full]):
        k = (k * m) & _MASK
        k ^= k >> 24
        k = (k * m) & _MASK
        h = (h * m) & _MASK
        h ^= k

    # Trailing bytes are mixed in as signed chars.
    tail = [b - 256 if b >= 128 else b for b in data[full:]]
    if len(tail) == 3:
        h ^= (tail[2] << 16) & _MASK
    if len(tail) >= 2:
        h ^= (tail[1] << 8) & _MASK
    if tail:
        h ^= tail[0] & _MASK
        h = (h * m) & _MASK

    h ^= h >> 13
    h = (h * m) & _MASK
    h ^= h >> 15
    return h


class CdbBuilder:
    """Writes a database chunk into a seekable binary stream.

    The chunk starts at the stream's current position. Records are written
    as they are put; the hash tables and header are written on ``close``.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._begin = stream.tell()
        self._cur = DATA_BEGIN
        self._tables: list[list[tuple[int, int]]] = [[] for _ in range(NUM_TABLES)]
        self._closed = False
        stream.seek(self._begin + self._cur)

    def put(self, key: bytes, value: bytes) -> None:
        """Append a record; duplicate keys are not detected."""
        if self._closed:
            raise CdbBuilderError("The builder is already closed")
        key = bytes(key)
        value = bytes(value)
        self._stream.write(_U32.pack(len(key)) + key + _U32.pack(len(value)) + value)

        hv = murmurhash2(key)
        self._tables[hv % NUM_TABLES].append((hv, self._cur))
        self._cur += 4 + len(key) + 4 + len(value)

    def close(self) -> None:
        """Write the hash tables and the chunk header."""
        if self._closed:
            return
        self._closed = True
        stream = self._stream

        if self._begin + self._cur != stream.tell():
            raise CdbBuilderError("Inconsistent stream offset")

        for entries in self._tables:
            if not entries:
                continue
            n = len(entries) * 2
            slots: list[tuple[int, int]] = [(0, 0)] * n
            for hv, offset in entries:
                k = (hv >> 8) % n
                while slots[k][1] != 0:
                    k = (k + 1) % n
                slots[k] = (hv, offset)
            stream.write(b"".join(_PAIR.pack(hv, off) for hv, off in slots))

        end = stream.tell()
        stream.seek(self._begin)
        stream.write(_HEADER.pack(MAGIC, end - self._begin, VERSION, BYTEORDER_CHECK))

        cur = self._cur
        refs = []
        for entries in self._tables:
            refs.append(_PAIR.pack(cur if entries else 0, len(entries) * 2))
            cur += _PAIR.size * len(entries) * 2
        stream.write(b"".join(refs))
        stream.seek(end)

    def __enter__(self) -> CdbBuilder:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class CdbReader:
    """Looks up values in a database image held in memory."""

    def __init__(self, buffer: bytes) -> None:
        view = memoryview(buffer).cast("B")
        size = len(view)
        if size < DATA_BEGIN:
            raise CdbError("The memory image is smaller than a chunk header.")
        magic, csize, version, byteorder = _HEADER.unpack_from(view, 0)
        if magic != MAGIC:
            raise CdbError("Incorrect chunk header")
        if byteorder != BYTEORDER_CHECK:
            raise CdbError("Inconsistent byte order")
        if version != VERSION:
            raise CdbError("Incompatible CDB++ versions")
        if size < csize:
            raise CdbError("The memory image is smaller than a chunk size.")

        self._buffer = view
        self.chunk_size = csize
        self._tables: list[tuple[int, int]] = []
        count = 0
        for i in range(NUM_TABLES):
            offset, num = _PAIR.unpack_from(view, _HEADER.size + i * _PAIR.size)
            self._tables.append((offset, num) if offset else (0, 0))
            count += num // 2
        self._count = count

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> CdbReader:
        """Read a chunk starting at the stream's current position."""
        start = stream.tell()
        head = stream.read(8)
        if len(head) < 8 or head[:4] != MAGIC:
            stream.seek(start)
            raise CdbError("Incorrect chunk header")
        (chunk_size,) = _U32.unpack_from(head, 4)
        stream.seek(start)
        block = stream.read(chunk_size)
        if len(block) < chunk_size:
            stream.seek(start)
            raise CdbError("The stream is shorter than the chunk size.")
        return cls(block)

    def get(self, key: bytes) -> bytes | None:
        """Return the value stored for ``key``, or None."""
        key = bytes(key)
        hv = murmurhash2(key)
        table_offset, n = self._tables[hv % NUM_TABLES]
        if not n:
            return None
        buf = self._buffer
        k = (hv >> 8) % n
        while True:
            bucket_hash, rec = _PAIR.unpack_from(buf, table_offset + k * _PAIR.size)
            if rec == 0:
                return None
            if bucket_hash == hv:
                (ksize,) = _U32.unpack_from(buf, rec)
                start = rec + 4
                if ksize == len(key) and buf[start:start + ksize] == key:
                    vpos = start + ksize
                    (vsize,) = _U32.unpack_from(buf, vpos)
                    return bytes(buf[vpos + 4:vpos + 4 + vsize])
            k = (k + 1) % n

    def __len__(self) -> int:
        return self._count

    def __contains__(self, key: bytes) -> bool:
        return self.get(key) is not None