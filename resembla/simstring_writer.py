"""Builds an approximate string matching database.

A database named ``name`` consists of a master file ``name`` that holds a
36-byte header followed by the inserted strings, each terminated by a NUL
character, and one constant database ``name.<k>.cdb`` for every n-gram
count ``k`` that occurs. Each of those maps an n-gram to the offsets of the
strings, within the master file, that have exactly ``k`` n-grams and
contain it.
"""

from __future__ import annotations

import struct

from .cdb import BYTEORDER_CHECK, CdbBuilder, CdbBuilderError
from .ngram import NgramGenerator

MAGIC = b"SSDB"
STREAM_VERSION = 2
HEADER = struct.Struct("<4s8I")
ENCODINGS = {1: "utf-8", 2: "utf-16-le", 4: "utf-32-le"}

_MAX_OFFSET = 0xFFFFFFFF


class SimstringError(Exception):
    """Raised when a database cannot be written or read."""


def index_path(base: str, size: int) -> str:
    """Return the file name of the index for strings with ``size`` n-grams."""
    return f"{base}.{size}.cdb"


class Writer:
    """Collects strings and writes the master file and its n-gram indices.

    ``char_size`` selects how characters are stored: 1 for UTF-8, 2 for
    UTF-16 and 4 for UTF-32, all little-endian.
    """

    def __init__(self, name: str, n: int = 3, be: bool = False, char_size: int = 4) -> None:
        if char_size not in ENCODINGS:
            raise ValueError(f"unsupported character size: {char_size}")
        self.name = name
        self.char_size = char_size
        self._generator = NgramGenerator(n, be)
        self._encoding = ENCODINGS[char_size]
        self._terminator = "\0".encode(self._encoding)
        self._indices: list[dict[str, list[int]]] = []
        self._num_entries = 0
        self._closed = False
        try:
            self._file = open(name, "wb")
        except OSError as err:
            raise SimstringError(f"Failed to open a file for writing: {name}") from err
        self._write_header()

    @property
    def num_entries(self) -> int:
        """Number of strings inserted so far."""
        return self._num_entries

    @property
    def max_size(self) -> int:
        """Largest n-gram count among the inserted strings."""
        return len(self._indices)

    def insert(self, text: str) -> int:
        """Store ``text`` and index its n-grams; return its offset in the master file."""
        if self._closed:
            raise SimstringError("The database is already closed.")
        offset = self._file.tell()
        if offset > _MAX_OFFSET:
            raise SimstringError("The master file exceeds the addressable size.")
        try:
            self._file.write(text.encode(self._encoding) + self._terminator)
        except OSError as err:
            raise SimstringError("Failed to write a string to the master file.") from err
        self._num_entries += 1

        grams = self._generator(text)
        while len(self._indices) < len(grams):
            self._indices.append({})
        index = self._indices[len(grams) - 1]
        for gram in grams:
            index.setdefault(gram, []).append(offset)
        return offset

    def close(self) -> None:
        """Write the indices, finalise the header and close the master file."""
        if self._closed:
            return
        self._closed = True
        try:
            self._store()
        finally:
            try:
                self._write_header()
            finally:
                self._file.close()

    def __enter__(self) -> Writer:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _store(self) -> None:
        for size, index in enumerate(self._indices, 1):
            if not index:
                continue
            path = index_path(self.name, size)
            try:
                handle = open(path, "wb")
            except OSError as err:
                raise SimstringError(f"Failed to open a file for writing: {path}") from err
            with handle:
                try:
                    with CdbBuilder(handle) as builder:
                        for gram in sorted(index):
                            offsets = index[gram]
                            builder.put(
                                gram.encode(self._encoding),
                                struct.pack(f"<{len(offsets)}I", *offsets),
                            )
                except CdbBuilderError as err:
                    raise SimstringError(f"CDB++ error: {err}") from err

    def _write_header(self) -> None:
        size = self._file.tell()
        try:
            self._file.seek(0)
        except OSError as err:
            raise SimstringError(
                "Failed to seek the file pointer for the master file."
            ) from err
        try:
            self._file.write(HEADER.pack(
                MAGIC,
                BYTEORDER_CHECK,
                STREAM_VERSION,
                size,
                self.char_size,
                self._generator.n,
                int(self._generator.be),
                self._num_entries,
                self.max_size,
            ))
        except OSError as err:
            raise SimstringError("Failed to write a file header to the master file.") from err