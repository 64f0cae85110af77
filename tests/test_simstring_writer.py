import struct

import pytest

from resembla.cdb import BYTEORDER_CHECK, CdbReader
from resembla.ngram import ngrams
from resembla.simstring_writer import (
    HEADER,
    MAGIC,
    STREAM_VERSION,
    SimstringError,
    Writer,
    index_path,
)

WORDS = ["Barack Obama", "Bill Clinton", "Boston", "abc"]


def _header(path):
    return HEADER.unpack_from(path.read_bytes(), 0)


def test_header_fields_after_close(tmp_path):
    db = tmp_path / "sample.db"
    with Writer(str(db), n=3, be=True) as writer:
        for word in WORDS:
            writer.insert(word)
    magic, order, version, size, char_size, n, be, entries, max_size = _header(db)
    assert magic == MAGIC == b"SSDB"
    assert order == BYTEORDER_CHECK
    assert version == STREAM_VERSION == 2
    assert size == len(db.read_bytes())
    assert char_size == 4
    assert n == 3
    assert be == 1
    assert entries == len(WORDS)
    assert max_size == max(len(ngrams(w, 3, True)) for w in WORDS)


def test_strings_are_stored_nul_terminated(tmp_path):
    db = tmp_path / "sample.db"
    with Writer(str(db)) as writer:
        offsets = [writer.insert(word) for word in WORDS]
    data = db.read_bytes()
    assert offsets[0] == HEADER.size
    for word, offset in zip(WORDS, offsets):
        encoded = (word + "\0").encode("utf-32-le")
        assert data[offset:offset + len(encoded)] == encoded
    expected = b"".join((w + "\0").encode("utf-32-le") for w in WORDS)
    assert data[HEADER.size:] == expected


def test_indices_map_ngrams_to_offsets(tmp_path):
    db = tmp_path / "sample.db"
    with Writer(str(db), n=2) as writer:
        offsets = {word: writer.insert(word) for word in WORDS}
    for word, offset in offsets.items():
        grams = ngrams(word, 2)
        reader = CdbReader((tmp_path / f"sample.db.{len(grams)}.cdb").read_bytes())
        for gram in grams:
            value = reader.get(gram.encode("utf-32-le"))
            stored = struct.unpack(f"<{len(value) // 4}I", value)
            assert offset in stored
            assert list(stored) == sorted(stored)


def test_shared_ngram_lists_all_strings(tmp_path):
    db = tmp_path / "same.db"
    with Writer(str(db)) as writer:
        first = writer.insert("abcd")
        second = writer.insert("bcde")
    reader = CdbReader((tmp_path / "same.db.2.cdb").read_bytes())
    value = reader.get("bcd".encode("utf-32-le"))
    assert struct.unpack("<2I", value) == (first, second)
    assert len(reader) == len(set(ngrams("abcd", 3)) | set(ngrams("bcde", 3)))


def test_only_used_sizes_get_index_files(tmp_path):
    db = tmp_path / "sizes.db"
    with Writer(str(db)) as writer:
        writer.insert("abc")
        assert writer.max_size == 1
        writer.insert("abcdef")
        assert writer.max_size == len(ngrams("abcdef", 3))
        assert writer.num_entries == 2
    assert (tmp_path / "sizes.db.1.cdb").exists()
    assert (tmp_path / "sizes.db.4.cdb").exists()
    assert not (tmp_path / "sizes.db.2.cdb").exists()
    assert index_path("sizes.db", 4) == "sizes.db.4.cdb"


def test_utf8_character_size(tmp_path):
    db = tmp_path / "u8.db"
    with Writer(str(db), char_size=1) as writer:
        writer.insert("ab")
    assert _header(db)[4] == 1
    assert db.read_bytes()[HEADER.size:] == b"ab\0"
    reader = CdbReader((tmp_path / "u8.db.1.cdb").read_bytes())
    assert reader.get(b"ab\x01") == struct.pack("<I", HEADER.size)


def test_empty_database_header(tmp_path):
    db = tmp_path / "empty.db"
    Writer(str(db)).close()
    header = _header(db)
    assert header[3] == HEADER.size
    assert header[7] == 0
    assert header[8] == 0


def test_insert_after_close_raises(tmp_path):
    writer = Writer(str(tmp_path / "closed.db"))
    writer.close()
    writer.close()
    with pytest.raises(SimstringError):
        writer.insert("abc")


def test_unopenable_path_raises(tmp_path):
    with pytest.raises(SimstringError, match="Failed to open"):
        Writer(str(tmp_path / "missing" / "db"))


def test_invalid_character_size(tmp_path):
    with pytest.raises(ValueError):
        Writer(str(tmp_path / "bad.db"), char_size=3)