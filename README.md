# resembla

Building blocks for finding text that resembles a query, with a focus on
Japanese text: a constant hash database, letter n-grams, a writer for
n-gram string databases, kana and romaji normalisation, and substitution
costs between similar letters.

The package has no third-party runtime dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `resembla.cdb` | Constant hash database in the CDB++ chunk format with MurmurHash2 keys: `CdbBuilder`, `CdbReader`, `murmurhash2`, `CdbError`, `CdbBuilderError` |
| `resembla.ngram` | Letter n-grams: `ngrams`, `NgramGenerator` |
| `resembla.simstring_writer` | Writes an n-gram string database: `Writer`, `index_path`, `SimstringError` |
| `resembla.kana` | Kana normalisation and romaji conversion: `is_kana_word`, `estimate_pronunciation`, `token_pronunciation`, `to_romaji` |
| `resembla.kana_cost` | Substitution cost between letters with similar-letter groups: `KanaMismatchCost` |
| `resembla.romaji_cost` | Case-aware substitution cost between romaji letters: `RomajiMismatchCost` |
| `resembla.params` | Parameters from defaults, a JSON config file and the command line: `Definition`, `ParameterManager`, `as_bool` |
| `resembla.mecab_options` | Checks the dictionary named in a MeCab option string: `validate_mecab_options` |

## Examples

### Constant database

```python
import io
from resembla.cdb import CdbBuilder, CdbReader

buffer = io.BytesIO()
with CdbBuilder(buffer) as builder:
    builder.put(b"apple", b"1")
    builder.put(b"banana", b"2")

db = CdbReader(buffer.getvalue())
db.get(b"apple")     # b'1'
b"cherry" in db      # False
len(db)              # 2
```

`CdbReader.from_stream` reads a chunk that starts at a stream's current
position. Keys must be unique; the builder does not check for duplicates.

### Letter n-grams

Repeated n-grams are numbered, so every element of the result is distinct.
The result is sorted.

```python
from resembla.ngram import NgramGenerator, ngrams

ngrams("banana", 3, False)   # ['ana', 'ana2', 'ban', 'nan']
trigrams = NgramGenerator(3, be=True)
trigrams("ab")               # n-grams of '\x01\x01ab\x01\x01'
```

### Writing an n-gram string database

```python
from resembla.simstring_writer import Writer

with Writer("names.db", n=3, be=False, char_size=4) as writer:
    writer.insert("tokyo")
    writer.insert("kyoto")
```

This writes the master file `names.db`, holding a 36-byte header and the
strings, and one constant database `names.db.<k>.cdb` for each n-gram count
`k` that occurs. Each index maps an n-gram to the little-endian 32-bit
offsets, within the master file, of the strings that contain it. `char_size`
selects UTF-8 (1), UTF-16 (2) or UTF-32 (4) storage.

### Kana and romaji

```python
from resembla.kana import estimate_pronunciation, to_romaji, token_pronunciation

estimate_pronunciation("ひらがな")     # 'ヒラガナ'
to_romaji("カタカナ")                   # 'katakana'
to_romaji("キャット", keep_case=True)  # 'KyatTO'

feature = "名詞,固有名詞,地域,一般,*,*,東京,トウキョウ,トーキョー"
token_pronunciation("東京", feature, 7)  # 'トウキョウ'
```

`token_pronunciation` takes one token's surface and its analyser features
(a list or the comma-separated string). It falls back to converting the
surface when the reading is missing or `*`, or when the surface is all kana.

### Letter substitution costs

Both cost classes read an optional CSV file in which each row holds a group
of similar letters and the cost of replacing one by another, for example
`アァ,0.3`.

```python
from resembla.kana_cost import KanaMismatchCost
from resembla.romaji_cost import RomajiMismatchCost

kana_cost = KanaMismatchCost()
kana_cost("ア", "ア")   # 0.0
kana_cost("ア", "イ")   # 1.0

romaji_cost = RomajiMismatchCost("", case_mismatch_cost=0.5)
romaji_cost("a", "A")   # 0.5
```

### Parameters

```python
from resembla.params import Definition, ParameterManager

params = ParameterManager([
    Definition("alpha", 0.2, long_option="alpha", short_option="a",
               description="threshold"),
    Definition("config", "", long_option="conf", short_option="c",
               description="config file"),
])
params.load(["-a", "0.5", "input.txt"], conf_option="conf", min_unnamed_argc=1)
params.get("alpha", float)   # 0.5
params.rest                  # ['input.txt']
```

Values are kept as strings. A JSON config file named by `conf_option`
overrides defaults for definitions with a `json_path`; command-line values
override both. `get` converts to `str`, `int`, `float` or `bool`.

## Errors

- `CdbError` for malformed database images; `CdbBuilderError` when a
  database cannot be written consistently.
- `SimstringError` when the master file or an index cannot be written.
- `ParameterManager.load` raises `ValueError` for unknown options, missing
  values, missing required options or too few unnamed arguments; the message
  ends with a usage summary.
- `validate_mecab_options` raises `FileNotFoundError` when the directory after
  `-d`/`--dicdir` has no readable `dicrc`, and `ValueError` when `-d` has no
  path.

## What this package does not do

- It writes n-gram string databases but has no reader that retrieves similar
  strings from them; the index files can only be opened one by one with
  `CdbReader`.
- It provides letter substitution costs but no edit-distance or other
  similarity scores built on them, and no token weighting.
- It runs no morphological analyser: `token_pronunciation` works on features
  you supply, and `validate_mecab_options` only checks the option string.
- It has no command-line program or server.