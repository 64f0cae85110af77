"""N-gram string databases, kana and romaji normalisation and letter mismatch costs."""

__version__ = "0.1.0"