"""Substitution cost between letters with configurable similar-letter groups."""

from __future__ import annotations

import csv
from itertools import combinations


class KanaMismatchCost:
    """Cost of replacing one letter by another.

    Identical letters cost 0. Letters listed together in a row of the
    similarity file cost that row's value; all other pairs cost 1.
    Each row of the file holds a group of letters and a cost, comma separated.
    """

    def __init__(self, letter_similarity_file_path: str = "") -> None:
        self._similarities: dict[tuple[str, str], float] = {}
        if not letter_similarity_file_path:
            return
        with open(letter_similarity_file_path, encoding="utf-8", newline="") as handle:
            for columns in csv.reader(handle):
                if len(columns) < 2 or not columns[0]:
                    continue
                cost = float(columns[1])
                for pair in combinations(sorted(columns[0]), 2):
                    self._similarities[pair] = cost

    def __call__(self, a: str, b: str) -> float:
        if a == b:
            return 0.0
        key = (a, b) if a < b else (b, a)
        return self._similarities.get(key, 1.0)