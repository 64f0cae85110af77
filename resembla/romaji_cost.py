"""Substitution cost between romaji letters."""

from __future__ import annotations

import csv
from itertools import combinations


def _to_lower(c: str) -> str:
    return chr(ord(c) + 32) if "A" <= c <= "Z" else c


class RomajiMismatchCost:
    """Cost of replacing one romaji letter by another.

    Identical letters cost 0. Letters that differ only in case cost
    ``case_mismatch_cost``. Letters listed together in a row of the
    similarity file (a group of letters and a cost, comma separated) cost
    that row's value; when their cases also differ, the cost is the smaller
    of 1 and the sum of the case cost and the similarity cost. All other
    pairs cost 1.
    """

    def __init__(self, letter_similarity_file_path: str = "",
                 case_mismatch_cost: float = 1.0) -> None:
        self.case_mismatch_cost = case_mismatch_cost
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

        al, bl = _to_lower(a), _to_lower(b)
        if al == bl:
            return self.case_mismatch_cost

        if bl < al:
            al, bl = bl, al
        similarity = self._similarities.get((al, bl))
        if similarity is None:
            return 1.0
        if (a == al and b == bl) or (a != al and b != bl):
            return similarity
        # Cases differ but the letters are similar.
        return min(1.0, self.case_mismatch_cost + similarity)