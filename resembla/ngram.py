"""Letter n-gram generation for approximate string matching."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

MARK = "\x01"


def ngrams(text: str, n: int, be: bool = False) -> list[str]:
    """Return the letter n-grams of ``text`` in sorted order.

    With ``be`` the string is framed by ``n - 1`` marks on each side;
    otherwise a string shorter than ``n`` is padded with marks. An n-gram
    that occurs k times is emitted as itself followed by copies suffixed
    with 2..k.
    """
    if n < 1:
        raise ValueError(f"the n-gram unit must be positive, got {n}")

    if be:
        padding = MARK * (n - 1)
        src = padding + text + padding
    elif len(text) < n:
        src = text + MARK * (n - len(text))
    else:
        src = text

    counts = Counter(src[i:i + n] for i in range(len(src) - n + 1))
    result: list[str] = []
    for gram in sorted(counts):
        result.append(gram)
        result.extend(f"{gram}{i}" for i in range(2, counts[gram] + 1))
    return result


@dataclass(frozen=True)
class NgramGenerator:
    """Callable producing n-grams with a fixed unit and framing flag."""

    n: int = 3
    be: bool = False

    def __call__(self, text: str) -> list[str]:
        return ngrams(text, self.n, self.be)