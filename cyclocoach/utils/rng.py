# path: cyclocoach/utils/rng.py

"""
Seeded pseudo-random stream for route synthesis.

The stream must be bit-for-bit reproducible from the seed text, so every
operation is done on explicitly masked 32-bit integers rather than on
Python's unbounded ints or on `random.Random`.
"""

from __future__ import annotations

from typing import Iterator

MASK32 = 0xFFFFFFFF
GOLDEN_INCREMENT = 0x6D2B79F5
TWO_POW_32 = 4294967296.0


def to_int32(value: int) -> int:
    value &= MASK32
    return value - 0x100000000 if value & 0x80000000 else value


def to_uint32(value: int) -> int:
    return value & MASK32


def imul32(a: int, b: int) -> int:
    """Low 32 bits of a*b, as an unsigned value."""
    return (to_uint32(a) * to_uint32(b)) & MASK32


def seed_from_text(text: str) -> int:
    """
    Fold UTF-16 code units into a signed 32-bit hash (acc*31 + code).
    Lone surrogates are folded as their own code unit.
    """
    data = text.encode("utf-16-le", errors="surrogatepass")
    acc = 0
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        acc = to_int32(acc * 31 + code)
    return acc


class DeterministicRng:
    """
    mulberry32 stream seeded from text. Call the instance to draw a float
    in [0, 1); iterate it for an endless stream.

    One instance belongs to one synthesis call and is never shared.
    """

    def __init__(self, seed_text: str):
        self._state = seed_from_text(seed_text)

    @property
    def state(self) -> int:
        return self._state

    def __call__(self) -> float:
        self._state = to_int32(self._state + GOLDEN_INCREMENT)
        s = to_uint32(self._state)
        t = imul32(s ^ (s >> 15), s | 1)
        t = ((t + imul32(t ^ (t >> 7), t | 61)) & MASK32) ^ t
        return ((t ^ (t >> 14)) & MASK32) / TWO_POW_32

    def __iter__(self) -> Iterator[float]:
        while True:
            yield self()
