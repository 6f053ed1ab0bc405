"""Secure random integers for prime candidates and range draws.

Exports:
- RandomSource: wraps a next_bytes(n) callable (os.urandom by default)
- DEFAULT_RNG: process-wide secure source
- random_bits(bits) -> odd int of exactly `bits` bits
- random_range(lo, hi) -> uniform int in [lo, hi] (rejection sampling)
"""

from __future__ import annotations

import os
import random
from typing import Callable, Optional


class InvalidRangeError(ValueError):
    pass


ByteSource = Callable[[int], bytes]


class RandomSource:
    """Integer draws over an injectable byte source."""

    def __init__(self, next_bytes: Optional[ByteSource] = None):
        self._next_bytes = next_bytes or os.urandom

    @classmethod
    def seeded(cls, seed: int) -> "RandomSource":
        """Deterministic, NOT secure. For tests and reproducible runs only."""
        return cls(random.Random(seed).randbytes)

    def next_bytes(self, n: int) -> bytes:
        data = self._next_bytes(n)
        if len(data) != n:
            raise RuntimeError(f"Byte source returned {len(data)} bytes, expected {n}")
        return data

    def random_bits(self, bits: int) -> int:
        """Odd integer with exactly `bits` bits (top and bottom bit forced)."""
        if not isinstance(bits, int) or bits < 2:
            raise ValueError("bits must be an integer >= 2")
        n_bytes = (bits + 7) // 8
        value = int.from_bytes(self.next_bytes(n_bytes), "big")
        value >>= n_bytes * 8 - bits
        value |= 1
        value |= 1 << (bits - 1)
        return value

    def random_range(self, lo: int, hi: int) -> int:
        """Uniform integer in [lo, hi], inclusive."""
        if lo > hi:
            raise InvalidRangeError(f"Invalid range: min {lo} > max {hi}")
        span = hi - lo + 1
        n_bytes = (span.bit_length() + 7) // 8
        # Reject draws >= span to avoid modulo bias.
        while True:
            draw = int.from_bytes(self.next_bytes(n_bytes), "big")
            if draw < span:
                return draw + lo


DEFAULT_RNG = RandomSource()


def random_bits(bits: int, rng: Optional[RandomSource] = None) -> int:
    return (rng or DEFAULT_RNG).random_bits(bits)


def random_range(lo: int, hi: int, rng: Optional[RandomSource] = None) -> int:
    return (rng or DEFAULT_RNG).random_range(lo, hi)
