"""Miller-Rabin primality testing and (safe) prime generation.

WARNING: the default of 5 Miller-Rabin rounds bounds the false-positive rate
by 4**-5 per tested number. That is enough for a demonstration and far short
of a production margin; there is also no trial division, no side-channel
hardening, and no FIPS 186 style validation.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from .modarith import mod_pow
from .rand import DEFAULT_RNG, RandomSource


DEFAULT_WITNESS_ROUNDS = 5

Observer = Callable[..., None]

_clock = time.monotonic


class PrimeSearchExhausted(RuntimeError):
    def __init__(self, what: str, attempts: int):
        super().__init__(f"{what} search exhausted after {attempts} attempts")
        self.attempts = attempts


@dataclass(frozen=True)
class SearchLimit:
    """Optional bound on a generate-and-test loop. Both None means unbounded."""

    max_attempts: Optional[int] = None
    deadline_seconds: Optional[float] = None

    def __post_init__(self):
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.deadline_seconds is not None and self.deadline_seconds <= 0:
            raise ValueError("deadline_seconds must be > 0")

    def start(self) -> "_Budget":
        deadline = None
        if self.deadline_seconds is not None:
            deadline = _clock() + self.deadline_seconds
        return _Budget(self.max_attempts, deadline)


UNBOUNDED = SearchLimit()


class _Budget:
    """Running attempt/deadline counter for one search."""

    def __init__(self, max_attempts: Optional[int], deadline: Optional[float]):
        self.max_attempts = max_attempts
        self.deadline = deadline
        self.attempts = 0

    def take(self, what: str) -> None:
        if self.max_attempts is not None and self.attempts >= self.max_attempts:
            raise PrimeSearchExhausted(what, self.attempts)
        if self.deadline is not None and _clock() >= self.deadline:
            raise PrimeSearchExhausted(what, self.attempts)
        self.attempts += 1


def _emit(observer: Optional[Observer], event: str, **fields) -> None:
    if observer is not None:
        observer(event, **fields)


def is_probable_prime(
    n: int,
    rounds: int = DEFAULT_WITNESS_ROUNDS,
    rng: Optional[RandomSource] = None,
) -> bool:
    """Miller-Rabin test; False means certainly composite."""
    if n in (2, 3):
        return True
    if n < 2 or n % 2 == 0:
        return False
    rng = rng or DEFAULT_RNG

    # n - 1 = d * 2**s, d odd
    d = n - 1
    s = 0
    while d % 2 == 0:
        d //= 2
        s += 1

    for _ in range(rounds):
        a = rng.random_range(2, n - 2)
        x = mod_pow(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(s - 1):
            x = mod_pow(x, 2, n)
            if x == n - 1:
                break
        else:
            return False
    return True


def generate_prime(
    bits: int,
    rounds: int = DEFAULT_WITNESS_ROUNDS,
    rng: Optional[RandomSource] = None,
    limit: SearchLimit = UNBOUNDED,
    observer: Optional[Observer] = None,
) -> int:
    """Draw odd `bits`-bit candidates until one passes Miller-Rabin."""
    rng = rng or DEFAULT_RNG
    budget = limit.start()
    while True:
        budget.take("prime")
        candidate = rng.random_bits(bits)
        if is_probable_prime(candidate, rounds, rng):
            return candidate
        _emit(observer, "prime_candidate_rejected", attempt=budget.attempts)


def generate_safe_prime(
    bits: int,
    rounds: int = DEFAULT_WITNESS_ROUNDS,
    rng: Optional[RandomSource] = None,
    limit: SearchLimit = UNBOUNDED,
    observer: Optional[Observer] = None,
) -> int:
    """
    Return a `bits`-bit safe prime P = 2q + 1 (q prime, `bits - 1` bits).

    `limit` bounds the outer loop; each inner prime search for q is
    unbounded in attempts but shares the same deadline.
    """
    if bits < 3:
        raise ValueError("bits must be >= 3 for a safe prime")
    rng = rng or DEFAULT_RNG
    budget = limit.start()
    while True:
        budget.take("safe prime")
        inner = UNBOUNDED
        if budget.deadline is not None:
            inner = SearchLimit(deadline_seconds=max(budget.deadline - _clock(), 1e-9))
        try:
            q = generate_prime(bits - 1, rounds, rng, inner)
        except PrimeSearchExhausted:
            raise PrimeSearchExhausted("safe prime", budget.attempts) from None
        p = 2 * q + 1
        if is_probable_prime(p, rounds, rng):
            _emit(observer, "safe_prime_found", p=p, attempt=budget.attempts)
            return p
        _emit(observer, "safe_prime_candidate_rejected", q=q, attempt=budget.attempts)
