"""Finite-field Diffie-Hellman over a freshly generated safe prime.

Exports:
- DHGroup: (p, g) with q = (p - 1) / 2
- find_generator(p) -> (g, q)
- generate_private_key(q) / public_key(priv, g, p) / generate_keypair(group)
- validate_peer_public(pub, group) -> None (raises on invalid)
- compute_shared_secret(peer_pub, priv, p) -> int
- public_bytes(pub) / public_from_bytes(b) for wire encoding
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .modarith import mod_pow
from .primes import (
    DEFAULT_WITNESS_ROUNDS,
    UNBOUNDED,
    Observer,
    SearchLimit,
    generate_safe_prime,
    is_probable_prime,
)
from .rand import DEFAULT_RNG, RandomSource


DEFAULT_GENERATOR_ATTEMPTS = 1000


class DHError(ValueError):
    pass


class GeneratorNotFound(DHError):
    def __init__(self, attempts: int):
        super().__init__(f"Failed to find generator after {attempts} attempts")
        self.attempts = attempts


def is_generator(g: int, p: int, q: int) -> bool:
    """g generates the order-q subgroup: g^q == 1 and g^2 != 1 (mod p)."""
    if mod_pow(g, q, p) != 1:
        return False
    return mod_pow(g, 2, p) != 1


def find_generator(
    p: int,
    max_attempts: int = DEFAULT_GENERATOR_ATTEMPTS,
    rng: Optional[RandomSource] = None,
    observer: Optional[Observer] = None,
) -> Tuple[int, int]:
    """Random search in [2, p-2] for a generator of the order-q subgroup."""
    if p < 7:
        raise DHError("p must be a safe prime >= 7")
    rng = rng or DEFAULT_RNG
    q = (p - 1) // 2
    for attempt in range(1, max_attempts + 1):
        g = rng.random_range(2, p - 2)
        if is_generator(g, p, q):
            if observer is not None:
                observer("generator_found", g=g, attempt=attempt)
            return g, q
        if observer is not None:
            observer("generator_rejected", g=g, attempt=attempt)
    raise GeneratorNotFound(max_attempts)


@dataclass(frozen=True)
class DHGroup:
    p: int
    g: int

    @property
    def q(self) -> int:
        # p is a safe prime: p = 2q + 1
        return (self.p - 1) // 2

    @property
    def byte_len(self) -> int:
        return (self.p.bit_length() + 7) // 8

    @classmethod
    def generate(
        cls,
        bits: int = 512,
        rounds: int = DEFAULT_WITNESS_ROUNDS,
        generator_attempts: int = DEFAULT_GENERATOR_ATTEMPTS,
        rng: Optional[RandomSource] = None,
        limit: SearchLimit = UNBOUNDED,
        observer: Optional[Observer] = None,
    ) -> "DHGroup":
        p = generate_safe_prime(bits, rounds, rng, limit, observer)
        g, _ = find_generator(p, generator_attempts, rng, observer)
        return cls(p=p, g=g)

    def validate(
        self,
        rounds: int = DEFAULT_WITNESS_ROUNDS,
        rng: Optional[RandomSource] = None,
    ) -> None:
        """Re-check that p is a safe prime and g generates the q-subgroup."""
        if self.p < 7 or self.p % 2 == 0:
            raise DHError("p must be an odd prime >= 7")
        if not is_probable_prime(self.p, rounds, rng):
            raise DHError("p is not prime")
        if not is_probable_prime(self.q, rounds, rng):
            raise DHError("p is not a safe prime: (p - 1) / 2 is composite")
        if not (2 <= self.g <= self.p - 2) or not is_generator(self.g, self.p, self.q):
            raise DHError("g does not generate the order-q subgroup")


def generate_private_key(q: int, rng: Optional[RandomSource] = None) -> int:
    # Uniform in [1, q-1]
    return (rng or DEFAULT_RNG).random_range(1, q - 1)


def public_key(priv: int, g: int, p: int) -> int:
    if not (isinstance(priv, int) and priv >= 1):
        raise DHError("Invalid private key")
    return mod_pow(g, priv, p)


def generate_keypair(group: DHGroup, rng: Optional[RandomSource] = None) -> Tuple[int, int]:
    priv = generate_private_key(group.q, rng)
    pub = public_key(priv, group.g, group.p)
    return priv, pub


def validate_peer_public(pub: int, group: DHGroup) -> None:
    if not isinstance(pub, int):
        raise DHError("Peer public key must be an integer")
    if not (2 <= pub <= group.p - 2):
        raise DHError("Peer public key out of range")
    if mod_pow(pub, group.q, group.p) != 1:
        raise DHError("Peer public key failed subgroup check")


def compute_shared_secret(peer_pub: int, priv: int, p: int) -> int:
    return mod_pow(peer_pub, priv, p)


def compute_shared_secret_checked(peer_pub: int, priv: int, group: DHGroup) -> int:
    """compute_shared_secret after range and subgroup checks on peer_pub."""
    validate_peer_public(peer_pub, group)
    return compute_shared_secret(peer_pub, priv, group.p)


def public_bytes(pub: int, group: DHGroup) -> bytes:
    return pub.to_bytes(group.byte_len, "big")


def public_from_bytes(b: bytes, group: DHGroup) -> int:
    if len(b) != group.byte_len:
        raise DHError("Invalid public key byte length")
    pub = int.from_bytes(b, "big")
    validate_peer_public(pub, group)
    return pub
