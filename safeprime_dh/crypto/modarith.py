"""Modular exponentiation by repeated squaring."""

from __future__ import annotations


def mod_pow(base: int, exponent: int, modulus: int) -> int:
    """
    Compute base**exponent mod modulus (square-and-multiply).

    Each product is reduced immediately so operands stay below modulus**2.
    Not constant time.
    """
    if modulus <= 0:
        raise ValueError("modulus must be positive")
    if exponent < 0:
        raise ValueError("exponent must be non-negative")
    if modulus == 1:
        return 0

    result = 1
    base %= modulus
    while exponent > 0:
        if exponent & 1:
            result = (result * base) % modulus
        exponent >>= 1
        base = (base * base) % modulus
    return result
