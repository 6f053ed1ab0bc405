"""Utility helpers for the safe-prime Diffie-Hellman demo."""

from __future__ import annotations

import time
from typing import Union


# ---------------------------------------------------------------------------
# Time / Encoding Helpers
# ---------------------------------------------------------------------------

def now_ms() -> int:
    """Return current Unix timestamp in milliseconds (UTC)."""
    return int(time.time() * 1000)


def int_to_bytes(value: int) -> bytes:
    """
    Canonical big-endian encoding of a non-negative integer.

    Minimal length, but never empty: zero encodes as a single 0x00 byte,
    matching the even-length hex rendering (leading zero nibble padded).
    """
    if not isinstance(value, int) or value < 0:
        raise ValueError("value must be a non-negative integer")
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")


def bytes_to_int(data: Union[bytes, bytearray, memoryview]) -> int:
    """Inverse of int_to_bytes (big-endian, unsigned)."""
    return int.from_bytes(bytes(data), "big")


# ---------------------------------------------------------------------------
# Console Helpers
# ---------------------------------------------------------------------------

def print_banner(title: str) -> None:
    """Pretty CLI banner."""
    width = 60
    print("\n" + "=" * width)
    print(f"{title:^{width}}")
    print("=" * width + "\n")


def status(kind: str, message: str) -> None:
    """Print a status line: kind is one of '*', '+', '-'."""
    print(f"[{kind}] {message}")
