"""
Key derivation tests: HKDF-SHA256 vectors, label separation, secret encoding.
"""

import hashlib
import hmac
import sys

sys.path.insert(0, ".")

from safeprime_dh.common.utils import bytes_to_int, int_to_bytes  # noqa: E402
from safeprime_dh.crypto.kdf import (  # noqa: E402
    KdfError,
    derive_key,
    derive_session_keys,
)


def _hkdf_reference(ikm: bytes, info: bytes, length: int) -> bytes:
    """RFC 5869 with an empty salt, written out with hmac."""
    prk = hmac.new(b"", ikm, hashlib.sha256).digest()
    okm, block, counter = b"", b"", 1
    while len(okm) < length:
        block = hmac.new(prk, block + info + bytes([counter]), hashlib.sha256).digest()
        okm += block
        counter += 1
    return okm[:length]


def test_rfc5869_case3():
    # Test Case 3: zero-length salt and info
    okm = derive_key(b"\x0b" * 22, "", 42)
    assert okm.hex() == (
        "8da4e775a563c18f715f802a063c5a31"
        "b8a11f5c5ee1879ec3454e5f3c738d2d"
        "9d201395faa4b61a96c8"
    )
    print("[PASS] HKDF RFC 5869 vector")


def test_matches_reference_hkdf():
    seed = int_to_bytes(0x1234567890ABCDEF)
    for info in ("encryption", "authentication", "default"):
        for length in (16, 32, 64):
            assert derive_key(seed, info, length) == _hkdf_reference(
                seed, info.encode(), length
            )


def test_labels_separate_keys():
    seed = b"shared secret"
    enc = derive_key(seed, "encryption")
    auth = derive_key(seed, "authentication")
    assert len(enc) == len(auth) == 32
    assert enc != auth, "Distinct labels must give distinct keys"
    assert enc == derive_key(seed, "encryption"), "KDF must be deterministic"


def test_session_keys():
    keys_a = derive_session_keys(4)
    keys_b = derive_session_keys(4)
    assert keys_a == keys_b
    assert keys_a.encryption != keys_a.authentication
    assert keys_a.encryption == derive_key(b"\x04", "encryption")
    assert len(derive_session_keys(4, length=16).encryption) == 16


def test_bad_kdf_arguments():
    for args in ((b"x", "l", 0), (b"x", "l", 255 * 32 + 1), ("not bytes", "l", 32)):
        try:
            derive_key(*args)
            assert False, f"Expected KdfError for {args}"
        except KdfError:
            pass


def test_canonical_secret_encoding():
    assert int_to_bytes(0) == b"\x00"
    assert int_to_bytes(4) == b"\x04"
    assert int_to_bytes(0xABC) == b"\x0a\xbc", "Odd hex length gets a leading zero"
    assert int_to_bytes(255) == b"\xff"
    assert int_to_bytes(256) == b"\x01\x00"
    big = 2**511 + 12345
    assert len(int_to_bytes(big)) == 64
    assert bytes_to_int(int_to_bytes(big)) == big
    try:
        int_to_bytes(-1)
        assert False, "Expected ValueError for negative integer"
    except ValueError:
        pass


if __name__ == "__main__":
    test_rfc5869_case3()
    test_matches_reference_hkdf()
    test_labels_separate_keys()
    print("\nALL KDF TESTS PASSED")
