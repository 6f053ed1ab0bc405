"""HKDF-SHA256 key derivation from a DH shared secret.

derive_key(seed, info, length) is RFC 5869 extract-and-expand with an empty
salt. Distinct `info` labels give independent keys from the same seed.
"""

from __future__ import annotations

from dataclasses import dataclass

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from ..common.utils import int_to_bytes


DEFAULT_KEY_LENGTH = 32
MAX_KEY_LENGTH = 255 * 32

ENCRYPTION_LABEL = "encryption"
AUTHENTICATION_LABEL = "authentication"


class KdfError(ValueError):
    pass


def derive_key(seed: bytes, info: str = "default", length: int = DEFAULT_KEY_LENGTH) -> bytes:
    if not isinstance(seed, (bytes, bytearray)):
        raise KdfError("seed must be bytes")
    if not (1 <= length <= MAX_KEY_LENGTH):
        raise KdfError(f"length must be in [1, {MAX_KEY_LENGTH}]")
    # salt=None is the RFC 5869 all-zero salt, equivalent to an empty salt.
    return HKDF(
        algorithm=hashes.SHA256(),
        length=length,
        salt=None,
        info=info.encode("utf-8"),
    ).derive(bytes(seed))


@dataclass(frozen=True)
class SessionKeys:
    encryption: bytes
    authentication: bytes


def derive_session_keys(shared_secret: int, length: int = DEFAULT_KEY_LENGTH) -> SessionKeys:
    """Encryption and authentication keys from the canonical secret bytes."""
    seed = int_to_bytes(shared_secret)
    return SessionKeys(
        encryption=derive_key(seed, ENCRYPTION_LABEL, length),
        authentication=derive_key(seed, AUTHENTICATION_LABEL, length),
    )
