"""
Two-party Diffie-Hellman run over a freshly generated safe-prime group.

Sequence: safe prime P -> q -> generator g -> each party draws a private
key and publishes g^x mod P -> each side computes the shared secret from
the peer's public key -> HKDF derives encryption and authentication keys.
"""

from __future__ import annotations

import threading
from typing import List, Optional

from .common.config import DHConfig
from .common.report import ExchangeReport, PartyReport
from .common.utils import now_ms
from .crypto.dh import (
    DHGroup,
    compute_shared_secret_checked,
    generate_private_key,
    public_key,
)
from .crypto.kdf import SessionKeys, derive_session_keys
from .crypto.primes import Observer
from .crypto.rand import DEFAULT_RNG, RandomSource


class KeyExchangeError(RuntimeError):
    pass


class Party:
    """One side of the exchange. The private key never leaves this object."""

    def __init__(self, name: str, group: DHGroup, rng: Optional[RandomSource] = None):
        self.name = name
        self.group = group
        self._private_key = generate_private_key(group.q, rng)
        self.public_key = public_key(self._private_key, group.g, group.p)
        self.shared_secret: Optional[int] = None
        self.keys: Optional[SessionKeys] = None

    def agree(self, peer_public: int, key_length: int) -> None:
        self.shared_secret = compute_shared_secret_checked(
            peer_public, self._private_key, self.group
        )
        self.keys = derive_session_keys(self.shared_secret, key_length)

    def report(self) -> PartyReport:
        if self.shared_secret is None or self.keys is None:
            raise KeyExchangeError(f"{self.name} has not completed agreement")
        return PartyReport(
            name=self.name,
            private_key=self._private_key,
            public_key=self.public_key,
            shared_secret=self.shared_secret,
            encryption_key=self.keys.encryption.hex(),
            authentication_key=self.keys.authentication.hex(),
        )


def _agree_all(parties: List[Party], peers: List[int], key_length: int, parallel: bool) -> None:
    if not parallel:
        for party, peer_pub in zip(parties, peers):
            party.agree(peer_pub, key_length)
        return

    errors: List[BaseException] = []

    def worker(party: Party, peer_pub: int) -> None:
        try:
            party.agree(peer_pub, key_length)
        except Exception as e:
            errors.append(e)

    threads = [
        threading.Thread(target=worker, args=(party, peer_pub), daemon=True)
        for party, peer_pub in zip(parties, peers)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    if errors:
        raise errors[0]


def run_exchange(
    config: Optional[DHConfig] = None,
    rng: Optional[RandomSource] = None,
    observer: Optional[Observer] = None,
    group: Optional[DHGroup] = None,
    parallel: bool = False,
) -> ExchangeReport:
    """
    Run a full Alice/Bob exchange and return the report.

    Pass `group` to skip parameter generation (e.g. a known small group in
    tests); otherwise a `config.bits` safe prime is generated.
    """
    config = config or DHConfig()
    rng = rng or DEFAULT_RNG
    started = now_ms()

    if group is None:
        group = DHGroup.generate(
            bits=config.bits,
            rounds=config.witness_rounds,
            generator_attempts=config.generator_attempts,
            rng=rng,
            limit=config.search_limit,
            observer=observer,
        )

    alice = Party("Alice", group, rng)
    bob = Party("Bob", group, rng)
    if observer is not None:
        observer("keys_generated", alice_public=alice.public_key, bob_public=bob.public_key)

    _agree_all([alice, bob], [bob.public_key, alice.public_key], config.key_length, parallel)

    report = ExchangeReport(
        bits=group.p.bit_length(),
        p=group.p,
        q=group.q,
        g=group.g,
        alice=alice.report(),
        bob=bob.report(),
        elapsed_ms=now_ms() - started,
    )
    if observer is not None:
        observer("exchange_complete", all_match=report.all_match)
    return report
