"""
Safe-prime Diffie-Hellman demo (console entry point).

Generates a safe prime P = 2q + 1, finds a generator of the order-q
subgroup, runs an Alice/Bob exchange and derives HKDF-SHA256 encryption
and authentication keys on both sides.
"""

import argparse
import sys

from .common.config import ConfigError, load_config
from .common.report import ExchangeReport
from .common.utils import print_banner, status
from .crypto.dh import DHError
from .crypto.primes import PrimeSearchExhausted
from .exchange import run_exchange


def _progress(event: str, **fields) -> None:
    """Observer for --verbose runs."""
    if event == "safe_prime_candidate_rejected":
        status("*", f"2q+1 composite, retrying (attempt {fields['attempt']})")
    elif event == "safe_prime_found":
        status("+", f"Safe prime found after {fields['attempt']} attempt(s)")
    elif event == "generator_rejected":
        status("*", f"{fields['g']} is NOT a generator, try another g")
    elif event == "generator_found":
        status("+", f"{fields['g']} is a generator of the subgroup")
    elif event == "keys_generated":
        status("+", "Key pairs generated for Alice and Bob")


def print_report(report: ExchangeReport) -> None:
    print(f"P: {report.p}")
    print(f"q: {report.q}")
    print(f"g: {report.g}")
    print(f"privAlice: {report.alice.private_key}")
    print(f"privBob: {report.bob.private_key}")
    print(f"pubAlice: {report.alice.public_key}")
    print(f"pubBob: {report.bob.public_key}")
    print(f"Shared secret (Alice): {report.alice.shared_secret}")
    print(f"Shared secret (Bob): {report.bob.shared_secret}")
    print(f"Secrets match? {report.secrets_match}")
    print(f"Alice's Encryption Key: {report.alice.encryption_key}")
    print(f"Bob's Encryption Key: {report.bob.encryption_key}")
    print(f"Alice and Bob Encryption Key Match: {report.encryption_keys_match}")
    print(f"Alice's HMAC Key: {report.alice.authentication_key}")
    print(f"Bob's HMAC Key: {report.bob.authentication_key}")
    print(f"Alice and Bob HMAC Key Match: {report.authentication_keys_match}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Safe-prime Diffie-Hellman demo")
    parser.add_argument("--bits", type=int, help="Safe prime bit length (default 512)")
    parser.add_argument("--rounds", type=int, dest="witness_rounds",
                        help="Miller-Rabin rounds (default 5, demo only)")
    parser.add_argument("--max-attempts", type=int, dest="max_prime_attempts",
                        help="Cap on safe-prime search iterations (default unbounded)")
    parser.add_argument("--deadline", type=float, dest="deadline_seconds",
                        help="Give up the safe-prime search after N seconds")
    parser.add_argument("--key-length", type=int, dest="key_length",
                        help="Derived key length in bytes (default 32)")
    parser.add_argument("--env-file", help="Load SAFEPRIME_DH_* settings from this .env file")
    parser.add_argument("--parallel", action="store_true",
                        help="Run each party's agreement in its own thread")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print search progress")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(
            env_file=args.env_file,
            bits=args.bits,
            witness_rounds=args.witness_rounds,
            max_prime_attempts=args.max_prime_attempts,
            deadline_seconds=args.deadline_seconds,
            key_length=args.key_length,
        )
    except ConfigError as e:
        status("-", str(e))
        return 1

    if not args.json:
        print_banner("SAFE-PRIME DIFFIE-HELLMAN")
        status("*", f"Generating {config.bits}-bit safe prime...")

    try:
        report = run_exchange(
            config,
            observer=_progress if args.verbose and not args.json else None,
            parallel=args.parallel,
        )
    except (PrimeSearchExhausted, DHError) as e:
        status("-", f"Key exchange failed: {e}")
        return 1

    if args.json:
        print(report.to_json())
    else:
        print_report(report)

    if not report.all_match:
        if not args.json:
            status("-", "Alice and Bob disagree")
        return 1
    if not args.json:
        status("+", f"Exchange complete in {report.elapsed_ms} ms")
    return 0


if __name__ == "__main__":
    sys.exit(main())
