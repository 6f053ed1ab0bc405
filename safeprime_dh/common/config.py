"""
Runtime configuration for the key-exchange run.

Values come from explicit overrides first, then SAFEPRIME_DH_* environment
variables (optionally loaded from a .env file), then defaults.
"""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

from ..crypto.dh import DEFAULT_GENERATOR_ATTEMPTS
from ..crypto.kdf import DEFAULT_KEY_LENGTH, MAX_KEY_LENGTH
from ..crypto.primes import DEFAULT_WITNESS_ROUNDS, SearchLimit


ENV_PREFIX = "SAFEPRIME_DH_"

_ENV_FIELDS = {
    "bits": "BITS",
    "witness_rounds": "WITNESS_ROUNDS",
    "generator_attempts": "GENERATOR_ATTEMPTS",
    "max_prime_attempts": "MAX_PRIME_ATTEMPTS",
    "deadline_seconds": "DEADLINE",
    "key_length": "KEY_LENGTH",
}


class ConfigError(ValueError):
    pass


class DHConfig(BaseModel):
    bits: int = 512
    # 5 rounds: demo margin only (false positive <= 4**-5 per number)
    witness_rounds: int = DEFAULT_WITNESS_ROUNDS
    generator_attempts: int = DEFAULT_GENERATOR_ATTEMPTS
    max_prime_attempts: Optional[int] = None
    deadline_seconds: Optional[float] = None
    key_length: int = DEFAULT_KEY_LENGTH

    @field_validator("bits")
    @classmethod
    def _validate_bits(cls, v: int) -> int:
        if v < 8:
            raise ValueError("bits must be >= 8")
        return v

    @field_validator("witness_rounds", "generator_attempts")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @field_validator("max_prime_attempts")
    @classmethod
    def _validate_attempts(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("max_prime_attempts must be >= 1")
        return v

    @field_validator("deadline_seconds")
    @classmethod
    def _validate_deadline(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("deadline must be > 0 seconds")
        return v

    @field_validator("key_length")
    @classmethod
    def _validate_key_length(cls, v: int) -> int:
        if not (1 <= v <= MAX_KEY_LENGTH):
            raise ValueError(f"key_length must be in [1, {MAX_KEY_LENGTH}]")
        return v

    @property
    def search_limit(self) -> SearchLimit:
        return SearchLimit(
            max_attempts=self.max_prime_attempts,
            deadline_seconds=self.deadline_seconds,
        )


def load_config(env_file: Optional[str] = None, **overrides: Any) -> DHConfig:
    """
    Build a DHConfig. None-valued overrides are ignored so argparse
    defaults fall through to the environment.
    """
    if env_file:
        if not os.path.isfile(env_file):
            raise ConfigError(f"env file not found: {env_file}")
        load_dotenv(env_file)
    else:
        load_dotenv(find_dotenv(usecwd=True))

    values: Dict[str, Any] = {}
    for field, suffix in _ENV_FIELDS.items():
        raw = os.getenv(ENV_PREFIX + suffix)
        if raw is not None and raw.strip() != "":
            values[field] = raw.strip()
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return DHConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
