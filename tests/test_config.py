"""Tests for DHConfig loading (defaults, environment, .env files, overrides)."""

import os
import sys

sys.path.insert(0, ".")

import pytest  # noqa: E402

from safeprime_dh.common.config import (  # noqa: E402
    ENV_PREFIX,
    ConfigError,
    DHConfig,
    load_config,
)


ENV_NAMES = [
    "BITS", "WITNESS_ROUNDS", "GENERATOR_ATTEMPTS",
    "MAX_PRIME_ATTEMPTS", "DEADLINE", "KEY_LENGTH",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_NAMES:
        monkeypatch.delenv(ENV_PREFIX + name, raising=False)
    # keep load_dotenv() from picking up a stray .env
    monkeypatch.chdir(tmp_path)


def test_defaults():
    cfg = load_config()
    assert cfg == DHConfig()
    assert cfg.bits == 512
    assert cfg.witness_rounds == 5
    assert cfg.generator_attempts == 1000
    assert cfg.max_prime_attempts is None
    assert cfg.deadline_seconds is None
    assert cfg.key_length == 32
    limit = cfg.search_limit
    assert limit.max_attempts is None and limit.deadline_seconds is None


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv(ENV_PREFIX + "BITS", "128")
    monkeypatch.setenv(ENV_PREFIX + "MAX_PRIME_ATTEMPTS", "50")
    monkeypatch.setenv(ENV_PREFIX + "DEADLINE", "2.5")
    monkeypatch.setenv(ENV_PREFIX + "KEY_LENGTH", "")
    cfg = load_config()
    assert cfg.bits == 128
    assert cfg.key_length == 32, "Empty env values fall back to defaults"
    assert cfg.search_limit.max_attempts == 50
    assert cfg.search_limit.deadline_seconds == 2.5


def test_explicit_overrides_beat_environment(monkeypatch):
    monkeypatch.setenv(ENV_PREFIX + "BITS", "128")
    cfg = load_config(bits=64, witness_rounds=None)
    assert cfg.bits == 64
    assert cfg.witness_rounds == 5


def test_env_file(tmp_path):
    env_file = tmp_path / "dh.env"
    env_file.write_text(f"{ENV_PREFIX}WITNESS_ROUNDS=20\n{ENV_PREFIX}GENERATOR_ATTEMPTS=7\n")
    try:
        cfg = load_config(env_file=str(env_file))
        assert cfg.witness_rounds == 20
        assert cfg.generator_attempts == 7
    finally:
        os.environ.pop(ENV_PREFIX + "WITNESS_ROUNDS", None)
        os.environ.pop(ENV_PREFIX + "GENERATOR_ATTEMPTS", None)


def test_missing_env_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(env_file=str(tmp_path / "nope.env"))


@pytest.mark.parametrize(
    "overrides",
    [
        {"bits": 4},
        {"witness_rounds": 0},
        {"generator_attempts": 0},
        {"max_prime_attempts": 0},
        {"deadline_seconds": 0},
        {"key_length": 0},
        {"key_length": 255 * 32 + 1},
        {"bits": "lots"},
    ],
)
def test_invalid_values(overrides):
    with pytest.raises(ConfigError):
        load_config(**overrides)


def test_invalid_environment_value(monkeypatch):
    monkeypatch.setenv(ENV_PREFIX + "BITS", "abc")
    with pytest.raises(ConfigError):
        load_config()
