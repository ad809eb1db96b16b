"""
Tests for library configuration.
"""

from __future__ import annotations

import pytest

from cryptoutils import (
    ConfigError,
    CryptoConfig,
    PbeAlgorithm,
    SignatureAlgorithm,
    get_config,
    reset_config,
    set_config,
)
from cryptoutils import config as config_module


def test_defaults() -> None:
    config = CryptoConfig()

    assert config.rsa_key_size == 2048
    assert config.dh_prime_length == 2048
    assert config.pbkdf2_iterations == 100000
    assert config.pbe_algorithm is PbeAlgorithm.PBE_HMAC_SHA256_AES_128
    assert config.signature_algorithm is SignatureAlgorithm.SHA256_WITH_RSA


def test_from_env_empty_mapping() -> None:
    assert CryptoConfig.from_env({}) == CryptoConfig()


def test_from_env() -> None:
    config = CryptoConfig.from_env(
        {
            "CRYPTOUTILS_RSA_KEY_SIZE": "3072",
            "CRYPTOUTILS_DH_PRIME_LENGTH": "1024",
            "CRYPTOUTILS_PBKDF2_ITERATIONS": "600000",
            "CRYPTOUTILS_PBE_ALGORITHM": "pbewithhmacsha512andaes_256",
            "CRYPTOUTILS_SIGNATURE_ALGORITHM": "SHA512withRSA",
        }
    )

    assert config.rsa_key_size == 3072
    assert config.dh_prime_length == 1024
    assert config.pbkdf2_iterations == 600000
    assert config.pbe_algorithm is PbeAlgorithm.PBE_HMAC_SHA512_AES_256
    assert config.signature_algorithm is SignatureAlgorithm.SHA512_WITH_RSA


def test_from_env_blank_value_uses_default() -> None:
    assert CryptoConfig.from_env({"CRYPTOUTILS_RSA_KEY_SIZE": " "}).rsa_key_size == 2048


def test_from_env_dotenv_file(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    # Registered with monkeypatch so the value loaded from the file is undone
    monkeypatch.setenv("CRYPTOUTILS_PBKDF2_ITERATIONS", "1")
    monkeypatch.delenv("CRYPTOUTILS_PBKDF2_ITERATIONS")
    dotenv = tmp_path / ".env"
    dotenv.write_text("CRYPTOUTILS_PBKDF2_ITERATIONS=1000\n")

    assert CryptoConfig.from_env(dotenv_path=dotenv).pbkdf2_iterations == 1000


@pytest.mark.parametrize(
    "env",
    [
        {"CRYPTOUTILS_RSA_KEY_SIZE": "big"},
        {"CRYPTOUTILS_PBKDF2_ITERATIONS": "0"},
        {"CRYPTOUTILS_DH_PRIME_LENGTH": "-512"},
        {"CRYPTOUTILS_PBE_ALGORITHM": "AES"},
        {"CRYPTOUTILS_PBE_ALGORITHM": "PBEWithMD5AndDES"},
        {"CRYPTOUTILS_SIGNATURE_ALGORITHM": "MD5withRSA"},
    ],
)
def test_from_env_invalid(env: dict) -> None:
    with pytest.raises(ConfigError):
        CryptoConfig.from_env(env)


def test_set_and_get_config() -> None:
    config = CryptoConfig(pbkdf2_iterations=10)
    set_config(config)

    assert get_config() is config


def test_reset_config_reloads_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CRYPTOUTILS_RSA_KEY_SIZE", "4096")
    monkeypatch.setattr(config_module, "load_dotenv", lambda *args, **kwargs: False)
    reset_config()

    assert get_config().rsa_key_size == 4096
