"""
Library defaults, overridable from the environment or a ``.env`` file.

Variables:
- CRYPTOUTILS_RSA_KEY_SIZE: default RSA modulus size in bits
- CRYPTOUTILS_DH_PRIME_LENGTH: default Diffie-Hellman prime length in bits
- CRYPTOUTILS_PBKDF2_ITERATIONS: default PBKDF2 iteration count
- CRYPTOUTILS_PBE_ALGORITHM: default password based encryption scheme
- CRYPTOUTILS_SIGNATURE_ALGORITHM: default signature algorithm
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from dotenv import load_dotenv

from .algorithms import PbeAlgorithm, SignatureAlgorithm
from .errors import ConfigError, CryptoError

logger = logging.getLogger(__name__)

ENV_PREFIX = "CRYPTOUTILS_"


@dataclass(frozen=True)
class CryptoConfig:
    """Default parameters used when a caller does not pass one explicitly."""

    rsa_key_size: int = 2048
    dh_prime_length: int = 2048
    pbkdf2_iterations: int = 100000
    pbe_algorithm: PbeAlgorithm = PbeAlgorithm.PBE_HMAC_SHA256_AES_128
    signature_algorithm: SignatureAlgorithm = SignatureAlgorithm.SHA256_WITH_RSA

    def __post_init__(self) -> None:
        for name in ("rsa_key_size", "dh_prime_length", "pbkdf2_iterations"):
            if getattr(self, name) < 1:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        dotenv_path: Optional[Union[str, os.PathLike]] = None,
    ) -> CryptoConfig:
        """
        Build a config from environment variables.

        Args:
            env: Mapping to read from; when omitted, ``.env`` is loaded and
                ``os.environ`` is used
            dotenv_path: Explicit ``.env`` location

        Returns:
            CryptoConfig instance

        Raises:
            ConfigError: If a variable holds an invalid value
        """
        if env is None:
            load_dotenv(dotenv_path)
            env = os.environ

        defaults = cls()
        try:
            return cls(
                rsa_key_size=_int(env, "RSA_KEY_SIZE", defaults.rsa_key_size),
                dh_prime_length=_int(env, "DH_PRIME_LENGTH", defaults.dh_prime_length),
                pbkdf2_iterations=_int(env, "PBKDF2_ITERATIONS", defaults.pbkdf2_iterations),
                pbe_algorithm=PbeAlgorithm.from_name(
                    env.get(ENV_PREFIX + "PBE_ALGORITHM", defaults.pbe_algorithm.value)
                ),
                signature_algorithm=SignatureAlgorithm.from_name(
                    env.get(ENV_PREFIX + "SIGNATURE_ALGORITHM", defaults.signature_algorithm.value)
                ),
            )
        except ConfigError:
            raise
        except CryptoError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}")


_config: Optional[CryptoConfig] = None
_config_lock = threading.Lock()


def get_config() -> CryptoConfig:
    """Return the process-wide config, loading it from the environment once."""
    global _config
    with _config_lock:
        if _config is None:
            _config = CryptoConfig.from_env()
            logger.debug("Loaded config: %s", _config)
        return _config


def set_config(config: CryptoConfig) -> None:
    """Replace the process-wide config."""
    global _config
    with _config_lock:
        _config = config


def reset_config() -> None:
    """Drop the cached config so the next get_config() reloads it."""
    global _config
    with _config_lock:
        _config = None
