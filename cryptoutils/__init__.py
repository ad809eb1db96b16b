"""
Cryptographic utilities

Uniform helpers for hashing, password hashing, symmetric and password based
encryption, HMAC, RSA encryption/signatures and Diffie-Hellman key agreement,
built on the ``cryptography`` package.

Quick Start
-----------
```python
from cryptoutils import AesCipher, generate_iv, generate_key

cipher = AesCipher()
key = generate_key(256)

# GCM with associated data
envelope = cipher.gcm_encrypt(b"Sensitive data", key, generate_iv(12), aad=b"user-42")
plaintext = cipher.gcm_decrypt(envelope, key, aad=b"user-42")

# Password based encryption: salt and iteration count travel in the envelope
envelope = cipher.pb_encrypt(b"Sensitive data", "password", generate_iv(16), 10000)
plaintext = cipher.pb_decrypt(envelope, "password")
```

Envelope Format
---------------
Symmetric ciphertexts are framed as ``u32_be(len(params)) || params || payload``
where params is the IV (CBC, GCM) or the DER encoded PBES2 parameters (PBE).

Modules
-------
- `keys`: Key generation and restoration
- `encoding`: Hex, Base64 and PEM helpers
- `envelope`: Envelope framing
- `cipher`: CBC, GCM and password based encryption
- `pbe`: PBES2 parameters
- `digest`: Digests and PBKDF2 password hashing
- `mac`: HMAC
- `rsa`: RSA encryption and signatures
- `dh`: Diffie-Hellman key agreement
- `config`: Defaults from the environment
- `errors`: Error types
"""

__version__ = "0.1.0"

# =============================================================================
# Algorithm Exports
# =============================================================================

from .algorithms import (
    DigestAlgorithm,
    HmacAlgorithm,
    KeyPairAlgorithm,
    PbeAlgorithm,
    Pbkdf2Algorithm,
    RsaPadding,
    SignatureAlgorithm,
    SymmetricAlgorithm,
)

# =============================================================================
# Key Material Exports
# =============================================================================

from .keys import (
    KeyPair,
    PbeKey,
    PrivateKey,
    PublicKey,
    SecretKey,
    generate_bytes,
    generate_hmac_key,
    generate_iv,
    generate_key,
    generate_key_pair,
    generate_pbe_key,
    restore_key,
    restore_private_key,
    restore_public_key,
)
from .random_source import SYSTEM_RANDOM, RandomSource, SystemRandomSource

# =============================================================================
# Encoding Exports
# =============================================================================

from .encoding import (
    base64_dec,
    base64_enc,
    hex_to_bytes,
    pem_to_bytes,
    to_base64,
    to_hex,
    to_pem,
)
from .envelope import Envelope, deserialize, int_to_bytes, serialize

# =============================================================================
# Operation Exports
# =============================================================================

from .cipher import AesCipher
from .dh import DiffieHellman, DiffieHellmanParams
from .digest import Digest, Pbkdf2Digest
from .mac import Hmac
from .pbe import PbeParameters, get_algorithm_parameters, new_parameters
from .rsa import RsaCipher, RsaSign

# =============================================================================
# Config and Error Exports
# =============================================================================

from .config import CryptoConfig, get_config, reset_config, set_config
from .errors import (
    AuthenticationError,
    ConfigError,
    CryptoError,
    DecryptionError,
    InvalidArgumentError,
    MalformedInputError,
    MalformedKeyError,
    UnsupportedAlgorithmError,
)

# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Version
    "__version__",
    # Algorithms
    "DigestAlgorithm",
    "HmacAlgorithm",
    "KeyPairAlgorithm",
    "PbeAlgorithm",
    "Pbkdf2Algorithm",
    "RsaPadding",
    "SignatureAlgorithm",
    "SymmetricAlgorithm",
    # Key material
    "KeyPair",
    "PbeKey",
    "PrivateKey",
    "PublicKey",
    "SecretKey",
    "generate_bytes",
    "generate_hmac_key",
    "generate_iv",
    "generate_key",
    "generate_key_pair",
    "generate_pbe_key",
    "restore_key",
    "restore_private_key",
    "restore_public_key",
    "RandomSource",
    "SystemRandomSource",
    "SYSTEM_RANDOM",
    # Encoding
    "base64_dec",
    "base64_enc",
    "hex_to_bytes",
    "pem_to_bytes",
    "to_base64",
    "to_hex",
    "to_pem",
    "Envelope",
    "serialize",
    "deserialize",
    "int_to_bytes",
    # Operations
    "AesCipher",
    "PbeParameters",
    "get_algorithm_parameters",
    "new_parameters",
    "Digest",
    "Pbkdf2Digest",
    "Hmac",
    "RsaCipher",
    "RsaSign",
    "DiffieHellman",
    "DiffieHellmanParams",
    # Config
    "CryptoConfig",
    "get_config",
    "set_config",
    "reset_config",
    # Errors
    "CryptoError",
    "UnsupportedAlgorithmError",
    "InvalidArgumentError",
    "MalformedInputError",
    "MalformedKeyError",
    "AuthenticationError",
    "DecryptionError",
    "ConfigError",
]
