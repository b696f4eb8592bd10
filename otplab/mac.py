"""
HMAC engine (RFC 2104) for SHA-1, SHA-256 and SHA-512.

The MAC itself is computed by the ``cryptography`` package; nothing here
re-implements a hash function.
"""

import hmac
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac

from otplab.errors import UnsupportedAlgorithm


class Algorithm(str, Enum):
    """Supported HMAC algorithms."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @classmethod
    def parse(cls, value: Union["Algorithm", str]) -> "Algorithm":
        """
        Accept ``Algorithm`` members and the usual spellings
        (``"SHA1"``, ``"SHA-1"``, ``"sha256"``, ``"sha_512"``).

        Raises:
            UnsupportedAlgorithm: For anything else.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UnsupportedAlgorithm(value)
        name = value.strip().upper().replace("-", "").replace("_", "")
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedAlgorithm(value) from None


_HASHES = {
    Algorithm.SHA1: hashes.SHA1,
    Algorithm.SHA256: hashes.SHA256,
    Algorithm.SHA512: hashes.SHA512,
}


def digest_size(algorithm: Union[Algorithm, str]) -> int:
    """Digest length in bytes: 20, 32 or 64."""
    return _HASHES[Algorithm.parse(algorithm)].digest_size


def hmac_digest(
    key: bytes, message: bytes, algorithm: Union[Algorithm, str] = Algorithm.SHA1
) -> bytes:
    """
    Compute HMAC(``key``, ``message``) with the given hash.

    Args:
        key:       Raw key bytes, any length.
        message:   Message bytes.
        algorithm: Hash primitive.

    Returns:
        The raw digest (20 / 32 / 64 bytes).
    """
    alg = Algorithm.parse(algorithm)
    mac = crypto_hmac.HMAC(bytes(key), _HASHES[alg]())
    mac.update(bytes(message))
    return mac.finalize()


@dataclass(frozen=True)
class HMACResult:
    digest: bytes
    algorithm: Algorithm
    digest_hex: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "digest_hex", self.digest.hex())


def compute_hmac(
    key: bytes, message: bytes, algorithm: Union[Algorithm, str] = Algorithm.SHA1
) -> HMACResult:
    """Same as :func:`hmac_digest` but keeps the algorithm and hex view."""
    alg = Algorithm.parse(algorithm)
    return HMACResult(digest=hmac_digest(key, message, alg), algorithm=alg)


def constant_time_compare(a: str, b: str) -> bool:
    """Return True if *a* == *b* in constant time (timing-safe)."""
    return hmac.compare_digest(a.encode(), b.encode())
