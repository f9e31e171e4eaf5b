from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import Callable, Dict


def blake2s_digest(data: bytes, size: int = 32) -> bytes:
    return hashlib.blake2s(data, digest_size=size).digest()


def blake2b_digest(data: bytes, size: int = 64) -> bytes:
    return hashlib.blake2b(data, digest_size=size).digest()


def fit_key(material: bytes, max_size: int) -> bytes:
    """Return ``material`` unchanged when it fits, else compress it by hashing.

    Compression yields ``min(max_size, 64)`` bytes of BLAKE2b so every backend
    applies the same oversized-input rule.
    """
    if len(material) <= max_size:
        return bytes(material)
    return blake2b_digest(material, min(max_size, 64))


def fit_exact(material: bytes, size: int) -> bytes:
    """Map ``material`` onto exactly ``size`` bytes (size <= 32)."""
    if len(material) == size:
        return bytes(material)
    return blake2s_digest(material, size)


@dataclass(frozen=True)
class KeyedHash:
    """A keyed hash / MAC function together with its sizing metadata.

    Calling the descriptor computes ``fn(key, message)``. Keys longer than
    ``max_key_size`` are first replaced by the unkeyed digest of the key
    (``self(b"", key)``) so long keys behave identically across primitives.
    """

    name: str
    digest_size: int
    max_key_size: int
    fn: Callable[[bytes, bytes], bytes]

    def __call__(self, key: bytes, message: bytes) -> bytes:
        if len(key) > self.max_key_size:
            key = self.fn(b"", bytes(key))
        return self.fn(bytes(key), bytes(message))


def _keyed_blake2b(key: bytes, message: bytes) -> bytes:
    return hashlib.blake2b(message, key=key, digest_size=64).digest()


def _keyed_blake2s(key: bytes, message: bytes) -> bytes:
    return hashlib.blake2s(message, key=key, digest_size=32).digest()


def _hmac_sha256(key: bytes, message: bytes) -> bytes:
    return hmac.new(key, message, hashlib.sha256).digest()


def _hmac_sha512(key: bytes, message: bytes) -> bytes:
    return hmac.new(key, message, hashlib.sha512).digest()


# Prefix-key MAC; sound for SHA-3 since the sponge is not length-extendable.
def _keyed_sha3_256(key: bytes, message: bytes) -> bytes:
    return hashlib.sha3_256(key + message).digest()


def _keyed_sha3_512(key: bytes, message: bytes) -> bytes:
    return hashlib.sha3_512(key + message).digest()


KEYED_BLAKE2B = KeyedHash("blake2b", 64, 64, _keyed_blake2b)
KEYED_BLAKE2S = KeyedHash("blake2s", 32, 32, _keyed_blake2s)
HMAC_SHA256 = KeyedHash("hmac-sha256", 32, 64, _hmac_sha256)
HMAC_SHA512 = KeyedHash("hmac-sha512", 64, 128, _hmac_sha512)
KEYED_SHA3_256 = KeyedHash("sha3-256", 32, 136, _keyed_sha3_256)
KEYED_SHA3_512 = KeyedHash("sha3-512", 64, 72, _keyed_sha3_512)

PRIMITIVES: Dict[str, KeyedHash] = {
    p.name: p
    for p in (
        KEYED_BLAKE2B,
        KEYED_BLAKE2S,
        HMAC_SHA256,
        HMAC_SHA512,
        KEYED_SHA3_256,
        KEYED_SHA3_512,
    )
}


def get_primitive(name: str | KeyedHash) -> KeyedHash:
    if isinstance(name, KeyedHash):
        return name
    try:
        return PRIMITIVES[name]
    except KeyError:
        raise ValueError(f"Unknown keyed hash primitive: {name!r}") from None
