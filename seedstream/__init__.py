"""
Seedstream: unbounded pseudo-random byte streams from a secret seed.

Features:

- One ``ByteGenerator`` contract (``next(n) -> bytes``) shared by every backend.
- Hash DRBG with a rolling (K, V) register over any keyed hash (BLAKE2, HMAC-SHA2, SHA3).
- AES-OFB stream generator, BLAKE2Xs / BLAKE3 / KMACXOF256 XOF generators, and an
  SP 800-90A HMAC_DRBG driven by a single-use fixed entropy source.
- Rejection sampling for bits, bounded integers, ranges and collection elements,
  free of modulo bias.

Seeded backends are fully deterministic given (seed, salt); the system backend is
not and must not be used where reproducibility is required.
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "errors",
    "hashutil",
    "kdf",
    "generator",
    "hash_drbg",
    "stream",
    "blake2x",
    "xof",
    "sp800",
    "sampling",
    "config",
    "service",
    "cli",
]

# Programmatic entry points: seedstream.config.new_generator() builds any backend,
# seedstream.sampling draws unbiased values from it.
