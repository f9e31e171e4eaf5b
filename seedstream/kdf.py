"""Extended keyed hash: digests of any length from a fixed-size keyed hash.

The chain is ``H0 = P(key, 0x00 || message)`` and ``Hi = P(key, 0x00 || H(i-1))``;
the blocks are concatenated and truncated to the requested length. The chain
does not depend on the requested length, so a shorter output is always a
prefix of a longer one for the same key and message.
"""

from __future__ import annotations

from typing import Optional

from .constants import DEFAULT_SALT, DEFAULT_PRIMITIVE
from .errors import InvalidRequest
from .hashutil import KeyedHash, get_primitive


_CHAIN_PREFIX = b"\x00"


def extended_hash(primitive: KeyedHash, key: bytes, message: bytes, length: int) -> bytes:
    """Hash ``message`` under ``key`` into exactly ``length`` bytes.

    Args:
        primitive: Keyed hash descriptor (see :mod:`seedstream.hashutil`).
        key: Key bytes; oversized keys are pre-hashed by the primitive.
        message: Message to absorb in the first block.
        length: Number of output bytes (must be >= 1).

    Raises:
        InvalidRequest: If ``length`` is not a positive integer.
    """
    if not isinstance(length, int) or isinstance(length, bool) or length <= 0:
        raise InvalidRequest(f"Output length must be a positive integer, got {length!r}")
    blocks = -(-length // primitive.digest_size)
    h = primitive(key, _CHAIN_PREFIX + bytes(message))
    out = bytearray(h)
    for _ in range(1, blocks):
        h = primitive(key, _CHAIN_PREFIX + h)
        out += h
    return bytes(out[:length])


def derive(
    seed: bytes,
    salt: Optional[bytes] = None,
    length: int = 32,
    primitive: str | KeyedHash = DEFAULT_PRIMITIVE,
) -> bytes:
    """One-shot KDF: ``extended_hash(P, salt, seed, length)`` with the public default salt."""
    return extended_hash(get_primitive(primitive), DEFAULT_SALT if salt is None else salt, seed, length)
