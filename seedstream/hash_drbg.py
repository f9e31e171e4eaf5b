from __future__ import annotations

from typing import Optional

from .constants import DEFAULT_SALT, DEFAULT_PRIMITIVE, MIN_SEED_SIZE
from .generator import ByteGenerator, check_seed
from .hashutil import KeyedHash, get_primitive
from .kdf import extended_hash


class HashDRBG(ByteGenerator):
    """Hash DRBG keeping a rolling (K, V) register of the primitive's digest size.

    Seeding:   K = P(salt, 0x00 || seed);  V = P(K, 0x01 || salt)
    Generate:  out = ExtendedHash(P, K, 0x00 || V, n + d)
               return out[:n];  V' = out[n:];  K = P(K, 0x01 || V');  V = V'

    K and V never leave the instance. Every request re-keys, so splitting one
    request into two changes every byte after the first split point, while
    the first request's bytes equal the prefix of the unsplit request.
    There is no reseed; build a new instance from fresh seed material.
    """

    name = "hash-drbg"

    def __init__(
        self,
        seed: bytes,
        salt: Optional[bytes] = None,
        primitive: str | KeyedHash = DEFAULT_PRIMITIVE,
    ):
        super().__init__()
        seed = check_seed(seed, MIN_SEED_SIZE)
        salt = DEFAULT_SALT if salt is None else bytes(salt)
        self._hash = get_primitive(primitive)
        self._k = self._hash(salt, b"\x00" + seed)
        self._v = self._hash(self._k, b"\x01" + salt)

    @property
    def primitive(self) -> KeyedHash:
        return self._hash

    def _generate(self, n: int) -> bytes:
        output = extended_hash(self._hash, self._k, b"\x00" + self._v, n + self._hash.digest_size)
        new_v = output[n:]
        self._k = self._hash(self._k, b"\x01" + new_v)
        self._v = new_v
        return output[:n]

    def _wipe(self) -> None:
        self._k = b""
        self._v = b""
