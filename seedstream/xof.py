from __future__ import annotations

from typing import Optional

try:  # pragma: no cover - optional dependency at runtime
    from Cryptodome.Hash import cSHAKE256  # type: ignore
    # private helpers shared by Cryptodome.Hash.KMAC128/KMAC256; pinned below 4.0 in setup.py
    from Cryptodome.Hash.cSHAKE128 import _bytepad, _encode_str, _right_encode  # type: ignore
    _HAS_CRYPTODOME = True
except ImportError:  # pragma: no cover - fallback
    cSHAKE256 = None  # type: ignore
    _HAS_CRYPTODOME = False

try:  # pragma: no cover - optional dependency at runtime
    from blake3 import blake3 as _blake3  # type: ignore
    _HAS_BLAKE3 = True
except ImportError:  # pragma: no cover - fallback
    _blake3 = None  # type: ignore
    _HAS_BLAKE3 = False

from . import blake2x
from .constants import DEFAULT_SALT, DOMAIN_BLAKE2XS, DOMAIN_BLAKE3, DOMAIN_KMAC, MIN_SEED_SIZE
from .generator import ByteGenerator, check_seed
from .hashutil import fit_key


BLAKE3_KEY_SIZE = 32
KMAC256_RATE = 136


class Blake2XsGenerator(ByteGenerator):
    """BLAKE2Xs keyed with the seed, salted with the (compressed) salt."""

    name = "xof-blake2xs"

    def __init__(self, seed: bytes, salt: Optional[bytes] = None):
        super().__init__()
        seed = check_seed(seed, MIN_SEED_SIZE)
        salt = DEFAULT_SALT if salt is None else bytes(salt)
        key = fit_key(seed, blake2x.KEY_SIZE)
        self._xof = blake2x.Blake2Xs(key=key, salt=fit_key(salt, blake2x.SALT_SIZE))
        self._xof.update(DOMAIN_BLAKE2XS)

    def _generate(self, n: int) -> bytes:
        return self._xof.read(n)

    def _wipe(self) -> None:
        self._xof = None


class Blake3Generator(ByteGenerator):
    """Keyed BLAKE3 over the domain constant and salt, read by seeking forward.

    The key is the seed when it is exactly 32 bytes, otherwise ``blake3(seed)``.
    """

    name = "xof-blake3"

    def __init__(self, seed: bytes, salt: Optional[bytes] = None):
        super().__init__()
        if not _HAS_BLAKE3:
            raise RuntimeError("blake3 is required for the BLAKE3 XOF generator")
        seed = check_seed(seed, MIN_SEED_SIZE)
        salt = DEFAULT_SALT if salt is None else bytes(salt)
        key = seed if len(seed) == BLAKE3_KEY_SIZE else _blake3(seed).digest()
        self._hasher = _blake3(DOMAIN_BLAKE3, key=key)
        self._hasher.update(salt)
        self._position = 0

    def _generate(self, n: int) -> bytes:
        out = self._hasher.digest(length=n, seek=self._position)
        self._position += n
        return out

    def _wipe(self) -> None:
        self._hasher = None
        self._position = 0


def kmacxof256(key: bytes, data: bytes = b"", custom: bytes = b""):
    """KMACXOF256(K, X, L=0, S) of NIST SP 800-185, returned as a readable XOF.

    Mirrors ``Cryptodome.Hash.KMAC256``, which is built from the same
    cSHAKE256 helpers; that module has no XOF mode, so the length is encoded
    as ``right_encode(0)`` here.
    """
    if not _HAS_CRYPTODOME:
        raise RuntimeError("PyCryptodomex is required for KMAC support")
    xof = cSHAKE256._new(_bytepad(_encode_str(bytes(key)), KMAC256_RATE), bytes(custom), b"KMAC")
    xof.update(bytes(data))
    xof.update(_right_encode(0))
    return xof


class KmacGenerator(ByteGenerator):
    """KMACXOF256 keyed with the seed, with the salt as customization string."""

    name = "xof-kmac"

    def __init__(self, seed: bytes, salt: Optional[bytes] = None):
        super().__init__()
        if not _HAS_CRYPTODOME:
            raise RuntimeError("PyCryptodomex is required for the KMAC XOF generator")
        seed = check_seed(seed, MIN_SEED_SIZE)
        salt = DEFAULT_SALT if salt is None else bytes(salt)
        self._xof = kmacxof256(fit_key(seed, KMAC256_RATE), DOMAIN_KMAC, fit_key(salt, KMAC256_RATE))

    def _generate(self, n: int) -> bytes:
        return self._xof.read(n)

    def _wipe(self) -> None:
        self._xof = None
