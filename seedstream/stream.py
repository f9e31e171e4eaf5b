from __future__ import annotations

from typing import Optional

try:  # pragma: no cover - optional dependency at runtime
    from Cryptodome.Cipher import AES  # type: ignore
    _HAS_CRYPTODOME = True
except ImportError:  # pragma: no cover - fallback
    AES = None  # type: ignore
    _HAS_CRYPTODOME = False

from .constants import DEFAULT_IV, MIN_SEED_SIZE
from .generator import ByteGenerator, check_seed
from .hashutil import blake2s_digest, fit_exact


KEY_SIZE = 32
BLOCK_SIZE = 16


def _ensure_backend() -> None:
    if not _HAS_CRYPTODOME:
        raise RuntimeError("PyCryptodomex is required for the AES-OFB stream generator")


class StreamCipherGenerator(ByteGenerator):
    """AES-256 in OFB mode over a constant zero plaintext.

    The key is the seed when it is exactly 32 bytes, otherwise BLAKE2s-256 of
    the seed. The IV is BLAKE2s-128 of the salt, or the fixed ``DEFAULT_IV``
    when no salt is given. The keystream is exactly catenable:
    ``next(a) + next(b) == next(a + b)`` on fresh instances.
    """

    name = "stream-cipher"

    def __init__(self, seed: bytes, salt: Optional[bytes] = None):
        super().__init__()
        _ensure_backend()
        seed = check_seed(seed, MIN_SEED_SIZE)
        key = fit_exact(seed, KEY_SIZE)
        iv = DEFAULT_IV if salt is None else blake2s_digest(salt, BLOCK_SIZE)
        self._cipher = AES.new(key, AES.MODE_OFB, iv=iv)

    def _generate(self, n: int) -> bytes:
        return self._cipher.encrypt(bytes(n))

    def _wipe(self) -> None:
        self._cipher = None
