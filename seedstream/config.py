from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constants import (
    BACKENDS,
    BACKEND_HASH_DRBG,
    BACKEND_SP800_DRBG,
    BACKEND_STREAM_CIPHER,
    BACKEND_SYSTEM,
    BACKEND_XOF_BLAKE2XS,
    BACKEND_XOF_BLAKE3,
    BACKEND_XOF_KMAC,
    DEFAULT_PRIMITIVE,
    MIN_SEED_SIZE,
)
from .generator import ByteGenerator, SystemGenerator, check_seed
from .hash_drbg import HashDRBG
from .kdf import derive
from .sp800 import SP800Generator
from .stream import StreamCipherGenerator
from .xof import Blake2XsGenerator, Blake3Generator, KmacGenerator


_SEEDED = {
    BACKEND_STREAM_CIPHER: StreamCipherGenerator,
    BACKEND_XOF_BLAKE2XS: Blake2XsGenerator,
    BACKEND_XOF_BLAKE3: Blake3Generator,
    BACKEND_XOF_KMAC: KmacGenerator,
    BACKEND_SP800_DRBG: SP800Generator,
}


@dataclass
class GeneratorConfig:
    backend: str = BACKEND_SYSTEM
    seed: Optional[bytes] = None
    salt: Optional[bytes] = None
    primitive: str = DEFAULT_PRIMITIVE
    output_length: Optional[int] = None

    def __repr__(self) -> str:
        # never echo secret material
        seed = "None" if self.seed is None else f"<{len(self.seed)} bytes>"
        return (
            f"GeneratorConfig(backend={self.backend!r}, seed={seed}, "
            f"salt={self.salt!r}, primitive={self.primitive!r}, output_length={self.output_length!r})"
        )


def new_generator(
    backend: str = BACKEND_SYSTEM,
    seed: Optional[bytes] = None,
    salt: Optional[bytes] = None,
    primitive: str = DEFAULT_PRIMITIVE,
) -> ByteGenerator:
    """Build the :class:`ByteGenerator` named by ``backend``.

    Args:
        backend: One of :data:`seedstream.constants.BACKENDS`.
        seed: Secret seed; required by every backend except ``system``.
        salt: Optional domain-separation salt (public default when omitted).
        primitive: Keyed hash used by ``hash-drbg``; ignored elsewhere.

    Raises:
        ValueError: Unknown backend or primitive.
        SeedTooWeak: Missing or too-short seed for a seeded backend.
    """
    if backend == BACKEND_SYSTEM:
        return SystemGenerator()
    if backend == BACKEND_HASH_DRBG:
        return HashDRBG(seed, salt, primitive=primitive)
    try:
        cls = _SEEDED[backend]
    except KeyError:
        raise ValueError(f"Unknown backend {backend!r}; expected one of {', '.join(BACKENDS)}") from None
    return cls(seed, salt)


def create_generator(config: GeneratorConfig) -> ByteGenerator:
    return new_generator(config.backend, config.seed, config.salt, config.primitive)


def derive_from_config(config: GeneratorConfig) -> bytes:
    """One-shot KDF output of ``config.output_length`` bytes (default 32)."""
    seed = check_seed(config.seed, MIN_SEED_SIZE)
    length = 32 if config.output_length is None else config.output_length
    return derive(seed, config.salt, length, config.primitive)
