from __future__ import annotations

import hashlib
import hmac
import threading
from typing import Optional, Union

from .constants import (
    DEFAULT_SALT,
    DOMAIN_SP800,
    SP800_MAX_REQUEST_BYTES,
    SP800_MIN_SEED_SIZE,
    SP800_RESEED_INTERVAL,
)
from .errors import EntropyExhausted, EntropySourceReused, InvalidRequest, SeedTooWeak
from .generator import ByteGenerator, check_seed


OUTLEN = 64  # SHA-512


class FixedEntropySource:
    """Single-use entropy source that hands out a seed in fixed-size chunks.

    Each ``get_entropy()`` returns the next ``chunk_size`` bytes of the seed.
    A trailing partial chunk is never handed out. Once drained the source
    fails permanently with :class:`EntropyExhausted`. A source may be attached
    to exactly one DRBG; a second ``attach()`` raises :class:`EntropySourceReused`.
    """

    def __init__(self, seed: bytes, chunk_size: int = SP800_MIN_SEED_SIZE):
        if chunk_size < SP800_MIN_SEED_SIZE:
            raise ValueError(f"chunk_size must be at least {SP800_MIN_SEED_SIZE} bytes")
        self._data = check_seed(seed, chunk_size)
        self._chunk_size = chunk_size
        self._offset = 0
        self._attached = False
        self._lock = threading.Lock()

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def attached(self) -> bool:
        return self._attached

    def remaining_chunks(self) -> int:
        return (len(self._data) - self._offset) // self._chunk_size

    def attach(self) -> None:
        with self._lock:
            if self._attached:
                raise EntropySourceReused("Fixed entropy source is already attached to a DRBG")
            self._attached = True

    def get_entropy(self) -> bytes:
        with self._lock:
            end = self._offset + self._chunk_size
            if end > len(self._data):
                self._data = b""
                self._offset = 0
                raise EntropyExhausted("Fixed entropy source is exhausted")
            chunk = self._data[self._offset : end]
            self._offset = end
            return chunk


class HmacDRBG:
    """NIST SP 800-90A HMAC_DRBG over HMAC-SHA-512 (no prediction resistance).

    ``generate`` refuses to run once the reseed counter passes
    ``reseed_interval``; the owner must call ``reseed`` with fresh entropy.
    """

    def __init__(
        self,
        entropy: bytes,
        nonce: bytes = b"",
        personalization: bytes = b"",
        reseed_interval: int = SP800_RESEED_INTERVAL,
    ):
        if len(entropy) < SP800_MIN_SEED_SIZE:
            raise SeedTooWeak(f"Entropy input must be at least {SP800_MIN_SEED_SIZE} bytes")
        if reseed_interval < 1 or reseed_interval > SP800_RESEED_INTERVAL:
            raise ValueError(f"reseed_interval must be in [1, 2**48], got {reseed_interval}")
        self.reseed_interval = reseed_interval
        self._k = b"\x00" * OUTLEN
        self._v = b"\x01" * OUTLEN
        self._update(bytes(entropy) + bytes(nonce) + bytes(personalization))
        self.reseed_counter = 1

    def _hmac(self, key: bytes, data: bytes) -> bytes:
        return hmac.new(key, data, hashlib.sha512).digest()

    def _update(self, provided: bytes = b"") -> None:
        self._k = self._hmac(self._k, self._v + b"\x00" + provided)
        self._v = self._hmac(self._k, self._v)
        if provided:
            self._k = self._hmac(self._k, self._v + b"\x01" + provided)
            self._v = self._hmac(self._k, self._v)

    def needs_reseed(self) -> bool:
        return self.reseed_counter > self.reseed_interval

    def reseed(self, entropy: bytes, additional: bytes = b"") -> None:
        if len(entropy) < SP800_MIN_SEED_SIZE:
            raise SeedTooWeak(f"Entropy input must be at least {SP800_MIN_SEED_SIZE} bytes")
        self._update(bytes(entropy) + bytes(additional))
        self.reseed_counter = 1

    def generate(self, n: int, additional: bytes = b"") -> bytes:
        if n <= 0 or n > SP800_MAX_REQUEST_BYTES:
            raise InvalidRequest(f"HMAC_DRBG request must be 1..{SP800_MAX_REQUEST_BYTES} bytes, got {n}")
        if self.needs_reseed():
            raise EntropyExhausted("HMAC_DRBG reseed required")
        if additional:
            self._update(additional)
        out = bytearray()
        while len(out) < n:
            self._v = self._hmac(self._k, self._v)
            out += self._v
        self._update(additional)
        self.reseed_counter += 1
        return bytes(out[:n])

    def wipe(self) -> None:
        self._k = b""
        self._v = b""


class SP800Generator(ByteGenerator):
    """HMAC_DRBG driven by a :class:`FixedEntropySource` built from the seed.

    Instantiation takes the first entropy chunk, the salt as nonce and a fixed
    personalization string. Requests above the SP 800-90A per-call limit are
    split across several DRBG calls. When the reseed interval elapses the next
    chunk of the fixed source is used; a request the remaining chunks cannot
    cover fails with :class:`EntropyExhausted` before any state changes.
    """

    name = "sp800-drbg"

    def __init__(
        self,
        seed: Union[bytes, FixedEntropySource],
        salt: Optional[bytes] = None,
        reseed_interval: int = SP800_RESEED_INTERVAL,
    ):
        super().__init__()
        source = seed if isinstance(seed, FixedEntropySource) else FixedEntropySource(seed)
        source.attach()
        self._source = source
        nonce = DEFAULT_SALT if salt is None else bytes(salt)
        self._drbg = HmacDRBG(
            source.get_entropy(),
            nonce=nonce,
            personalization=DOMAIN_SP800,
            reseed_interval=reseed_interval,
        )

    def _reseeds_needed(self, calls: int) -> int:
        interval = self._drbg.reseed_interval
        before_reseed = max(0, interval - self._drbg.reseed_counter + 1)
        if calls <= before_reseed:
            return 0
        return -(-(calls - before_reseed) // interval)

    def _generate(self, n: int) -> bytes:
        calls = -(-n // SP800_MAX_REQUEST_BYTES)
        if self._reseeds_needed(calls) > self._source.remaining_chunks():
            raise EntropyExhausted("Fixed entropy source cannot supply the reseeds this request needs")
        out = bytearray()
        while len(out) < n:
            if self._drbg.needs_reseed():
                self._drbg.reseed(self._source.get_entropy())
            take = min(n - len(out), SP800_MAX_REQUEST_BYTES)
            out += self._drbg.generate(take)
        return bytes(out)

    def _wipe(self) -> None:
        self._drbg.wipe()
