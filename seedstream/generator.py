from __future__ import annotations

import secrets
import threading
from typing import Optional

from .errors import GeneratorClosed, InvalidRequest, SeedTooWeak


def check_seed(seed: Optional[bytes], minimum: int) -> bytes:
    if seed is None:
        raise SeedTooWeak("A seed is required for this backend")
    if len(seed) < minimum:
        raise SeedTooWeak(f"Seed must be at least {minimum} bytes, got {len(seed)}")
    return bytes(seed)


def check_length(n) -> int:
    if not isinstance(n, int) or isinstance(n, bool) or n <= 0:
        raise InvalidRequest(f"Requested length must be a positive integer, got {n!r}")
    return n


class ByteGenerator:
    """Stateful source of pseudo-random bytes.

    ``next(n)`` returns exactly ``n`` fresh bytes and advances the internal
    state irreversibly. Calls on one instance are serialized by a lock; after
    ``close()`` every call raises :class:`GeneratorClosed`. Subclasses
    implement ``_generate`` and ``_wipe``.
    """

    name = "abstract"
    deterministic = True

    def __init__(self):
        self._lock = threading.Lock()
        self._closed = False

    def next(self, n: int) -> bytes:
        check_length(n)
        with self._lock:
            if self._closed:
                raise GeneratorClosed(f"{self.name} generator is closed")
            return self._generate(n)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._wipe()

    @property
    def closed(self) -> bool:
        return self._closed

    def _generate(self, n: int) -> bytes:
        raise NotImplementedError

    def _wipe(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<{type(self).__name__} {self.name} {state}>"


class SystemGenerator(ByteGenerator):
    """Platform CSPRNG (``secrets``); non-deterministic, never reproducible."""

    name = "system"
    deterministic = False

    def _generate(self, n: int) -> bytes:
        return secrets.token_bytes(n)
