"""Unbiased integers and samples drawn from any :class:`ByteGenerator`.

Every bounded draw uses rejection sampling over the minimal bit width of the
bound, never modulo reduction, so results carry no modulo bias and the
expected number of draws stays below two.

Bounds are *inclusive*: ``random_bounded_int(gen, m)`` returns a value in
``[0, m]``. ``random_in_range`` and ``random_element`` are built on that
convention; note it differs from the exclusive upper bounds of
``random.randrange`` and ``secrets.randbelow``.
"""

from __future__ import annotations

from typing import Sequence, TypeVar

from .errors import EmptyCollection, InvalidBound, InvalidRequest
from .generator import ByteGenerator


T = TypeVar("T")

_UNIT_BITS = 53
_UNIT_MAX = (1 << _UNIT_BITS) - 1


def random_bits(gen: ByteGenerator, nbits: int) -> bytes:
    """Draw ``ceil(nbits / 8)`` bytes, big-endian, with unused high bits of the first byte cleared."""
    if not isinstance(nbits, int) or isinstance(nbits, bool) or nbits <= 0:
        raise InvalidRequest(f"nbits must be a positive integer, got {nbits!r}")
    raw = bytearray(gen.next((nbits + 7) // 8))
    extra = nbits % 8
    if extra:
        raw[0] &= (1 << extra) - 1
    return bytes(raw)


def _bounded(gen: ByteGenerator, max_inclusive: int) -> int:
    if max_inclusive == 0:
        return 0
    bits = max_inclusive.bit_length()
    while True:
        v = int.from_bytes(random_bits(gen, bits), "big")
        if v <= max_inclusive:
            return v


def random_bounded_int(gen: ByteGenerator, max_inclusive: int) -> int:
    """Uniform integer in ``[0, max_inclusive]``; ``max_inclusive`` must be > 0."""
    if not isinstance(max_inclusive, int) or isinstance(max_inclusive, bool) or max_inclusive <= 0:
        raise InvalidBound(f"Max value must be a positive integer, got {max_inclusive!r}")
    return _bounded(gen, max_inclusive)


def random_in_range(gen: ByteGenerator, lo: int, hi: int) -> int:
    """Uniform integer in ``[lo, hi]``. ``lo == hi`` returns ``lo`` without drawing."""
    if hi < lo:
        raise InvalidBound(f"Range upper bound {hi} is below lower bound {lo}")
    return lo + _bounded(gen, hi - lo)


def random_element(gen: ByteGenerator, collection: Sequence[T]) -> T:
    """Uniformly chosen element of an indexable, non-empty collection."""
    size = len(collection)
    if size == 0:
        raise EmptyCollection("Cannot choose from an empty collection")
    return collection[_bounded(gen, size - 1)]


def random_unit(gen: ByteGenerator) -> float:
    # closed interval [0.0, 1.0]
    v = int.from_bytes(random_bits(gen, _UNIT_BITS), "big")
    return v / _UNIT_MAX


class RejectionSampler:
    """Binds the sampling functions to one generator."""

    def __init__(self, gen: ByteGenerator):
        self.gen = gen

    def bits(self, nbits: int) -> bytes:
        return random_bits(self.gen, nbits)

    def bounded_int(self, max_inclusive: int) -> int:
        return random_bounded_int(self.gen, max_inclusive)

    def in_range(self, lo: int, hi: int) -> int:
        return random_in_range(self.gen, lo, hi)

    def element(self, collection: Sequence[T]) -> T:
        return random_element(self.gen, collection)

    def unit(self) -> float:
        return random_unit(self.gen)
