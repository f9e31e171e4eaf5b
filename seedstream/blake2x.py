"""BLAKE2Xs extendable-output construction on top of ``hashlib.blake2s``.

The keyed root hash H0 is computed by ``hashlib.blake2s``: the BLAKE2Xs XOF
length field occupies the upper 16 bits of BLAKE2s' 48-bit node offset, so the
root parameter block is expressible directly. Output nodes require a maximal
depth of 0, which hashlib rejects, so they go through the single-block BLAKE2s
compression below. Only unknown-length mode (XOF length 0xFFFF) is provided;
it allows 2**32 output blocks of 32 bytes.
"""

from __future__ import annotations

import hashlib
from typing import Optional

from .errors import EntropyExhausted


_MASK = 0xFFFFFFFF

_IV = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

_SIGMA = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15),
    (14, 10, 4, 8, 9, 15, 13, 6, 1, 12, 0, 2, 11, 7, 5, 3),
    (11, 8, 12, 0, 5, 2, 15, 13, 10, 14, 3, 6, 7, 1, 9, 4),
    (7, 9, 3, 1, 13, 12, 11, 14, 2, 6, 5, 10, 4, 0, 15, 8),
    (9, 0, 5, 7, 2, 4, 10, 15, 14, 1, 11, 12, 6, 8, 3, 13),
    (2, 12, 6, 10, 0, 11, 8, 3, 4, 13, 7, 5, 15, 14, 1, 9),
    (12, 5, 1, 15, 14, 13, 4, 10, 0, 7, 6, 3, 9, 2, 8, 11),
    (13, 11, 7, 14, 12, 1, 3, 9, 5, 0, 15, 4, 8, 6, 2, 10),
    (6, 15, 14, 9, 11, 3, 0, 8, 12, 2, 13, 7, 1, 4, 10, 5),
    (10, 2, 8, 4, 7, 6, 1, 5, 15, 11, 9, 14, 3, 12, 13, 0),
)

BLOCK_SIZE = 64
OUT_SIZE = 32
KEY_SIZE = 32
SALT_SIZE = 8
PERSON_SIZE = 8
UNKNOWN_LENGTH = 0xFFFF
MAX_BLOCKS = 1 << 32


def _rotr32(v: int, n: int) -> int:
    return (v >> n) | ((v << (32 - n)) & _MASK)


def _mix(v: list[int], a: int, b: int, c: int, d: int, x: int, y: int) -> None:
    v[a] = (v[a] + v[b] + x) & _MASK
    v[d] = _rotr32(v[d] ^ v[a], 16)
    v[c] = (v[c] + v[d]) & _MASK
    v[b] = _rotr32(v[b] ^ v[c], 12)
    v[a] = (v[a] + v[b] + y) & _MASK
    v[d] = _rotr32(v[d] ^ v[a], 8)
    v[c] = (v[c] + v[d]) & _MASK
    v[b] = _rotr32(v[b] ^ v[c], 7)


def _param_block(
    digest_size: int,
    *,
    key_size: int = 0,
    fanout: int = 0,
    depth: int = 0,
    leaf_size: int = 0,
    node_offset: int = 0,
    xof_length: int = 0,
    node_depth: int = 0,
    inner_size: int = 0,
    salt: bytes = b"",
    person: bytes = b"",
) -> bytes:
    return (
        bytes([digest_size, key_size, fanout, depth])
        + leaf_size.to_bytes(4, "little")
        + node_offset.to_bytes(4, "little")
        + xof_length.to_bytes(2, "little")
        + bytes([node_depth, inner_size])
        + salt.ljust(SALT_SIZE, b"\x00")
        + person.ljust(PERSON_SIZE, b"\x00")
    )


def _blake2s_single_block(param: bytes, data: bytes, digest_size: int) -> bytes:
    """Unkeyed BLAKE2s of at most one 64-byte block under a raw parameter block."""
    if len(data) > BLOCK_SIZE:
        raise ValueError("single-block BLAKE2s takes at most 64 bytes")
    h = [_IV[i] ^ int.from_bytes(param[4 * i : 4 * i + 4], "little") for i in range(8)]
    block = data.ljust(BLOCK_SIZE, b"\x00")
    m = [int.from_bytes(block[4 * i : 4 * i + 4], "little") for i in range(16)]

    v = h + list(_IV)
    v[12] ^= len(data)
    v[14] ^= _MASK  # final block

    for s in _SIGMA:
        _mix(v, 0, 4, 8, 12, m[s[0]], m[s[1]])
        _mix(v, 1, 5, 9, 13, m[s[2]], m[s[3]])
        _mix(v, 2, 6, 10, 14, m[s[4]], m[s[5]])
        _mix(v, 3, 7, 11, 15, m[s[6]], m[s[7]])
        _mix(v, 0, 5, 10, 15, m[s[8]], m[s[9]])
        _mix(v, 1, 6, 11, 12, m[s[10]], m[s[11]])
        _mix(v, 2, 7, 8, 13, m[s[12]], m[s[13]])
        _mix(v, 3, 4, 9, 14, m[s[14]], m[s[15]])

    words = [h[i] ^ v[i] ^ v[i + 8] for i in range(8)]
    return b"".join(w.to_bytes(4, "little") for w in words)[:digest_size]


class Blake2Xs:
    """Incremental BLAKE2Xs XOF: ``update()`` the message, then ``read()`` output.

    ``read`` calls are catenable. Once the first byte has been read the
    message can no longer be extended.
    """

    def __init__(self, key: bytes = b"", salt: bytes = b"", person: bytes = b""):
        if len(key) > KEY_SIZE:
            raise ValueError("BLAKE2Xs key must be at most 32 bytes")
        if len(salt) > SALT_SIZE:
            raise ValueError("BLAKE2Xs salt must be at most 8 bytes")
        if len(person) > PERSON_SIZE:
            raise ValueError("BLAKE2Xs personalization must be at most 8 bytes")
        self._salt = bytes(salt)
        self._person = bytes(person)
        self._root: Optional["hashlib._Hash"] = hashlib.blake2s(
            digest_size=OUT_SIZE,
            key=key,
            salt=salt,
            person=person,
            node_offset=UNKNOWN_LENGTH << 32,
        )
        self._h0: Optional[bytes] = None
        self._block = 0
        self._pending = b""

    def update(self, data: bytes) -> "Blake2Xs":
        if self._root is None:
            raise TypeError("update() cannot be called after read()")
        self._root.update(data)
        return self

    def available(self) -> int:
        return len(self._pending) + (MAX_BLOCKS - self._block) * OUT_SIZE

    def read(self, n: int) -> bytes:
        if n > self.available():
            raise EntropyExhausted("BLAKE2Xs output space exhausted")
        if self._h0 is None:
            self._h0 = self._root.digest()
            self._root = None
        out = bytearray(self._pending[:n])
        self._pending = self._pending[n:]
        while len(out) < n:
            chunk = self._output_block(self._block)
            self._block += 1
            take = n - len(out)
            out += chunk[:take]
            self._pending = chunk[take:]
        return bytes(out)

    def _output_block(self, index: int) -> bytes:
        param = _param_block(
            OUT_SIZE,
            leaf_size=OUT_SIZE,
            node_offset=index,
            xof_length=UNKNOWN_LENGTH,
            inner_size=OUT_SIZE,
            salt=self._salt,
            person=self._person,
        )
        return _blake2s_single_block(param, self._h0, OUT_SIZE)


__all__ = [
    "Blake2Xs",
    "MAX_BLOCKS",
    "UNKNOWN_LENGTH",
]
