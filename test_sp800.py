from __future__ import annotations

import hashlib
import hmac
import unittest

from seedstream.constants import DEFAULT_SALT, DOMAIN_SP800, SP800_MAX_REQUEST_BYTES
from seedstream.errors import (
    EntropyExhausted,
    EntropySourceReused,
    GeneratorClosed,
    InvalidRequest,
    SeedTooWeak,
)
from seedstream.sp800 import FixedEntropySource, HmacDRBG, SP800Generator


SEED = bytes(range(32))
SALT = b"sp800-nonce"


def _reference_hmac_drbg(entropy: bytes, nonce: bytes, pers: bytes, lengths):
    """Plain SP 800-90A HMAC_DRBG (SHA-512, no additional input)."""

    def update(k, v, provided):
        k = hmac.new(k, v + b"\x00" + provided, hashlib.sha512).digest()
        v = hmac.new(k, v, hashlib.sha512).digest()
        if provided:
            k = hmac.new(k, v + b"\x01" + provided, hashlib.sha512).digest()
            v = hmac.new(k, v, hashlib.sha512).digest()
        return k, v

    k, v = update(b"\x00" * 64, b"\x01" * 64, entropy + nonce + pers)
    outs = []
    for n in lengths:
        temp = b""
        while len(temp) < n:
            v = hmac.new(k, v, hashlib.sha512).digest()
            temp += v
        k, v = update(k, v, b"")
        outs.append(temp[:n])
    return outs


class FixedEntropySourceTests(unittest.TestCase):
    def test_hands_out_whole_chunks(self):
        seed = bytes(range(70))
        src = FixedEntropySource(seed)
        self.assertEqual(src.chunk_size, 32)
        self.assertEqual(src.remaining_chunks(), 2)
        self.assertEqual(src.get_entropy(), seed[:32])
        self.assertEqual(src.get_entropy(), seed[32:64])
        self.assertEqual(src.remaining_chunks(), 0)
        # trailing 6 bytes are never handed out
        with self.assertRaises(EntropyExhausted):
            src.get_entropy()
        with self.assertRaises(EntropyExhausted):
            src.get_entropy()

    def test_attach_once(self):
        src = FixedEntropySource(SEED)
        self.assertFalse(src.attached)
        src.attach()
        self.assertTrue(src.attached)
        with self.assertRaises(EntropySourceReused):
            src.attach()

    def test_limits(self):
        with self.assertRaises(SeedTooWeak):
            FixedEntropySource(b"x" * 31)
        with self.assertRaises(ValueError):
            FixedEntropySource(SEED, chunk_size=16)


class HmacDRBGTests(unittest.TestCase):
    def test_matches_reference(self):
        lengths = [64, 1, 200]
        drbg = HmacDRBG(SEED, nonce=SALT, personalization=b"pers")
        self.assertEqual(
            [drbg.generate(n) for n in lengths],
            _reference_hmac_drbg(SEED, SALT, b"pers", lengths),
        )

    def test_rfc6979_p256_sha512_nonce(self):
        # RFC 6979 A.2.5: k for P-256, SHA-512, "sample" is the first output of
        # HMAC_DRBG-SHA-512 instantiated with int2octets(x) || bits2octets(h1)
        q = 0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551
        x = bytes.fromhex("C9AFA9D845BA75166B5C215767B1D6934E50C3DB36E89B127B8A622B120F6721")
        h1 = hashlib.sha512(b"sample").digest()
        z = int.from_bytes(h1[:32], "big") % q
        drbg = HmacDRBG(x + z.to_bytes(32, "big"))
        self.assertEqual(
            drbg.generate(32),
            bytes.fromhex("5FA81C63109BADB88C1F367B47DA606DA28CAD69AA22C4FE6AD7DF73A7173AA5"),
        )

    def test_request_limits(self):
        drbg = HmacDRBG(SEED)
        with self.assertRaises(InvalidRequest):
            drbg.generate(SP800_MAX_REQUEST_BYTES + 1)
        with self.assertRaises(InvalidRequest):
            drbg.generate(0)
        self.assertEqual(len(drbg.generate(SP800_MAX_REQUEST_BYTES)), SP800_MAX_REQUEST_BYTES)

    def test_reseed_counter(self):
        drbg = HmacDRBG(SEED, reseed_interval=1)
        drbg.generate(8)
        self.assertTrue(drbg.needs_reseed())
        with self.assertRaises(EntropyExhausted):
            drbg.generate(8)
        drbg.reseed(bytes(32))
        self.assertFalse(drbg.needs_reseed())
        self.assertEqual(len(drbg.generate(8)), 8)

    def test_rejects_short_entropy(self):
        with self.assertRaises(SeedTooWeak):
            HmacDRBG(b"e" * 16)
        drbg = HmacDRBG(SEED)
        with self.assertRaises(SeedTooWeak):
            drbg.reseed(b"e" * 16)


class SP800GeneratorTests(unittest.TestCase):
    def test_instantiation_uses_salt_and_domain(self):
        gen = SP800Generator(SEED, SALT)
        self.assertEqual(gen.next(100), _reference_hmac_drbg(SEED, SALT, DOMAIN_SP800, [100])[0])

    def test_default_nonce(self):
        self.assertEqual(SP800Generator(SEED).next(48), SP800Generator(SEED, DEFAULT_SALT).next(48))

    def test_deterministic(self):
        a = SP800Generator(SEED, SALT)
        b = SP800Generator(SEED, SALT)
        for n in (1, 64, 65, 1000):
            self.assertEqual(a.next(n), b.next(n))

    def test_source_reuse_rejected(self):
        src = FixedEntropySource(bytes(range(64)))
        SP800Generator(src)
        with self.assertRaises(EntropySourceReused):
            SP800Generator(src)

    def test_weak_seed(self):
        with self.assertRaises(SeedTooWeak):
            SP800Generator(b"k" * 31)

    def test_exhaustion_without_spare_chunks(self):
        gen = SP800Generator(SEED, reseed_interval=2)
        gen.next(16)
        gen.next(16)
        with self.assertRaises(EntropyExhausted):
            gen.next(16)
        # permanent
        with self.assertRaises(EntropyExhausted):
            gen.next(1)

    def test_reseeds_from_next_chunk(self):
        gen = SP800Generator(bytes(range(64)), reseed_interval=2)
        outputs = [gen.next(16) for _ in range(4)]
        self.assertEqual(len(set(outputs)), 4)
        with self.assertRaises(EntropyExhausted):
            gen.next(16)

    def test_large_request_is_split(self):
        n = 2 * SP800_MAX_REQUEST_BYTES + 5
        out = SP800Generator(SEED, SALT).next(n)
        self.assertEqual(len(out), n)
        self.assertEqual(out, SP800Generator(SEED, SALT).next(n))
        # first DRBG call of the split request is a full-size generate
        drbg = HmacDRBG(SEED, nonce=SALT, personalization=DOMAIN_SP800)
        self.assertEqual(out[:SP800_MAX_REQUEST_BYTES], drbg.generate(SP800_MAX_REQUEST_BYTES))

    def test_oversized_request_fails_before_drawing(self):
        gen = SP800Generator(SEED, SALT, reseed_interval=1)
        with self.assertRaises(EntropyExhausted):
            gen.next(SP800_MAX_REQUEST_BYTES + 1)
        # nothing was consumed by the failed request
        self.assertEqual(gen.next(10), SP800Generator(SEED, SALT).next(10))

    def test_close(self):
        gen = SP800Generator(SEED)
        gen.close()
        with self.assertRaises(GeneratorClosed):
            gen.next(1)
        with self.assertRaises(InvalidRequest):
            SP800Generator(SEED).next(0)


if __name__ == "__main__":
    unittest.main()
