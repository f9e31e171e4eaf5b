from __future__ import annotations

import asyncio
import time
import unittest

from seedstream.errors import EntropyExhausted, GeneratorClosed, InvalidRequest
from seedstream.generator import ByteGenerator
from seedstream.hash_drbg import HashDRBG
from seedstream.service import GeneratorService
from seedstream.sp800 import SP800Generator


SEED = bytes(range(32))


class SlowGenerator(ByteGenerator):
    """Sleeps ``delay`` seconds per call; call k returns ``n`` copies of byte k."""

    name = "slow"

    def __init__(self, delay: float = 0.2):
        super().__init__()
        self.delay = delay
        self.calls = 0

    def _generate(self, n: int) -> bytes:
        time.sleep(self.delay)
        out = bytes([self.calls]) * n
        self.calls += 1
        return out


class GeneratorServiceTests(unittest.IsolatedAsyncioTestCase):
    async def test_responses_follow_request_order(self):
        direct = HashDRBG(SEED, b"svc")
        expected = [direct.next(n) for n in (5, 64, 1, 300)]
        async with GeneratorService(HashDRBG(SEED, b"svc")) as svc:
            got = [await svc.request(n) for n in (5, 64, 1, 300)]
        self.assertEqual(got, expected)

    async def test_concurrent_requests_get_distinct_blocks(self):
        direct = HashDRBG(SEED, b"svc")
        expected = {direct.next(16) for _ in range(8)}
        svc = GeneratorService(HashDRBG(SEED, b"svc"))
        got = await asyncio.gather(*(svc.request(16) for _ in range(8)))
        await svc.close()
        # one response per request, each a distinct step of the generator
        self.assertEqual(set(got), expected)

    async def test_close_closes_generator(self):
        gen = HashDRBG(SEED)
        svc = GeneratorService(gen)
        await svc.request(8)
        await svc.close()
        self.assertTrue(svc.closed)
        self.assertTrue(gen.closed)
        with self.assertRaises(GeneratorClosed):
            await svc.request(8)
        await svc.close()  # idempotent

    async def test_close_before_first_request(self):
        gen = HashDRBG(SEED)
        svc = GeneratorService(gen)
        await svc.close()
        self.assertTrue(gen.closed)
        with self.assertRaises(GeneratorClosed):
            await svc.request(1)

    async def test_generator_errors_reach_caller(self):
        svc = GeneratorService(SP800Generator(SEED, reseed_interval=1))
        self.assertEqual(len(await svc.request(4)), 4)
        with self.assertRaises(EntropyExhausted):
            await svc.request(4)
        # the serving loop survives a failed request
        with self.assertRaises(EntropyExhausted):
            await svc.request(4)
        await svc.close()

    async def test_invalid_length(self):
        async with GeneratorService(HashDRBG(SEED)) as svc:
            with self.assertRaises(InvalidRequest):
                await svc.request(0)
            self.assertEqual(len(await svc.request(3)), 3)

    async def test_caller_timeout(self):
        async with GeneratorService(HashDRBG(SEED)) as svc:
            out = await asyncio.wait_for(svc.request(32), timeout=5)
        self.assertEqual(len(out), 32)

    async def test_timed_out_request_does_not_leak_into_next(self):
        gen = SlowGenerator()
        async with GeneratorService(gen) as svc:
            with self.assertRaises(asyncio.TimeoutError):
                await asyncio.wait_for(svc.request(100), timeout=0.05)
            out = await svc.request(4)
            # the abandoned call was drawn and dropped; this is the next one
            self.assertEqual(out, b"\x01" * 4)
            self.assertEqual(await svc.request(2), b"\x02" * 2)
        self.assertEqual(gen.calls, 3)

    async def test_cancelled_queued_request_is_skipped(self):
        gen = SlowGenerator()
        async with GeneratorService(gen) as svc:
            first = asyncio.create_task(svc.request(8))
            await asyncio.sleep(0.02)
            queued = asyncio.create_task(svc.request(16))
            await asyncio.sleep(0.02)
            queued.cancel()
            with self.assertRaises(asyncio.CancelledError):
                await queued
            self.assertEqual(await first, b"\x00" * 8)
            self.assertEqual(await svc.request(3), b"\x01" * 3)
        self.assertEqual(gen.calls, 2)

    async def test_close_waits_for_request_in_flight(self):
        gen = SlowGenerator(delay=0.05)
        svc = GeneratorService(gen)
        pending = asyncio.create_task(svc.request(5))
        await asyncio.sleep(0.01)
        await svc.close()
        self.assertEqual(await pending, b"\x00" * 5)
        self.assertTrue(gen.closed)


if __name__ == "__main__":
    unittest.main()
