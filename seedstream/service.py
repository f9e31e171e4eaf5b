from __future__ import annotations

import asyncio
from typing import Optional

from .errors import GeneratorClosed
from .generator import ByteGenerator, check_length


class GeneratorService:
    """Serve one generator through a bounded request queue.

    Every ``await request(n)`` enqueues ``(n, future)`` and waits on its own
    future, so each caller receives exactly the response to its own request.
    A caller that is cancelled or times out (``asyncio.wait_for``) abandons
    its future: a request not yet served is skipped without drawing output,
    and one already in flight is drawn and discarded. ``close()`` stops the
    serving task after the queued requests and closes the generator; later
    requests raise :class:`GeneratorClosed`. Generator errors are re-raised
    in the awaiting caller.
    """

    def __init__(self, generator: ByteGenerator):
        self._gen = generator
        self._requests: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def _serve(self) -> None:
        while True:
            item = await self._requests.get()
            if item is None:
                break
            n, fut = item
            if fut.done():
                continue  # abandoned before it was served
            try:
                # may block on system entropy; keep the loop responsive
                data = await asyncio.to_thread(self._gen.next, n)
            except Exception as exc:
                if not fut.done():
                    fut.set_exception(exc)
            else:
                if not fut.done():
                    fut.set_result(data)
        self._gen.close()

    async def request(self, n: int) -> bytes:
        check_length(n)
        if self._closed:
            raise GeneratorClosed("Generator service is closed")
        if self._task is None:
            self._task = asyncio.create_task(self._serve())
        fut = asyncio.get_running_loop().create_future()
        await self._requests.put((n, fut))
        return await fut

    async def close(self) -> None:
        if self._closed:
            if self._task is not None:
                await self._task
            return
        self._closed = True
        if self._task is None:
            self._gen.close()
            return
        await self._requests.put(None)
        await self._task

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
        return False
