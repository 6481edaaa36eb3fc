from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import datetime, timezone
from typing import AsyncIterator, Callable

from .schemas import MovieEvent


logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MovieEventTicker:
    """Periodic producer of :class:`MovieEvent` for a single movie id.

    A background task emits one event, then sleeps ``interval`` seconds,
    forever. Events are handed to the consumer through a one-slot queue, so
    a slow reader holds the producer back instead of piling up ticks.

    Use it as an async context manager and iterate it::

        async with MovieEventTicker(movie_id, interval=1.0) as ticker:
            async for event in ticker:
                ...

    Leaving the ``async with`` block cancels the producer task. The id is
    echoed as given and is never checked against the catalog.
    """

    def __init__(
        self,
        movie_id: str,
        interval: float = 1.0,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.movie_id = movie_id
        self.interval = interval
        self._clock = clock
        self._queue: asyncio.Queue[MovieEvent] = asyncio.Queue(maxsize=1)
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError("ticker already started")
        self._task = asyncio.create_task(self._run(), name=f"movie-events:{self.movie_id}")

    async def stop(self) -> None:
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug("Stopped event ticker for movie %s", self.movie_id)

    async def _run(self) -> None:
        while True:
            # A tick is built and handed over before the delay starts
            await self._queue.put(MovieEvent(movie_id=self.movie_id, date=self._clock()))
            await asyncio.sleep(self.interval)

    async def __aenter__(self) -> "MovieEventTicker":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    def __aiter__(self) -> "MovieEventTicker":
        return self

    async def __anext__(self) -> MovieEvent:
        if self._task is None:
            raise RuntimeError("ticker not started")
        get = asyncio.ensure_future(self._queue.get())
        try:
            await asyncio.wait({get, self._task}, return_when=asyncio.FIRST_COMPLETED)
        except BaseException:
            get.cancel()
            raise
        if get.done():
            return get.result()
        get.cancel()
        # The producer died: surface its error to this subscription only
        if self._task.cancelled():
            raise StopAsyncIteration
        exc = self._task.exception()
        if exc is not None:
            raise exc
        raise StopAsyncIteration


async def stream_movie_events(movie_id: str, interval: float = 1.0) -> AsyncIterator[MovieEvent]:
    """Yield one event per ``interval`` for ``movie_id`` until the caller stops.

    Every call runs its own ticker, starting from a fresh first tick.
    """
    async with MovieEventTicker(movie_id, interval=interval) as ticker:
        async for event in ticker:
            yield event
