"""Async driver for pollable streams.

``iterate()`` turns any stream into an async iterator. It polls, yields
every ready item, and on ``PENDING`` sleeps on an ``anyio.Event`` that the
poll context's waker sets. A fresh event is created for each poll, so a
wake that fires during the poll itself is never lost.

``open_zip_latest()`` is the high-level entry point for two async feeds::

    async with open_zip_latest(price_ticks(), fx_rates()) as pairs:
        async for price, rate in pairs:
            ...

Each feed is pumped into a ``Channel`` by a task in an anyio task group.
Leaving the block cancels both pumps.
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterable, AsyncIterator
from contextlib import asynccontextmanager

import anyio

from ziplatest.config import ZipConfig
from ziplatest.context import Context, Waker
from ziplatest.poll import Done, Failed, Pending, Ready
from ziplatest.sources import Channel
from ziplatest.stream import Stream
from ziplatest.zip_latest import ZipLatest

logger = logging.getLogger("ziplatest.aio")


async def iterate[T](stream: Stream[T]) -> AsyncGenerator[T, None]:
    """Drive *stream* to completion, yielding its items.

    A ``Failed`` outcome is raised as the original exception. The stream is
    closed (when it supports ``close()``) once iteration ends for any reason.
    """
    try:
        while True:
            wakeup = anyio.Event()
            match stream.poll_next(Context(Waker(wakeup.set))):
                case Ready(value):
                    yield value
                case Done():
                    return
                case Failed(error):
                    raise error
                case Pending():
                    await wakeup.wait()
    finally:
        close = getattr(stream, "close", None)
        if close is not None:
            close()


async def _pump[T](iterable: AsyncIterable[T], feed: Channel[T], side: str) -> None:
    iterator = aiter(iterable)
    try:
        async for value in iterator:
            if feed.closed:
                return
            feed.send(value)
    except Exception as exc:
        logger.debug("%s feed failed: %r", side, exc)
        if not feed.closed:
            feed.fail(exc)
        return
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            with anyio.CancelScope(shield=True):
                await aclose()
    feed.close()


@asynccontextmanager
async def open_zip_latest[L, R](
    left: AsyncIterable[L],
    right: AsyncIterable[R],
    config: ZipConfig | None = None,
) -> AsyncIterator[AsyncIterator[tuple[L, R]]]:
    """Zip two async iterables by latest value.

    Yields an async iterator of ``(left, right)`` pairs. An exception from
    either feed is raised out of the ``async with`` block as-is.

    Args:
        left: First feed.
        right: Second feed.
        config: Optional ``ZipConfig`` for the underlying ``ZipLatest``.
    """
    left_feed: Channel[L] = Channel()
    right_feed: Channel[R] = Channel()
    pairs = iterate(ZipLatest(left_feed, right_feed, config))
    error: Exception | None = None

    async with anyio.create_task_group() as tg:
        tg.start_soon(_pump, left, left_feed, "left")
        tg.start_soon(_pump, right, right_feed, "right")
        try:
            yield pairs
        except Exception as exc:
            error = exc
        finally:
            await pairs.aclose()
            tg.cancel_scope.cancel()

    # Raised outside the task group so callers don't get an ExceptionGroup
    if error is not None:
        raise error
