"""Stream adapters for the common kinds of input.

- ``IterSource`` turns a synchronous iterable into a stream that is never
  pending.
- ``Channel`` is a push-driven live feed: producers in other tasks call
  ``send()``, the consumer side polls it like any other stream.

Both adapters report upstream exceptions as ``Failed(error)`` so the error
travels through the poll contract instead of unwinding the driver mid-poll.
"""

from collections import deque
from collections.abc import Iterable, Iterator

from ziplatest.context import Context, Waker
from ziplatest.errors import ChannelClosedError
from ziplatest.poll import DONE, PENDING, Failed, Poll, Ready


class IterSource[T]:
    """A synchronous iterable exposed as a stream."""

    __slots__ = ("_iterator",)

    def __init__(self, iterable: Iterable[T]) -> None:
        self._iterator: Iterator[T] = iter(iterable)

    def poll_next(self, cx: Context) -> Poll[T]:
        try:
            value = next(self._iterator)
        except StopIteration:
            return DONE
        except Exception as exc:
            return Failed(exc)
        return Ready(value)

    def __repr__(self) -> str:
        return f"IterSource({self._iterator!r})"


class Channel[T]:
    """Unbounded single-consumer feed with waker registration.

    Values are delivered in the order they were sent. ``close()`` and
    ``fail()`` take effect once the queued values have been drained.

    Usage::

        prices = Channel[float]()
        ...
        prices.send(101.5)     # from a producer task
        prices.close()
    """

    __slots__ = ("_closed", "_error", "_queue", "_waker")

    def __init__(self) -> None:
        self._queue: deque[T] = deque()
        self._closed = False
        self._error: BaseException | None = None
        self._waker: Waker | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, value: T) -> None:
        """Queue a value and wake the consumer."""
        if self._closed:
            raise ChannelClosedError()
        self._queue.append(value)
        self._wake()

    def close(self) -> None:
        """End the feed. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._wake()

    def fail(self, error: BaseException) -> None:
        """End the feed with an upstream failure."""
        if self._closed:
            raise ChannelClosedError("fail on a closed channel")
        self._error = error
        self._closed = True
        self._wake()

    def poll_next(self, cx: Context) -> Poll[T]:
        if self._queue:
            return Ready(self._queue.popleft())
        if self._error is not None:
            return Failed(self._error)
        if self._closed:
            return DONE
        self._waker = cx.waker
        return PENDING

    def _wake(self) -> None:
        waker, self._waker = self._waker, None
        if waker is not None:
            waker.wake()

    def __repr__(self) -> str:
        return f"Channel(queued={len(self._queue)}, closed={self._closed})"
