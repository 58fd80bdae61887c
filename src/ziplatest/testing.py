"""Test utilities for ziplatest streams.

``ScriptedSource`` replays a fixed script of outcomes, one per poll, and
records how it was polled. ``drain`` and ``drain_outcomes`` run a stream
synchronously with a no-op waker::

    from ziplatest import PENDING, zip_latest
    from ziplatest.testing import ScriptedSource, drain

    left = ScriptedSource(0, 1, PENDING, 2)
    assert drain(zip_latest(left, [0, 1, 2])) == [(0, 0), (1, 1), (1, 2), (2, 2)]
"""

from collections import deque
from typing import Any

from ziplatest.context import Context, Waker
from ziplatest.poll import DONE, PENDING, Done, Failed, Pending, Poll, Ready
from ziplatest.stream import Stream


class ScriptedSource[T]:
    """A stream that answers each poll with the next step of a script.

    Steps are plain values (``Ready``), ``PENDING``, ``DONE``, or exception
    instances (``Failed``). Once the script runs out, or a ``DONE`` step is
    reached, every poll answers ``DONE`` and is counted in
    ``polls_after_done``.
    """

    def __init__(self, *steps: Any) -> None:
        self._steps: deque[Any] = deque(steps)
        self._done = False
        self.polls = 0
        self.polls_after_done = 0
        self.closed = False
        self.waker: Waker | None = None

    def poll_next(self, cx: Context) -> Poll[T]:
        self.polls += 1
        if self._done:
            self.polls_after_done += 1
            return DONE
        if not self._steps:
            self._done = True
            return DONE
        step = self._steps.popleft()
        if isinstance(step, BaseException):
            return Failed(step)
        if isinstance(step, Done):
            self._done = True
            return DONE
        if isinstance(step, Pending):
            self.waker = cx.waker
            return PENDING
        return Ready(step)

    def wake(self) -> None:
        """Call the waker registered by the last pending poll, if any."""
        waker, self.waker = self.waker, None
        if waker is not None:
            waker.wake()

    def close(self) -> None:
        self.closed = True


def drain_outcomes[T](stream: Stream[T], *, max_polls: int = 10_000) -> list[Poll[T]]:
    """Poll until ``Done`` or ``Failed`` and return every non-pending outcome.

    The terminal outcome is the last element.
    """
    cx = Context.noop()
    outcomes: list[Poll[T]] = []
    for _ in range(max_polls):
        outcome = stream.poll_next(cx)
        if isinstance(outcome, Pending):
            continue
        outcomes.append(outcome)
        if isinstance(outcome, (Done, Failed)):
            return outcomes
    msg = f"stream did not finish within {max_polls} polls"
    raise RuntimeError(msg)


def drain[T](stream: Stream[T], *, max_polls: int = 10_000) -> list[T]:
    """Poll to completion and return the items. A ``Failed`` is raised."""
    items: list[T] = []
    for outcome in drain_outcomes(stream, max_polls=max_polls):
        match outcome:
            case Ready(value):
                items.append(value)
            case Failed(error):
                raise error
    return items
