"""Wake registration for pollable streams.

A stream that answers ``PENDING`` keeps the ``Waker`` from the context it
was polled with and calls ``wake()`` once it may have progress. Whoever
drives the stream re-polls after the wake.
"""

from collections.abc import Callable
from dataclasses import dataclass


def _ignore() -> None:
    return None


@dataclass(frozen=True, slots=True)
class Waker:
    """Notifies the driver that a pending stream should be polled again."""

    callback: Callable[[], object]

    def wake(self) -> None:
        self.callback()

    @classmethod
    def noop(cls) -> "Waker":
        """A waker that does nothing, for synchronous draining."""
        return cls(_ignore)


@dataclass(frozen=True, slots=True)
class Context:
    """Per-poll context handed down to every source."""

    waker: Waker

    @classmethod
    def noop(cls) -> "Context":
        return cls(Waker.noop())
