"""Pollable stream protocol and the terminal wrapper.

A *stream* is anything with ``poll_next(cx)`` that answers with one of the
``ziplatest.poll`` variants. Once a stream has answered ``DONE`` it must not
be polled again; ``Fuse`` enforces that for streams that cannot tolerate it.
"""

from typing import Protocol, runtime_checkable

from ziplatest.context import Context
from ziplatest.poll import DONE, Done, Poll


@runtime_checkable
class Stream[T](Protocol):
    """A lazily produced sequence driven by polling."""

    def poll_next(self, cx: Context) -> Poll[T]: ...


class Fuse[T]:
    """Idempotent-terminal wrapper around a stream.

    After the inner stream reports completion, every further poll returns
    ``DONE`` without touching it. A ``Failed`` outcome is passed through and
    does not count as completion.
    """

    __slots__ = ("_done", "_stream")

    def __init__(self, stream: Stream[T]) -> None:
        self._stream = stream
        self._done = False

    @property
    def inner(self) -> Stream[T]:
        return self._stream

    @property
    def is_done(self) -> bool:
        """Whether completion has been observed. Never polls."""
        return self._done

    def poll_next(self, cx: Context) -> Poll[T]:
        if self._done:
            return DONE
        outcome = self._stream.poll_next(cx)
        if isinstance(outcome, Done):
            self._done = True
        return outcome

    def close(self) -> None:
        """Close the inner stream if it supports closing."""
        close = getattr(self._stream, "close", None)
        if close is not None:
            close()

    def __repr__(self) -> str:
        return f"Fuse({self._stream!r}, done={self._done})"


def fuse[T](stream: Stream[T]) -> Fuse[T]:
    """Wrap *stream* in a ``Fuse`` unless it already is one."""
    if isinstance(stream, Fuse):
        return stream
    return Fuse(stream)
