"""Zip two streams by their latest values.

Each side keeps one ``Slot``: the most recent value it produced and whether
that value has been paired yet (*fresh*). A poll refreshes both slots, then
emits a pair whenever at least one side is fresh::

    left:   0 . 1 . . 2
    right:  0 . 1 2 . .
    pairs: (0,0) (1,1) (1,2) (2,2)

The faster side never waits for the slower one in lockstep: a side that has
nothing new contributes its last value again.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, cast

from ziplatest.config import ZipConfig
from ziplatest.context import Context
from ziplatest.poll import DONE, PENDING, Failed, Poll, Ready
from ziplatest.sources import IterSource
from ziplatest.stream import Fuse, Stream, fuse

logger = logging.getLogger("ziplatest.stream")

_DEFAULT_CONFIG = ZipConfig()


@dataclass(slots=True)
class Slot[T]:
    """Latest value of one side.

    ``fresh`` implies ``filled`` and means the value has not been part of an
    emitted pair yet. A slot is only ever overwritten, never cleared.
    """

    value: T | None = None
    filled: bool = False
    fresh: bool = False

    def put(self, value: T) -> None:
        self.value = value
        self.filled = True
        self.fresh = True


def enqueue[T](source: Fuse[T], slot: Slot[T], cx: Context) -> Failed | None:
    """Refresh *slot* from *source*, polling it at most once.

    A filled, fresh slot is left alone: polling would overwrite a value that
    has not been paired. Returns the ``Failed`` outcome when the source
    fails, else None.
    """
    if slot.filled and slot.fresh:
        return None
    match source.poll_next(cx):
        case Ready(value):
            slot.put(value)
        case Failed() as failure:
            return failure
    return None


class ZipLatest[L, R]:
    """Stream of ``(left, right)`` pairs built from the latest value of each side.

    Ends when both sides are done, or as soon as one side is done without
    ever having produced a value. The second rule ends the stream even if
    the other side still holds unpaired values: there is nothing to pair
    them with.

    A ``Failed`` from either side is returned straight away, left side first.
    No guarantees are made about polls after a failure.
    """

    __slots__ = (
        "_config",
        "_emitted",
        "_finished",
        "_left",
        "_left_slot",
        "_right",
        "_right_slot",
    )

    def __init__(
        self,
        left: Stream[L],
        right: Stream[R],
        config: ZipConfig | None = None,
    ) -> None:
        self._left: Fuse[L] = fuse(left)
        self._right: Fuse[R] = fuse(right)
        self._left_slot: Slot[L] = Slot()
        self._right_slot: Slot[R] = Slot()
        self._config = config or _DEFAULT_CONFIG
        self._emitted = 0
        self._finished = False

    @property
    def config(self) -> ZipConfig:
        return self._config

    @property
    def emitted(self) -> int:
        """Number of pairs emitted so far."""
        return self._emitted

    @property
    def is_done(self) -> bool:
        """Whether no further pair can be produced. Never polls."""
        left_done = self._left.is_done
        right_done = self._right.is_done
        return (
            (left_done and right_done)
            or (left_done and not self._left_slot.filled)
            or (right_done and not self._right_slot.filled)
        )

    def poll_next(self, cx: Context) -> Poll[tuple[L, R]]:
        failure = enqueue(self._left, self._left_slot, cx)
        side = "left"
        if failure is None:
            failure = enqueue(self._right, self._right_slot, cx)
            side = "right"
        if failure is not None:
            logger.debug(
                "%s: upstream failure from %s source: %r",
                self._config.name, side, failure.error,
            )
            return failure

        left, right = self._left_slot, self._right_slot
        fresh = left.fresh or right.fresh
        done = self.is_done

        if left.filled and right.filled and fresh:
            left.fresh = False
            right.fresh = False
            self._emitted += 1
            pair = (
                self._config.duplicate(cast(L, left.value)),
                self._config.duplicate(cast(R, right.value)),
            )
            return Ready(pair)
        if done:
            if not self._finished:
                self._finished = True
                logger.debug(
                    "%s: finished after %d pairs", self._config.name, self._emitted,
                )
            return DONE
        return PENDING

    def close(self) -> None:
        """Close both sources. Further polls are not supported."""
        self._left.close()
        self._right.close()

    def __repr__(self) -> str:
        return (
            f"ZipLatest(name={self._config.name!r}, left={self._left!r}, "
            f"right={self._right!r}, emitted={self._emitted})"
        )


def _as_stream(source: Any) -> Stream[Any]:
    if isinstance(source, Stream):
        return source
    return IterSource(source)


def zip_latest[L, R](
    left: Stream[L] | Iterable[L],
    right: Stream[R] | Iterable[R],
    config: ZipConfig | None = None,
) -> ZipLatest[L, R]:
    """Zip two streams by latest value.

    Plain iterables are accepted on either side and wrapped in
    ``IterSource``::

        from ziplatest.testing import drain

        drain(zip_latest([0, 1, 2], [0, 1]))
        # [(0, 0), (1, 1), (2, 1)]
    """
    return ZipLatest(_as_stream(left), _as_stream(right), config)
