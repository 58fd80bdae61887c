"""Poll outcomes.

Every ``poll_next`` call returns exactly one of four variants::

    Ready(value)   a new item
    DONE           completion, terminal
    PENDING        nothing yet; the context's waker will be called later
    Failed(error)  upstream failure carrying the source's exception

The variants are plain frozen dataclasses so callers dispatch with
``match``::

    match stream.poll_next(cx):
        case Ready(value):
            ...
        case Failed(error):
            raise error
"""

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True)
class Ready[T]:
    """A new item produced by the stream."""

    value: T


@dataclass(frozen=True, slots=True)
class Done:
    """The stream has finished and will not produce another item."""


@dataclass(frozen=True, slots=True)
class Pending:
    """No item is available yet."""


@dataclass(frozen=True, slots=True)
class Failed:
    """The stream failed. ``error`` is the exception it produced."""

    error: BaseException


DONE: Final = Done()
PENDING: Final = Pending()

type Poll[T] = Ready[T] | Done | Pending | Failed
