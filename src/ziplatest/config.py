"""Combinator configuration.

ZipConfig is a frozen dataclass, immutable after creation and validated
when it is built.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ziplatest.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class ZipConfig:
    """Configuration for a ``ZipLatest`` stream.

    All fields have defaults. Override what you need::

        config = ZipConfig(name="prices", clone=copy.deepcopy)
    """

    # Label used in log records and repr
    name: str = "zip_latest"

    # Applied to each side's value on every emitted pair. The same value can
    # be paired many times, so mutable payloads want copy.copy or deepcopy.
    # None shares the reference.
    clone: Callable[[Any], Any] | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("ZipConfig.name must be a non-empty string")
        if self.clone is not None and not callable(self.clone):
            raise ConfigurationError(
                f"ZipConfig.clone must be callable, got {type(self.clone).__name__}"
            )

    def duplicate(self, value: Any) -> Any:
        """Return the value to place in an emitted pair."""
        if self.clone is None:
            return value
        return self.clone(value)
